"""Tests for header detection, cell text and date parsing."""
from datetime import date, datetime, timedelta, timezone

import pandas as pd
import pytest

from ..exceptions import ImportFileError
from ..utils.columns import cell_text, find_column, map_columns, select_sheet
from ..utils.dates import format_date, parse_date, utc_now

def test_cell_text():
    assert cell_text(None) == ''
    assert cell_text(float('nan')) == ''
    assert cell_text(123.0) == '123'
    assert cell_text(1.5) == '1.5'
    assert cell_text('  Seara ') == 'Seara'
    assert cell_text(42) == '42'

def test_find_column():
    """Aliases are tried in priority order, ignoring case and accents."""
    headers = ['Código', 'EMPRESA', 'Descrição', 'Status']
    assert find_column(headers, ['Empresa']) == 1
    assert find_column(headers, ['Descricao']) == 2
    assert find_column(headers, ['Missing']) == -1

    # The first alias wins even when a later alias appears earlier
    headers = ['Cliente', 'Empresa']
    assert find_column(headers, ['Empresa', 'Cliente']) == 1

def test_find_column_contains():
    headers = ['Nome da Empresa', 'Nº da notificação (SEI)', 'Situação atual']
    assert find_column(headers, ['Empresa'], contains=True) == 0
    assert find_column(headers, ['Nº da notificação'], contains=True) == 1
    assert find_column(headers, ['Situação'], contains=True) == 2
    assert find_column(headers, ['Empresa']) == -1

def test_column_map():
    columns = map_columns(['Empresa', 'Status'], {'empresa': ['Empresa'], 'codigo': ['Código']})
    row = ['Seara', None]
    assert columns.has('empresa')
    assert not columns.has('codigo')
    assert columns.text(row, 'empresa') == 'Seara'
    assert columns.get(row, 'codigo') is None
    assert columns.optional(row, 'empresa') == 'Seara'

    with pytest.raises(ImportFileError, match='codigo'):
        columns.require('empresa', 'codigo')

def test_select_sheet():
    assert select_sheet(['Resumo', 'Dados', 'Outros']) == 'Dados'
    assert select_sheet(['Resumo', 'data']) == 'data'
    assert select_sheet(['Planilha1', 'Planilha2']) == 'Planilha1'
    assert select_sheet([]) is None

def test_parse_date():
    """Dates come as objects, Excel serials or text."""
    assert parse_date(date(2024, 3, 5)) == date(2024, 3, 5)
    assert parse_date(datetime(2024, 3, 5, 14, 30)) == date(2024, 3, 5)
    assert parse_date(pd.Timestamp('2024-03-05')) == date(2024, 3, 5)
    assert parse_date(45356) == date(2024, 3, 5)
    assert parse_date(45356.75) == date(2024, 3, 5)
    assert parse_date('45356') == date(2024, 3, 5)
    assert parse_date('05/03/2024') == date(2024, 3, 5)
    assert parse_date('5/3/2024') == date(2024, 3, 5)
    assert parse_date('2024-03-05') == date(2024, 3, 5)
    assert parse_date('2024-03-05T10:00:00') == date(2024, 3, 5)

def test_parse_date_invalid():
    assert parse_date(None) is None
    assert parse_date('') is None
    assert parse_date('sem data') is None
    assert parse_date('31/02/2024') is None
    assert parse_date(pd.NaT) is None
    assert parse_date(float('nan')) is None
    assert parse_date(0) is None
    assert parse_date(True) is None

def test_format_date():
    assert format_date(date(2024, 3, 5)) == '05/03/2024'
    assert format_date(None) == ''

def test_utc_now_is_naive_utc():
    now = utc_now()
    assert now.tzinfo is None
    assert abs(datetime.now(timezone.utc).replace(tzinfo=None) - now) < timedelta(seconds=5)
