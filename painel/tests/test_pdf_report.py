"""Tests for monthly report text parsing."""
from ..parsers.pdf_report import METRIC_DEFINITIONS, parse_report_text, parse_row

PAGE = """Relatório de Indicadores
Ano Mês Empresa Cancelado Em Execução Não Feito Concluído Total Licenças Protocolos Projetos Taxas Contatos
2024 10 SEARA ALIMENTOS 1 2 3 4 10 5 6 7 8 9
2024 10 COCATREL 0 1 0 2 3 0 0 1 0 0
2024 10 SEARA ALIMENTOS LTDA 1 1 1 1 4 0 0 0 0 0
Totais: 2 4 4 7 17 5 6 8 8 9
"""

def test_parse_row():
    assert parse_row('2024 3 AGUA CLARA 1 2 3') == (2024, 3, 'AGUA CLARA', [1, 2, 3])
    assert parse_row('Ano Mês Empresa') is None

def test_parse_report_text():
    report = parse_report_text([PAGE])

    assert report.year == 2024
    assert report.month == 10
    assert report.period_label == '10/2024'
    assert [c.name for c in report.clients] == ['SEARA ALIMENTOS', 'COCATREL']

    seara = report.clients[0]
    assert seara.normalized_name == 'SEARA ALIMENTOS'
    assert seara.source_page == 1
    assert [m.key for m in seara.metrics] == [key for key, _ in METRIC_DEFINITIONS]
    values = {m.key: m.value for m in seara.metrics}
    assert values['cancelado'] == 1
    assert values['total'] == 10
    assert values['contatos'] == 9

def test_rows_split_across_flattened_text():
    """Extracted text may lose line breaks between rows."""
    text = '2024 5 SEARA 1 2 3 4 10 0 0 0 0 0 2024 5 COCATREL 0 0 0 1 1 0 0 0 0 0'
    report = parse_report_text([text])
    assert [c.name for c in report.clients] == ['SEARA', 'COCATREL']
    assert report.clients[1].metrics[3].value == 1

def test_last_row_before_totals_is_kept():
    text = '2024 5 SEARA 1 2 3 4 10 0 0 0 0 0 Totais: 1 2 3 4 10 0 0 0 0 0'
    report = parse_report_text([text])
    assert [c.name for c in report.clients] == ['SEARA']

def test_source_page():
    report = parse_report_text(['2024 5 SEARA 1 2 3', '2024 5 COCATREL 4 5 6'])
    assert [c.source_page for c in report.clients] == [1, 2]

def test_short_names_skipped():
    report = parse_report_text(['2024 5 AB 1 2 3 2024 5 SEARA 1 2 3'])
    assert [c.name for c in report.clients] == ['SEARA']

def test_fallback_recovers_names_without_metrics():
    report = parse_report_text(['Resumo\nSEARA ALIMENTOS 1 2 3\nCOCATREL 4 5 6'])
    assert [c.name for c in report.clients] == ['SEARA ALIMENTOS', 'COCATREL']
    assert report.clients[0].metrics == []
    assert report.period_label is None

def test_empty_report():
    report = parse_report_text([''])
    assert report.clients == []
    assert report.year is None
