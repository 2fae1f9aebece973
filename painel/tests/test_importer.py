"""End-to-end tests for spreadsheet imports."""
import pytest
from sqlalchemy import select

from ..db.models import ActivityLog, Client, ClientAlias, Demand
from ..importer import SpreadsheetImporter
from ..matching.matcher import MatchType
from ..matching.reconciliation import ItemState, auto_resolve
from ..processors.base import DuplicatePolicy
from .conftest import create_test_xlsx, get_client

ROWS = [
    {'Código': 'D-1', 'Empresa': 'Seara', 'Descrição': 'Renovar outorga', 'Status': 'Concluído'},
    {'Código': 'D-2', 'Empresa': 'SEARA LTDA', 'Descrição': 'Relatório', 'Status': 'Em execução'},
    {'Código': 'D-3', 'Empresa': 'Cocatrel', 'Descrição': 'Visita', 'Status': 'Não feito'},
    {'Código': 'D-4', 'Empresa': 'Xyz Ltda', 'Descrição': 'Cadastro', 'Status': None}
]

@pytest.fixture
def workbook(tmp_path):
    return create_test_xlsx(tmp_path / 'demandas.xlsx', ROWS)

def test_load(session_manager, clients, context, workbook):
    importer = SpreadsheetImporter(session_manager, 'demands', context=context)
    run = importer.load(workbook)

    assert len(run.records) == 4
    assert list(run.groups) == ['Seara', 'SEARA LTDA', 'Cocatrel', 'Xyz Ltda']
    types = {r.source_name: r.match_type for r in run.results}
    assert types['Seara'] == MatchType.EXACT
    assert types['SEARA LTDA'] == MatchType.EXACT
    assert types['Cocatrel'] == MatchType.SUGGESTED
    assert len(run.records_for('Seara')) == 1

def test_commit_excludes_pending(session_manager, clients, context, workbook):
    importer = SpreadsheetImporter(session_manager, 'demands', context=context)
    run = importer.load(workbook)
    stats = importer.commit(run)

    assert stats['imported'] == 2
    assert stats['excluded'] == 2
    assert stats['clients_created'] == 0
    assert get_client(session_manager, 'c-seara').total_demands == 2
    assert context.last_seen_import_at is not None

def test_commit_with_operator_choices(session_manager, clients, context, workbook):
    """Links, remembered aliases and new clients all reach the database."""
    importer = SpreadsheetImporter(session_manager, 'demands', context=context)
    run = importer.load(workbook)
    run.reconciliation.link('Cocatrel', 'c-cocatrel', remember=True)
    item = run.reconciliation.create_new('Xyz Ltda')
    stats = importer.commit(run, DuplicatePolicy.SKIP)

    assert stats['imported'] == 4
    assert stats['clients_created'] == 1

    with session_manager as session:
        new_client = session.get(Client, item.target_id)
        assert new_client.name == 'Xyz Ltda'
        assert new_client.initials == 'XL'
        assert new_client.demands_not_started == 1

        alias = session.execute(select(ClientAlias)).scalars().one()
        assert alias.alias_normalized == 'COCATREL'
        assert alias.client_id == 'c-cocatrel'

        actions = [a.action_type for a in session.execute(select(ActivityLog)).scalars()]
        assert 'create' in actions and 'import' in actions

    # The remembered spelling now matches exactly
    rerun = importer.load(workbook)
    cocatrel = next(r for r in rerun.results if r.source_name == 'Cocatrel')
    assert cocatrel.match_type == MatchType.EXACT
    assert cocatrel.via_alias

def test_commit_auto_resolved(session_manager, clients, context, workbook):
    importer = SpreadsheetImporter(session_manager, 'demands', context=context)
    run = importer.load(workbook)
    auto_resolve(run.reconciliation, accept_suggestions=True, create_missing=True)
    assert run.reconciliation.item('Xyz Ltda').state == ItemState.CREATE_NEW

    stats = importer.commit(run)
    assert stats['imported'] == 4
    with session_manager as session:
        assert len(session.execute(select(Demand)).scalars().all()) == 4

def test_keep_unmatched(session_manager, clients, context, workbook):
    importer = SpreadsheetImporter(session_manager, 'demands', context=context)
    run = importer.load(workbook)
    stats = importer.commit(run, keep_unmatched=True)

    assert stats['imported'] == 4
    with session_manager as session:
        orphan = session.execute(select(Demand).where(Demand.codigo == 'D-4')).scalars().one()
        assert orphan.client_id is None

def test_unknown_kind(session_manager):
    with pytest.raises(ValueError):
        SpreadsheetImporter(session_manager, 'invoices')
