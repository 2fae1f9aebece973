"""Integration tests for PDF report imports."""
import pytest
from sqlalchemy import select

from ..db.models import ClientAlias, PdfDetectedClient, PdfImport, PdfMetric
from ..exceptions import DuplicateFileError, ImportFileError, ReconciliationError
from ..parsers.pdf_report import parse_report_text
from ..processors.pdf_import import PdfImportService

REPORT = parse_report_text([
    '2024 10 SEARA 1 2 3 4 10 0 0 0 0 0\n'
    '2024 10 COCATREL 0 0 1 0 1 0 0 0 0 0\n'
    '2024 10 AGUA KLARE 0 0 0 2 2 1 0 0 0 0'
])

@pytest.fixture
def service(session_manager, clients, context):
    return PdfImportService(session_manager, context=context)

@pytest.fixture
def report_file(tmp_path):
    path = tmp_path / 'relatorio-outubro.pdf'
    path.write_bytes(b'%PDF-1.4 fake report content')
    return path

def detected_by_name(service, import_id):
    return {d.raw_name: d for d in service.detected_clients(import_id)}

def test_process(service, session_manager, report_file):
    """Exact names are matched, close ones pending, the rest unmatched."""
    import_id = service.create_import(report_file)
    totals = service.process(import_id, REPORT)

    assert totals == {'detected': 3, 'matched': 1, 'pending': 1, 'unmatched': 1}

    detected = detected_by_name(service, import_id)
    assert detected['SEARA'].match_status == 'auto'
    assert detected['SEARA'].matched_client_id == 'c-seara'
    assert detected['AGUA KLARE'].match_status == 'pending'
    assert detected['AGUA KLARE'].suggestions[0]['client_id'] == 'c-agua'
    assert detected['COCATREL'].match_status == 'unmatched'

    with session_manager as session:
        pdf_import = session.get(PdfImport, import_id)
        assert pdf_import.status == 'ready'
        assert pdf_import.period_label == '10/2024'
        assert pdf_import.total_pending == 1
        assert len(session.execute(select(PdfMetric)).scalars().all()) == 30

def test_duplicate_file_rejected(service, report_file):
    service.create_import(report_file)
    with pytest.raises(DuplicateFileError):
        service.create_import(report_file)

def test_unreadable_pdf_marks_failed(service, session_manager, report_file):
    import_id = service.create_import(report_file)
    with pytest.raises(ImportFileError):
        service.process(import_id)
    with session_manager as session:
        pdf_import = session.get(PdfImport, import_id)
        assert pdf_import.status == 'failed'
        assert pdf_import.error_message

def test_matching_failure_marks_failed(service, session_manager, report_file, monkeypatch):
    """A failure after parsing does not leave the import stuck in parsing."""
    def broken_match_all(*args, **kwargs):
        raise RuntimeError('matcher unavailable')

    monkeypatch.setattr(service.matcher, 'match_all', broken_match_all)
    import_id = service.create_import(report_file)
    with pytest.raises(RuntimeError):
        service.process(import_id, REPORT)

    with session_manager as session:
        pdf_import = session.get(PdfImport, import_id)
        assert pdf_import.status == 'failed'
        assert pdf_import.error_message == 'matcher unavailable'
    assert service.detected_clients(import_id) == []

def test_link_with_alias_and_complete(service, session_manager, report_file):
    import_id = service.create_import(report_file)
    service.process(import_id, REPORT)
    pending = detected_by_name(service, import_id)['AGUA KLARE']

    service.link(pending.id, 'c-agua', create_alias=True)
    assert detected_by_name(service, import_id)['AGUA KLARE'].match_status == 'linked'

    count = service.complete(import_id)
    assert count == 2

    with session_manager as session:
        pdf_import = session.get(PdfImport, import_id)
        assert pdf_import.status == 'imported'
        assert pdf_import.imported_at is not None

        alias = session.execute(select(ClientAlias)).scalars().one()
        assert alias.alias_normalized == 'AGUA KLARE'

        linked = session.execute(
            select(PdfMetric).where(PdfMetric.client_id == 'c-agua')
        ).scalars().all()
        assert len(linked) == 10
        assert {m.period_year for m in linked} == {2024}

def test_complete_auto_only(service, report_file):
    import_id = service.create_import(report_file)
    service.process(import_id, REPORT)
    pending = detected_by_name(service, import_id)['AGUA KLARE']
    service.link(pending.id, 'c-agua')
    assert service.complete(import_id, include_linked=False) == 1

def test_complete_without_matches(service, tmp_path):
    path = tmp_path / 'vazio.pdf'
    path.write_bytes(b'another report')
    import_id = service.create_import(path)
    service.process(import_id, parse_report_text(['2024 10 XYZ MINERACAO 1 2 3']))
    with pytest.raises(ReconciliationError):
        service.complete(import_id)

def test_link_unknown_ids(service, report_file):
    import_id = service.create_import(report_file)
    service.process(import_id, REPORT)
    pending = detected_by_name(service, import_id)['AGUA KLARE']
    with pytest.raises(ReconciliationError):
        service.link('missing', 'c-agua')
    with pytest.raises(ReconciliationError):
        service.link(pending.id, 'missing')

def test_delete(service, session_manager, report_file):
    import_id = service.create_import(report_file)
    service.process(import_id, REPORT)
    service.delete(import_id)

    with session_manager as session:
        assert session.get(PdfImport, import_id) is None
        assert session.execute(select(PdfDetectedClient)).scalars().all() == []
        assert session.execute(select(PdfMetric)).scalars().all() == []
    assert service.list_imports() == []
