"""Import of the monthly PDF report into the dashboard."""
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
import logging

from sqlalchemy import select

from ..context import ImportContext
from ..db.activity import log_activity
from ..db.lookups import load_aliases, load_targets, save_alias
from ..db.models import Client, PdfDetectedClient, PdfImport, PdfMetric
from ..db.session import SessionManager
from ..exceptions import DuplicateFileError, ReconciliationError
from ..matching.matcher import Matcher, MatchResult, MatchType
from ..matching.similarity import similarity_score
from ..parsers.pdf_report import ParsedReport, file_sha256, parse_pdf
from ..utils.dates import utc_now

# Reports are matched conservatively: names in the PDF are upper-case
# abbreviations, so only close spellings are suggested
PDF_AUTO_ACCEPT = 0.9
PDF_SUGGEST = 0.7
PDF_MAX_SUGGESTIONS = 3


def pdf_matcher() -> Matcher:
    return Matcher(
        auto_accept_score=PDF_AUTO_ACCEPT,
        suggest_threshold=PDF_SUGGEST,
        max_suggestions=PDF_MAX_SUGGESTIONS,
        scorer=similarity_score
    )


def match_status(result: MatchResult) -> str:
    """Map a match result onto the detected-client status."""
    if result.match_type == MatchType.EXACT:
        return 'linked' if result.via_alias else 'auto'
    if result.selected:
        return 'auto'
    if result.suggestions:
        return 'pending'
    return 'unmatched'


class PdfImportService:
    """Upload, match, review and complete PDF report imports."""

    def __init__(
        self,
        session_manager: SessionManager,
        matcher: Optional[Matcher] = None,
        context: Optional[ImportContext] = None,
        debug: bool = False
    ):
        self.session_manager = session_manager
        self.matcher = matcher or pdf_matcher()
        self.context = context or ImportContext()
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)

    def create_import(self, path: Union[str, Path]) -> str:
        """Register a report file, refusing one that was already imported.

        Returns:
            Id of the new pdf_imports row

        Raises:
            DuplicateFileError: If a report with the same content exists
        """
        path = Path(path)
        file_hash = file_sha256(path)

        with self.session_manager as session:
            existing = session.execute(
                select(PdfImport).where(PdfImport.file_hash == file_hash)
            ).scalars().first()
            if existing is not None:
                raise DuplicateFileError(existing.filename, existing.created_at)

            pdf_import = PdfImport(
                filename=path.name,
                file_path=str(path),
                file_hash=file_hash,
                status='uploaded',
                created_by=self.context.user_name
            )
            session.add(pdf_import)
            session.flush()
            import_id = pdf_import.id

        self.logger.info(f"Registered report {path.name} ({import_id})")
        return import_id

    def process(self, import_id: str, report: Optional[ParsedReport] = None) -> Dict[str, int]:
        """Parse the report, match its clients and store the results.

        Args:
            import_id: pdf_imports id
            report: Already parsed report; parsed from the stored file when omitted

        Returns:
            Totals of detected, matched, pending and unmatched clients
        """
        self._set_status(import_id, 'parsing')

        try:
            if report is None:
                with self.session_manager as session:
                    file_path = self._get_import(session, import_id).file_path
                report = parse_pdf(file_path)
            totals = self._store_matches(import_id, report)
        except Exception as e:
            self._set_status(import_id, 'failed', error_message=str(e))
            raise

        self.logger.info(
            f"Report {import_id}: {totals['detected']} clients, {totals['matched']} matched, "
            f"{totals['pending']} pending, {totals['unmatched']} unmatched"
        )
        return totals

    def _store_matches(self, import_id: str, report: ParsedReport) -> Dict[str, int]:
        """Match the report's companies and store detected clients and metrics."""
        with self.session_manager as session:
            targets = load_targets(session)
            aliases = load_aliases(session)

        names = [client.name for client in report.clients]
        results = self.matcher.match_all(names, targets, aliases)

        totals = {'detected': len(results), 'matched': 0, 'pending': 0, 'unmatched': 0}
        with self.session_manager as session:
            pdf_import = self._get_import(session, import_id)
            for client, result in zip(report.clients, results):
                status = match_status(result)
                if status in ('auto', 'linked'):
                    totals['matched'] += 1
                else:
                    totals[status] += 1

                detected = PdfDetectedClient(
                    pdf_import_id=import_id,
                    raw_name=client.name,
                    normalized_name=client.normalized_name,
                    matched_client_id=result.matched_id if status in ('auto', 'linked') else None,
                    match_score=result.score if result.score else None,
                    match_status=status,
                    suggestions=[
                        {'client_id': c.target_id, 'client_name': c.target_name, 'score': round(c.score, 3)}
                        for c in result.suggestions
                    ]
                )
                session.add(detected)
                session.flush()

                for metric in client.metrics:
                    session.add(PdfMetric(
                        pdf_import_id=import_id,
                        detected_client_id=detected.id,
                        metric_key=metric.key,
                        metric_label=metric.label,
                        value=metric.value,
                        period_year=report.year,
                        period_month=report.month
                    ))

            pdf_import.status = 'ready'
            pdf_import.period_label = report.period_label
            pdf_import.total_clients_detected = totals['detected']
            pdf_import.total_matched = totals['matched']
            pdf_import.total_pending = totals['pending']
            pdf_import.total_unmatched = totals['unmatched']
        return totals

    def import_file(self, path: Union[str, Path]) -> Tuple[str, Dict[str, int]]:
        """create_import() followed by process()."""
        import_id = self.create_import(path)
        return import_id, self.process(import_id)

    def link(self, detected_id: str, client_id: str, create_alias: bool = False) -> None:
        """Link a detected name to a client, optionally remembering the spelling."""
        with self.session_manager as session:
            detected = session.get(PdfDetectedClient, detected_id)
            if detected is None:
                raise ReconciliationError(f"unknown detected client: {detected_id}")
            client = session.get(Client, client_id)
            if client is None:
                raise ReconciliationError(f"unknown client: {client_id}")

            detected.matched_client_id = client_id
            detected.match_status = 'linked'
            if create_alias:
                save_alias(session, detected.normalized_name, client_id, self.context.user_name)

            log_activity(
                session,
                self.context,
                action_type='link',
                entity_type='pdf_detected_client',
                entity_id=detected_id,
                entity_name=detected.raw_name,
                client_name=client.name,
                description=f"Vinculou {detected.raw_name} a {client.name}"
            )

    def complete(self, import_id: str, include_linked: bool = True) -> int:
        """Attach metrics of matched clients and mark the import as imported.

        Args:
            import_id: pdf_imports id
            include_linked: Include manually linked clients, not only auto matches

        Returns:
            Number of clients imported

        Raises:
            ReconciliationError: If no detected client qualifies
        """
        statuses = ['auto', 'linked'] if include_linked else ['auto']
        with self.session_manager as session:
            pdf_import = self._get_import(session, import_id)
            detected = session.execute(
                select(PdfDetectedClient).where(
                    PdfDetectedClient.pdf_import_id == import_id,
                    PdfDetectedClient.match_status.in_(statuses)
                )
            ).scalars().all()
            if not detected:
                raise ReconciliationError("no clients to import")

            for item in detected:
                for metric in session.execute(
                    select(PdfMetric).where(PdfMetric.detected_client_id == item.id)
                ).scalars():
                    metric.client_id = item.matched_client_id

            pdf_import.status = 'imported'
            pdf_import.imported_at = utc_now()
            pdf_import.total_matched = len(detected)

            log_activity(
                session,
                self.context,
                action_type='import',
                entity_type='pdf_import',
                entity_id=import_id,
                entity_name=pdf_import.filename,
                description=f'Importou PDF "{pdf_import.filename}" com {len(detected)} clientes'
            )

        self.logger.info(f"Completed report import {import_id} with {len(detected)} clients")
        return len(detected)

    def delete(self, import_id: str) -> None:
        """Delete an import with its detected clients and metrics."""
        with self.session_manager as session:
            pdf_import = self._get_import(session, import_id)
            session.delete(pdf_import)
        self.logger.info(f"Deleted report import {import_id}")

    def list_imports(self, limit: int = 20) -> List[PdfImport]:
        with self.session_manager as session:
            return list(session.execute(
                select(PdfImport).order_by(PdfImport.created_at.desc()).limit(limit)
            ).scalars())

    def detected_clients(self, import_id: str) -> List[PdfDetectedClient]:
        with self.session_manager as session:
            return list(session.execute(
                select(PdfDetectedClient)
                .where(PdfDetectedClient.pdf_import_id == import_id)
                .order_by(PdfDetectedClient.raw_name)
            ).scalars())

    def _get_import(self, session, import_id: str) -> PdfImport:
        pdf_import = session.get(PdfImport, import_id)
        if pdf_import is None:
            raise ReconciliationError(f"unknown PDF import: {import_id}")
        return pdf_import

    def _set_status(self, import_id: str, status: str, error_message: Optional[str] = None) -> None:
        with self.session_manager as session:
            pdf_import = self._get_import(session, import_id)
            pdf_import.status = status
            if error_message:
                pdf_import.error_message = error_message
        if self.debug:
            self.logger.debug(f"Import {import_id} -> {status}")
