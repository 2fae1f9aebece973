"""Spreadsheet import pipeline: parse, match, reconcile, write."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .context import ImportContext
from .db.activity import log_activity
from .db.lookups import load_aliases, load_targets, save_alias
from .db.models import Client
from .db.session import SessionManager
from .matching.matcher import Matcher, MatchResult, Target
from .matching.reconciliation import ReconciliationSession, ResolvedImport
from .parsers import (
    group_by_company,
    parse_condicionantes,
    parse_demands,
    parse_licenses,
    parse_notification_items,
    parse_notifications,
    parse_processes
)
from .processors.base import DuplicatePolicy
from .processors.writers import WRITERS, create_writer

logger = logging.getLogger(__name__)

IMPORT_KINDS = tuple(WRITERS)


@dataclass
class ImportRun:
    """One loaded file waiting for reconciliation and commit."""
    kind: str
    path: Path
    records: List[Any]
    groups: Dict[str, List[Any]]
    results: List[MatchResult]
    reconciliation: ReconciliationSession
    stats: Dict[str, Any] = field(default_factory=dict)

    def records_for(self, source_name: str) -> List[Any]:
        return self.groups.get(source_name, [])


class SpreadsheetImporter:
    """Import one kind of workbook into the dashboard."""

    def __init__(
        self,
        session_manager: SessionManager,
        kind: str,
        matcher: Optional[Matcher] = None,
        context: Optional[ImportContext] = None,
        debug: bool = False
    ):
        """Initialize importer.

        Args:
            session_manager: Database session manager
            kind: One of IMPORT_KINDS
            matcher: Matcher with the thresholds to use
            context: Operator and run information
            debug: Enable debug logging
        """
        if kind not in WRITERS:
            raise ValueError(f"unknown import kind {kind!r}; expected one of: {', '.join(IMPORT_KINDS)}")
        self.session_manager = session_manager
        self.kind = kind
        self.matcher = matcher or Matcher(debug=debug)
        self.context = context or ImportContext()
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)

    def parse(self, path: Union[str, Path]) -> List[Any]:
        parsers: Dict[str, Callable] = {
            'demands': parse_demands,
            'licenses': lambda p: parse_licenses(p, self.context.today),
            'processes': parse_processes,
            'notifications': parse_notifications,
            'notification-items': parse_notification_items,
            'condicionantes': parse_condicionantes
        }
        return parsers[self.kind](path)

    def load(self, path: Union[str, Path]) -> ImportRun:
        """Parse a file and match its companies against the clients.

        Raises:
            ImportFileError: If the file cannot be parsed
        """
        path = Path(path)
        records = self.parse(path)
        groups = group_by_company(records)

        with self.session_manager as session:
            targets = load_targets(session)
            aliases = load_aliases(session)

        results = self.matcher.match_all(list(groups), targets, aliases)
        reconciliation = ReconciliationSession(results, targets, create_target=self.create_client)

        counts = reconciliation.counts()
        self.logger.info(
            f"Loaded {len(records)} {self.kind} records for {len(groups)} companies from {path.name}: "
            f"{counts['auto_matched']} matched, {counts['suggested']} suggested, {counts['unmatched']} unmatched"
        )
        return ImportRun(
            kind=self.kind,
            path=path,
            records=records,
            groups=groups,
            results=results,
            reconciliation=reconciliation
        )

    def create_client(self, name: str) -> Target:
        """Insert a client for an unmatched company and return it."""
        with self.session_manager as session:
            client = Client.create(name)
            session.add(client)
            log_activity(
                session,
                self.context,
                action_type='create',
                entity_type='client',
                entity_id=client.id,
                entity_name=client.name,
                client_name=client.name,
                description=f"Cliente {client.name} criado durante importação"
            )
            target = client.as_target()
        self.logger.info(f"Created client {target.name}")
        return target

    def commit(
        self,
        run: ImportRun,
        policy: DuplicatePolicy = DuplicatePolicy.SKIP,
        keep_unmatched: bool = False
    ) -> Dict[str, Any]:
        """Confirm the reconciliation and write the records.

        Returns:
            Writer stats plus an error summary
        """
        resolved = run.reconciliation.confirm(keep_unmatched=keep_unmatched)
        self.save_aliases(resolved)

        writer = create_writer(self.kind, self.session_manager, policy, self.context, self.debug)
        stats = writer.write(run.records, resolved)
        stats['errors'] = writer.error_tracker.get_summary()
        stats['clients_created'] = len(resolved.created)
        run.stats = stats
        self.context.mark_seen()
        return stats

    def save_aliases(self, resolved: ResolvedImport) -> None:
        if not resolved.aliases:
            return
        with self.session_manager as session:
            for alias, client_id in resolved.aliases:
                save_alias(session, alias, client_id, self.context.user_name)
        self.logger.info(f"Saved {len(resolved.aliases)} client aliases")
