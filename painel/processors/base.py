"""Base writer for reconciled import records."""
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, Iterable, Optional, Set, Tuple, TypeVar
import logging
import time

from sqlalchemy.orm import Session

from ..context import ImportContext
from ..db.activity import log_activity
from ..db.session import SessionManager
from ..matching.reconciliation import ResolvedImport
from ..utils.dates import utc_now
from .error_tracker import ErrorTracker


class DuplicatePolicy(str, Enum):
    """What to do when an imported record's natural key already exists.

    SKIP leaves the stored row alone. UPDATE writes the writer's selected
    fields, ignoring values the file left empty. OVERWRITE replaces every
    mapped field, clearing the ones the file left empty.
    """
    SKIP = 'skip'
    UPDATE = 'update'
    OVERWRITE = 'overwrite'

    @classmethod
    def parse(cls, value) -> 'DuplicatePolicy':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ', '.join(policy.value for policy in cls)
            raise ValueError(f"duplicate policy must be one of: {valid}")


class WriteStats:
    """Counters for one bulk write."""
    
    COUNTERS = ('imported', 'updated', 'skipped', 'failed', 'excluded')

    def __init__(self):
        """Initialize stats with default values."""
        self._stats = {name: 0 for name in self.COUNTERS}
        self._stats.update({
            'processing_time': 0.0,
            'started_at': utc_now(),
            'completed_at': None
        })
        self.affected_clients: Set[str] = set()
    
    def __getitem__(self, key: str) -> Any:
        return self._stats[key]
    
    def __getattr__(self, name: str) -> Any:
        """Get stat value by attribute name."""
        stats = self.__dict__.get('_stats', {})
        if name in stats:
            return stats[name]
        raise AttributeError(name)
    
    def __setattr__(self, name: str, value: Any) -> None:
        """Set stat value by attribute name."""
        if name in ('_stats', 'affected_clients'):
            super().__setattr__(name, value)
        else:
            self._stats[name] = value

    def count(self, outcome: str) -> None:
        self._stats[outcome] += 1
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary format."""
        result = {}
        for key, value in self._stats.items():
            if isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, float):
                result[key] = round(value, 3)
            else:
                result[key] = value
        result['affected_clients'] = len(self.affected_clients)
        return result


R = TypeVar('R')


class BulkWriter(ABC, Generic[R]):
    """Write reconciled records one at a time.

    Each record is written in its own session, so a failure affects only
    that record: it is logged, counted and the batch moves on. Once every
    record has been handled the denormalized counters of each affected
    client are recomputed exactly once.
    """

    entity_type = 'record'
    model = None
    # Mapped fields replaced by OVERWRITE
    overwrite_fields: Tuple[str, ...] = ()
    # Subset written by UPDATE
    update_fields: Tuple[str, ...] = ()

    def __init__(
        self,
        session_manager: SessionManager,
        policy: DuplicatePolicy = DuplicatePolicy.SKIP,
        context: Optional[ImportContext] = None,
        debug: bool = False
    ):
        """Initialize writer.
        
        Args:
            session_manager: Database session manager
            policy: Duplicate handling policy
            context: Operator and run information for the activity log
            debug: Enable debug logging
        """
        self.session_manager = session_manager
        self.policy = DuplicatePolicy.parse(policy)
        self.context = context or ImportContext()
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)
        self.stats = WriteStats()
        self.error_tracker = ErrorTracker()

        if self.debug:
            self.logger.debug(f"Initialized {self.__class__.__name__} with policy={self.policy.value}")

    @abstractmethod
    def find_existing(self, session: Session, record: R):
        """Return the stored row sharing the record's natural key, if any."""
        pass

    @abstractmethod
    def to_values(self, record: R, client_id: Optional[str]) -> Dict[str, Any]:
        """Map a record onto model column values."""
        pass

    @abstractmethod
    def recalculate(self, session: Session, client_id: str) -> None:
        """Recompute the aggregates of one client."""
        pass

    def describe(self, record: R) -> str:
        return getattr(record, 'empresa', '?')

    def write(self, records: Iterable[R], resolved: ResolvedImport) -> Dict[str, Any]:
        """Write records whose company survived reconciliation.
        
        Args:
            records: Parsed records
            resolved: Outcome of the reconciliation session
            
        Returns:
            Stats dictionary with imported/updated/skipped/failed counts
        """
        start_time = time.time()

        for record in records:
            if not resolved.includes(record.empresa):
                self.stats.excluded += 1
                continue

            client_id = resolved.client_for(record.empresa)
            try:
                with self.session_manager as session:
                    outcome = self.write_one(session, record, client_id)
            except Exception as e:
                self.logger.error(f"Failed to write {self.entity_type} {self.describe(record)}: {str(e)}")
                self.error_tracker.add_error(
                    'WRITE_ERROR',
                    str(e),
                    {'empresa': record.empresa, 'row': getattr(record, 'row_number', None)}
                )
                self.stats.failed += 1
                continue

            self.stats.count(outcome)
            if client_id and outcome != 'skipped':
                self.stats.affected_clients.add(client_id)
            if self.debug:
                self.logger.debug(f"{outcome}: {self.describe(record)}")

        self.recalculate_all()
        self.record_activity()

        self.stats.processing_time = time.time() - start_time
        self.stats.completed_at = utc_now()
        self.logger.info(
            f"{self.entity_type}: {self.stats.imported} imported, {self.stats.updated} updated, "
            f"{self.stats.skipped} skipped, {self.stats.failed} failed"
        )
        self.error_tracker.log_summary(self.logger)
        return self.stats.to_dict()

    def write_one(self, session: Session, record: R, client_id: Optional[str]) -> str:
        """Insert or apply the duplicate policy to one record.

        A record moved to another client also marks its previous client as
        affected, so both get their counters recomputed.

        Returns:
            "imported", "updated" or "skipped"
        """
        values = self.to_values(record, client_id)
        existing = self.find_existing(session, record)

        if existing is None:
            session.add(self.model(**values))
            return 'imported'

        if self.policy == DuplicatePolicy.SKIP:
            return 'skipped'

        previous_client_id = getattr(existing, 'client_id', None)
        if self.policy == DuplicatePolicy.UPDATE:
            for name in self.update_fields:
                value = values.get(name)
                if value is not None and value != '':
                    setattr(existing, name, value)
        else:
            for name in self.overwrite_fields:
                setattr(existing, name, values.get(name))

        if previous_client_id and previous_client_id != getattr(existing, 'client_id', None):
            self.stats.affected_clients.add(previous_client_id)
        return 'updated'

    def recalculate_all(self) -> None:
        """Recompute aggregates once per affected client."""
        for client_id in sorted(self.stats.affected_clients):
            try:
                with self.session_manager as session:
                    self.recalculate(session, client_id)
            except Exception as e:
                self.logger.error(f"Failed to recalculate counters for client {client_id}: {str(e)}")
                self.error_tracker.add_error('RECALCULATION_ERROR', str(e), {'client_id': client_id})

    def record_activity(self) -> None:
        description = (
            f"Importação de {self.entity_type}: {self.stats.imported} importados, "
            f"{self.stats.updated} atualizados, {self.stats.skipped} ignorados"
        )
        try:
            with self.session_manager as session:
                log_activity(
                    session,
                    self.context,
                    action_type='import',
                    entity_type=self.entity_type,
                    description=description,
                    new_value=str(self.stats.imported + self.stats.updated)
                )
        except Exception as e:
            self.logger.error(f"Failed to record import activity: {str(e)}")

    def get_stats(self) -> Dict[str, Any]:
        """Get processing statistics."""
        return self.stats.to_dict()
