"""Explicit per-run context handed to importers and writers."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from .utils.dates import utc_now


@dataclass
class ImportContext:
    """Who is importing, and when the last import was committed.

    Passed explicitly instead of living in module globals, so two imports
    in the same process never share an operator or a "last seen" mark.
    """

    user_name: str = 'Sistema'
    last_seen_import_at: Optional[datetime] = None
    today: date = field(default_factory=date.today)

    def mark_seen(self, when: Optional[datetime] = None) -> None:
        self.last_seen_import_at = when or utc_now()
