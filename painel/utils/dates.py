"""Date parsing for spreadsheet and report cells."""

import logging
import numbers
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

import pandas as pd

logger = logging.getLogger(__name__)

# Excel's day zero (the 1900 leap-year bug makes it the 30th, not the 31st)
EXCEL_EPOCH = date(1899, 12, 30)

_BR_DATE = re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{4})$')
_ISO_DATE = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})')


def parse_date(value: Any) -> Optional[date]:
    """Parse a date from the formats found in the workbooks.

    Accepts datetime/date objects, pandas timestamps, Excel serial numbers,
    "DD/MM/YYYY" strings and ISO "YYYY-MM-DD" strings (with or without a
    time part).

    Args:
        value: Raw cell value

    Returns:
        The parsed date, or None when the value is empty or unparseable
    """
    if value is None or value is pd.NaT:
        return None

    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        if pd.isna(value) or value <= 0:
            return None
        try:
            return EXCEL_EPOCH + timedelta(days=int(value))
        except OverflowError:
            logger.debug(f"Excel serial out of range: {value}")
            return None

    text = str(value).strip()
    if not text:
        return None

    try:
        match = _BR_DATE.match(text)
        if match:
            day, month, year = (int(part) for part in match.groups())
            return date(year, month, day)

        match = _ISO_DATE.match(text)
        if match:
            year, month, day = (int(part) for part in match.groups())
            return date(year, month, day)
    except ValueError:
        logger.debug(f"Invalid calendar date: {text}")
        return None

    if text.replace('.', '', 1).isdigit():
        return parse_date(float(text))

    return None


def format_date(value: Optional[date]) -> str:
    """Format a date the way the reports show it (DD/MM/YYYY)."""
    return value.strftime('%d/%m/%Y') if value else ''


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
