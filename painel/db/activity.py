"""Activity feed entries written by imports."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from .models import ActivityLog
from ..context import ImportContext

logger = logging.getLogger(__name__)


def log_activity(
    session: Session,
    context: ImportContext,
    action_type: str,
    entity_type: str,
    description: str,
    entity_id: Optional[str] = None,
    entity_name: Optional[str] = None,
    client_name: Optional[str] = None,
    old_value: Optional[str] = None,
    new_value: Optional[str] = None
) -> ActivityLog:
    """Add an activity entry to the session.

    Args:
        session: Open session; the entry is committed with it
        context: Import context providing the operator name
        action_type: e.g. "import", "create", "link", "delete"
        entity_type: e.g. "demand", "license", "pdf_import"
        description: Human readable summary shown in the feed

    Returns:
        The pending ActivityLog
    """
    entry = ActivityLog(
        user_name=context.user_name,
        action_type=action_type,
        entity_type=entity_type,
        entity_id=entity_id,
        entity_name=entity_name,
        client_name=client_name,
        description=description,
        old_value=old_value,
        new_value=new_value
    )
    session.add(entry)
    logger.debug(f"Activity: {action_type} {entity_type} - {description}")
    return entry
