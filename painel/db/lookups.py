"""Typed lookups shared by the spreadsheet and PDF importers."""
import logging
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import Client, ClientAlias
from ..matching.matcher import Target

logger = logging.getLogger(__name__)


def load_targets(session: Session) -> List[Target]:
    """Active clients in dashboard order."""
    clients = session.execute(
        select(Client)
        .where(Client.is_active.is_(True))
        .order_by(Client.display_order, Client.name)
    ).scalars()
    return [client.as_target() for client in clients]


def load_aliases(session: Session) -> Dict[str, str]:
    """Normalized alias -> client id."""
    rows = session.execute(select(ClientAlias.alias_normalized, ClientAlias.client_id)).all()
    return {alias: client_id for alias, client_id in rows}


def save_alias(session: Session, alias_normalized: str, client_id: str, created_by: Optional[str] = None) -> ClientAlias:
    """Create or repoint an alias."""
    alias = session.execute(
        select(ClientAlias).where(ClientAlias.alias_normalized == alias_normalized)
    ).scalars().first()
    if alias is None:
        alias = ClientAlias(alias_normalized=alias_normalized, client_id=client_id, created_by=created_by)
        session.add(alias)
    else:
        alias.client_id = client_id
    logger.debug(f"Alias {alias_normalized!r} -> {client_id}")
    return alias
