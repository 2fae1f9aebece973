"""Change notifications for committed rows.

A ChangeFeed hooks into the session factory of a SessionManager and, once a
transaction commits, publishes one ChangeEvent per inserted, updated or
deleted row to every matching Subscription. Session events only see commits
made through that SessionManager; a ClientWatcher polls the clients table
and publishes a REFRESH event when another process changed it. Listeners
such as ClientCache consume a subscription to keep local state current.
"""
import logging
import queue
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from sqlalchemy import event, func, select
from sqlalchemy.orm import Session

from .models import Client
from .session import SessionManager
from ..matching.matcher import Target

logger = logging.getLogger(__name__)

PENDING_KEY = 'painel_pending_changes'


@dataclass(frozen=True)
class ChangeEvent:
    """A committed change to one row."""
    table: str
    action: str  # INSERT, UPDATE, DELETE, or REFRESH for changes made elsewhere
    row_id: Optional[str]


class Subscription:
    """Stream of change events for a set of tables.

    Iterating blocks for the next event and never ends on its own; break
    out and iterate again to resume where you left off. close() ends every
    active iteration.
    """

    _CLOSED = object()

    def __init__(self, feed: 'ChangeFeed', tables: Optional[Iterable[str]] = None):
        self.feed = feed
        self.tables: Optional[Set[str]] = set(tables) if tables else None
        self.closed = False
        self._queue: queue.Queue = queue.Queue()

    def wants(self, change: ChangeEvent) -> bool:
        return self.tables is None or change.table in self.tables

    def put(self, change: ChangeEvent) -> None:
        if not self.closed:
            self._queue.put(change)

    def poll(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """Next event, or None when nothing arrives within the timeout."""
        try:
            item = self._queue.get(timeout=timeout) if timeout else self._queue.get_nowait()
        except queue.Empty:
            return None
        if item is self._CLOSED:
            return None
        return item

    def drain(self) -> List[ChangeEvent]:
        """All events already queued, without blocking."""
        events = []
        while True:
            change = self.poll()
            if change is None:
                return events
            events.append(change)

    def __iter__(self) -> Iterator[ChangeEvent]:
        while not self.closed:
            item = self._queue.get()
            if item is self._CLOSED:
                return
            yield item

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._queue.put(self._CLOSED)
            self.feed.unsubscribe(self)


class ChangeFeed:
    """Publish committed row changes of a SessionManager to subscribers."""

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager
        self.logger = logging.getLogger(self.__class__.__name__)
        self._subscriptions: List[Subscription] = []
        self._attached = False
        self.attach()

    def attach(self) -> None:
        if self._attached:
            return
        factory = self.session_manager.SessionLocal
        event.listen(factory, 'after_flush', self._after_flush)
        event.listen(factory, 'after_commit', self._after_commit)
        event.listen(factory, 'after_rollback', self._after_rollback)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        factory = self.session_manager.SessionLocal
        event.remove(factory, 'after_flush', self._after_flush)
        event.remove(factory, 'after_commit', self._after_commit)
        event.remove(factory, 'after_rollback', self._after_rollback)
        self._attached = False

    def subscribe(self, tables: Optional[Iterable[str]] = None) -> Subscription:
        """Open a subscription, optionally limited to some tables."""
        subscription = Subscription(self, tables)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def publish(self, change: ChangeEvent) -> None:
        for subscription in list(self._subscriptions):
            if subscription.wants(change):
                subscription.put(change)

    def _after_flush(self, session: Session, flush_context) -> None:
        pending = session.info.setdefault(PENDING_KEY, [])
        for obj in session.new:
            pending.append(self._event(obj, 'INSERT'))
        for obj in session.dirty:
            if session.is_modified(obj, include_collections=False):
                pending.append(self._event(obj, 'UPDATE'))
        for obj in session.deleted:
            pending.append(self._event(obj, 'DELETE'))

    def _after_commit(self, session: Session) -> None:
        pending = session.info.pop(PENDING_KEY, [])
        for change in pending:
            self.publish(change)
        if pending:
            self.logger.debug(f"Published {len(pending)} changes")

    def _after_rollback(self, session: Session) -> None:
        session.info.pop(PENDING_KEY, None)

    @staticmethod
    def _event(obj, action: str) -> ChangeEvent:
        return ChangeEvent(
            table=obj.__tablename__,
            action=action,
            row_id=getattr(obj, 'id', None)
        )


class ClientWatcher:
    """Notice client changes committed by other processes.

    Compares the newest updated_at and the row count of the clients table
    with the previous check. Inserts, updates and deletes all move one of
    the two.
    """

    def __init__(self, session_manager: SessionManager, feed: Optional[ChangeFeed] = None):
        self.session_manager = session_manager
        self.feed = feed
        self.logger = logging.getLogger(self.__class__.__name__)
        self.snapshot = self.take_snapshot()

    def take_snapshot(self) -> Tuple[Any, int]:
        with self.session_manager as session:
            latest, count = session.execute(
                select(func.max(Client.updated_at), func.count(Client.id))
            ).one()
        return latest, count

    def check(self) -> bool:
        """True when the clients table changed since the last check.

        A change is also published to the feed as a REFRESH event.
        """
        snapshot = self.take_snapshot()
        if snapshot == self.snapshot:
            return False
        self.snapshot = snapshot
        self.logger.debug(f"Clients changed: {snapshot[1]} rows, last update {snapshot[0]}")
        if self.feed is not None:
            self.feed.publish(ChangeEvent(table=Client.__tablename__, action='REFRESH', row_id=None))
        return True


class ClientCache:
    """Local map of clients kept current from a change subscription."""

    def __init__(self, session_manager: SessionManager, subscription: Subscription):
        self.session_manager = session_manager
        self.subscription = subscription
        self.logger = logging.getLogger(self.__class__.__name__)
        self.clients: Dict[str, Target] = {}
        self.reload()

    def reload(self) -> None:
        with self.session_manager as session:
            rows = session.execute(select(Client).where(Client.is_active.is_(True))).scalars()
            self.clients = {client.id: client.as_target() for client in rows}

    def apply(self, change: ChangeEvent) -> None:
        """Update the cache for one event."""
        if change.table != Client.__tablename__:
            return
        if change.row_id is None:
            self.reload()
            return
        if change.action == 'DELETE':
            self.clients.pop(change.row_id, None)
            return
        with self.session_manager as session:
            client = session.get(Client, change.row_id)
            if client is None or not client.is_active:
                self.clients.pop(change.row_id, None)
            else:
                self.clients[client.id] = client.as_target()

    def refresh(self) -> int:
        """Apply every queued event; returns how many were applied."""
        changes = self.subscription.drain()
        for change in changes:
            self.apply(change)
        return len(changes)

    def listen(self) -> None:
        """Apply events until the subscription is closed."""
        for change in self.subscription:
            self.apply(change)

    def targets(self) -> List[Target]:
        return list(self.clients.values())
