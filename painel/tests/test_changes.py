"""Tests for committed-change notifications."""
from sqlalchemy import select

from ..db.changes import ChangeEvent, ChangeFeed, ClientCache, ClientWatcher
from ..db.session import SessionManager
from ..db.models import Client, Demand

def test_commit_publishes_events(session_manager, clients):
    feed = ChangeFeed(session_manager)
    subscription = feed.subscribe()

    with session_manager as session:
        session.add(Client.create('Nova Empresa'))
        session.get(Client, 'c-seara').is_priority = True

    events = subscription.drain()
    assert {(e.table, e.action) for e in events} == {('clients', 'INSERT'), ('clients', 'UPDATE')}
    assert ChangeEvent('clients', 'UPDATE', 'c-seara') in events
    feed.detach()

def test_rollback_publishes_nothing(session_manager, clients):
    feed = ChangeFeed(session_manager)
    subscription = feed.subscribe()

    try:
        with session_manager as session:
            session.add(Client.create('Nova Empresa'))
            session.flush()
            raise RuntimeError('abort')
    except RuntimeError:
        pass

    assert subscription.drain() == []
    feed.detach()

def test_table_filter(session_manager, clients):
    feed = ChangeFeed(session_manager)
    subscription = feed.subscribe(['demands'])

    with session_manager as session:
        session.add(Client.create('Nova Empresa'))
        session.add(Demand(empresa_excel='Seara', descricao='x', client_id='c-seara'))

    events = subscription.drain()
    assert [e.table for e in events] == ['demands']
    feed.detach()

def test_closed_subscription(session_manager, clients):
    feed = ChangeFeed(session_manager)
    subscription = feed.subscribe()
    subscription.close()

    with session_manager as session:
        session.add(Client.create('Nova Empresa'))

    assert subscription.drain() == []
    assert list(subscription) == []
    feed.detach()

def test_client_cache(session_manager, clients):
    """The cache follows inserts, renames and deactivations."""
    feed = ChangeFeed(session_manager)
    cache = ClientCache(session_manager, feed.subscribe(['clients']))
    assert {t.name for t in cache.targets()} == {'Seara', 'Cocatrel Industria', 'Agua Clara'}

    new_client = Client.create('Nova Empresa')
    with session_manager as session:
        session.add(new_client)
        session.get(Client, 'c-seara').name = 'Seara Alimentos'
        session.get(Client, 'c-agua').is_active = False

    assert cache.refresh() == 3
    assert {t.name for t in cache.targets()} == {'Seara Alimentos', 'Cocatrel Industria', 'Nova Empresa'}
    feed.detach()

def test_watcher_sees_commits_from_another_manager(database_url):
    """Commits made elsewhere reach subscribers as REFRESH events."""
    local = SessionManager(database_url)
    other = SessionManager(database_url)
    feed = ChangeFeed(local)
    subscription = feed.subscribe(['clients'])
    cache = ClientCache(local, feed.subscribe(['clients']))
    watcher = ClientWatcher(local, feed)
    assert not watcher.check()

    with other as session:
        session.add(Client.create('Nova Empresa'))
    assert subscription.drain() == []
    assert watcher.check()
    assert subscription.drain() == [ChangeEvent('clients', 'REFRESH', None)]
    assert not watcher.check()

    assert cache.refresh() == 1
    assert [c.name for c in cache.clients.values()] == ['Nova Empresa']

    with other as session:
        session.execute(select(Client)).scalar_one().is_priority = True
    assert watcher.check()

    with other as session:
        session.delete(session.execute(select(Client)).scalar_one())
    assert watcher.check()
    assert cache.refresh() == 2
    assert cache.clients == {}

    feed.detach()
    local.engine.dispose()
    other.engine.dispose()
