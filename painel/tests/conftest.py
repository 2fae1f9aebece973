"""Shared test fixtures and utilities."""

import pytest
from datetime import date
from pathlib import Path

import pandas as pd

from ..context import ImportContext
from ..db.models import Client
from ..db.session import SessionManager
from ..matching.matcher import Target

@pytest.fixture
def session_manager():
    """In-memory database with every table created."""
    manager = SessionManager('sqlite://')
    manager.create_all()
    yield manager
    manager.engine.dispose()

@pytest.fixture
def context():
    """Import context with a fixed operator and date."""
    return ImportContext(user_name='Tester', today=date(2024, 6, 1))

@pytest.fixture
def clients(session_manager):
    """Seed the dashboard clients used across tests."""
    rows = [
        Client(id='c-seara', name='Seara', initials='S', display_order=1, collaborators=[]),
        Client(id='c-cocatrel', name='Cocatrel Industria', initials='CI', display_order=2, collaborators=[]),
        Client(id='c-agua', name='Agua Clara', initials='AC', client_type='AV', display_order=3, collaborators=[])
    ]
    with session_manager as session:
        session.add_all(rows)
    return {client.id: client for client in rows}

@pytest.fixture
def targets():
    return [
        Target('c-seara', 'Seara'),
        Target('c-cocatrel', 'Cocatrel Industria'),
        Target('c-agua', 'Agua Clara')
    ]

def create_test_xlsx(path: Path, rows, sheet_name: str = 'Planilha1', extra_sheets=None) -> Path:
    """Write rows (list of dicts) to an Excel file, header from the first row's keys."""
    with pd.ExcelWriter(path, engine='openpyxl') as writer:
        for name, sheet_rows in (extra_sheets or {}).items():
            pd.DataFrame(sheet_rows).to_excel(writer, sheet_name=name, index=False)
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, index=False)
    return path

def get_client(session_manager, client_id: str) -> Client:
    with session_manager as session:
        return session.get(Client, client_id)

@pytest.fixture
def database_url(tmp_path):
    """File database that several SessionManagers can open, as separate processes would."""
    url = f"sqlite:///{tmp_path / 'painel.db'}"
    manager = SessionManager(url)
    manager.create_all()
    manager.engine.dispose()
    return url
