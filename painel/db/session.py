"""Database session management."""
import logging
from typing import List
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .models import Base

class SessionManager:
    """Manages database sessions."""
    
    def __init__(self, database_url: str, echo: bool = False):
        """Initialize session manager with database URL.
        
        In-memory SQLite URLs share a single connection so every session
        sees the same database.
        """
        engine_args = {'echo': echo}
        if database_url == 'sqlite://' or (database_url.startswith('sqlite') and ':memory:' in database_url):
            engine_args.update(
                connect_args={'check_same_thread': False},
                poolclass=StaticPool
            )
        self.database_url = database_url
        self.engine = create_engine(database_url, **engine_args)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )
        self.logger = logging.getLogger(__name__)
        self._sessions: List[Session] = []

    def create_all(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(self.engine)
        self.logger.debug("Database tables created")
        
    def get_session(self) -> Session:
        """Get a new database session."""
        session = self.SessionLocal()
        self.logger.debug(f"Created new session: {id(session)}")
        return session
        
    def __enter__(self) -> Session:
        """Context manager entry."""
        session = self.get_session()
        self._sessions.append(session)
        self.logger.debug(f"Entering context with session: {id(session)}")
        return session
        
    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit. Commits on success, rolls back on error."""
        session = self._sessions.pop()
        self.logger.debug(f"Exiting context with session: {id(session)}")
        try:
            if exc_type is None:
                self.logger.debug("Committing session")
                session.commit()
            else:
                self.logger.debug("Rolling back session")
                session.rollback()
        finally:
            self.logger.debug("Closing session")
            session.close()
