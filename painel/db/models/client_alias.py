"""Alternative spellings that resolve to a client."""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey
from .base import Base
from ...utils.dates import utc_now

class ClientAlias(Base):
    """Normalized alias remembered during reconciliation."""
    
    __tablename__ = 'client_aliases'
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    alias_normalized = Column(String, nullable=False, unique=True)
    client_id = Column(String, ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    created_by = Column(String)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    
    def __repr__(self):
        return f"<ClientAlias(alias='{self.alias_normalized}', client_id='{self.client_id}')>"
