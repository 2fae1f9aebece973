"""Regulatory process model."""
import uuid
from sqlalchemy import Column, String, Date, DateTime, ForeignKey
from .base import Base
from ...utils.dates import utc_now

class Process(Base):
    """Process filed with an environmental agency."""
    
    __tablename__ = 'processes'
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id = Column(String, ForeignKey('clients.id', ondelete='SET NULL'))
    empresa_excel = Column(String, nullable=False)
    tipo_processo = Column(String)
    nome = Column(String)
    numero_processo = Column(String)
    data_protocolo = Column(Date)
    status = Column(String, nullable=False, default='OUTROS')
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
    
    def __repr__(self):
        return f"<Process(numero='{self.numero_processo}', empresa='{self.empresa_excel}', status='{self.status}')>"
