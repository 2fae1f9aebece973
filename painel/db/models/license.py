"""Environmental license model."""
import uuid
from sqlalchemy import Column, String, Date, DateTime, ForeignKey
from .base import Base
from ...utils.dates import utc_now

class License(Base):
    """License row imported from the licenses workbook."""
    
    __tablename__ = 'licenses'
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id = Column(String, ForeignKey('clients.id', ondelete='SET NULL'))
    empresa_excel = Column(String, nullable=False)
    tipo_licenca = Column(String)
    licenca = Column(String)
    num_processo = Column(String)
    data_emissao = Column(Date)
    vencimento = Column(Date)
    status_calculado = Column(String, nullable=False, default='VALIDA')
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
    
    def __repr__(self):
        return f"<License(licenca='{self.licenca}', empresa='{self.empresa_excel}', status='{self.status_calculado}')>"
