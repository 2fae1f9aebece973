"""Demand (backlog item) model."""
import uuid
from sqlalchemy import Column, String, Date, DateTime, Text, ForeignKey
from .base import Base
from ...utils.dates import utc_now

DEMAND_STATUSES = ('CONCLUIDO', 'EM_EXECUCAO', 'NAO_FEITO', 'CANCELADO')

class Demand(Base):
    """Demand imported from the backlog workbook."""
    
    __tablename__ = 'demands'
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    codigo = Column(String, index=True)
    data = Column(Date)
    client_id = Column(String, ForeignKey('clients.id', ondelete='SET NULL'))
    empresa_excel = Column(String, nullable=False)
    descricao = Column(Text, nullable=False)
    responsavel = Column(String)
    status = Column(String, nullable=False, default='NAO_FEITO')
    topico = Column(String)
    subtopico = Column(String)
    plano = Column(String)
    comentario = Column(Text)
    origem = Column(String)
    imported_at = Column(DateTime, default=utc_now)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
    
    def __repr__(self):
        return f"<Demand(codigo='{self.codigo}', empresa='{self.empresa_excel}', status='{self.status}')>"
