"""Agency notification model."""
import uuid
from sqlalchemy import Column, String, Date, DateTime, Text, ForeignKey, UniqueConstraint
from .base import Base
from ...utils.dates import utc_now

class Notification(Base):
    """Notification received from an agency for a client process."""
    
    __tablename__ = 'notifications'
    __table_args__ = (
        UniqueConstraint('empresa_excel', 'numero_notificacao', name='uq_notifications_empresa_numero'),
    )
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id = Column(String, ForeignKey('clients.id', ondelete='SET NULL'))
    empresa_excel = Column(String, nullable=False)
    numero_processo = Column(String)
    numero_notificacao = Column(String, nullable=False)
    descricao = Column(Text)
    data_recebimento = Column(Date)
    status = Column(String, nullable=False, default='PENDENTE')
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
    
    def __repr__(self):
        return f"<Notification(numero='{self.numero_notificacao}', empresa='{self.empresa_excel}', status='{self.status}')>"
