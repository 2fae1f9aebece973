"""Client model and its denormalized dashboard counters."""
import uuid
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, JSON
from .base import Base
from ...utils.dates import utc_now
from ...matching.matcher import Target
from ...utils.normalization import generate_initials

class Client(Base):
    """Client shown on the dashboard.

    The *_count columns are aggregates recomputed after every import; they
    are read directly by the table, card and TV views.
    """
    
    __tablename__ = 'clients'
    
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    initials = Column(String, nullable=False, default='')
    client_type = Column(String, nullable=False, default='AC')
    display_order = Column(Integer, nullable=False, default=999)
    is_active = Column(Boolean, nullable=False, default=True)
    is_priority = Column(Boolean, nullable=False, default=False)
    is_highlighted = Column(Boolean, nullable=False, default=False)
    is_checked = Column(Boolean, nullable=False, default=False)
    comment_count = Column(Integer, nullable=False, default=0)
    collaborators = Column(JSON, nullable=False, default=list)

    demands_completed = Column(Integer, nullable=False, default=0)
    demands_in_progress = Column(Integer, nullable=False, default=0)
    demands_not_started = Column(Integer, nullable=False, default=0)
    demands_cancelled = Column(Integer, nullable=False, default=0)

    lic_validas_count = Column(Integer, nullable=False, default=0)
    lic_proximo_venc_count = Column(Integer, nullable=False, default=0)
    lic_fora_validade_count = Column(Integer, nullable=False, default=0)
    lic_proxima_data_vencimento = Column(Date)

    proc_deferido_count = Column(Integer, nullable=False, default=0)
    proc_em_analise_orgao_count = Column(Integer, nullable=False, default=0)
    proc_em_analise_ramos_count = Column(Integer, nullable=False, default=0)
    proc_notificado_count = Column(Integer, nullable=False, default=0)
    proc_reprovado_count = Column(Integer, nullable=False, default=0)
    proc_outros_count = Column(Integer, nullable=False, default=0)
    proc_total_count = Column(Integer, nullable=False, default=0)

    notif_pendente_count = Column(Integer, nullable=False, default=0)
    notif_atendida_count = Column(Integer, nullable=False, default=0)
    notif_total_count = Column(Integer, nullable=False, default=0)

    notif_item_atendido_count = Column(Integer, nullable=False, default=0)
    notif_item_pendente_count = Column(Integer, nullable=False, default=0)
    notif_item_vencido_count = Column(Integer, nullable=False, default=0)

    cond_atendidas_count = Column(Integer, nullable=False, default=0)
    cond_a_vencer_count = Column(Integer, nullable=False, default=0)
    cond_vencidas_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
    
    @classmethod
    def create(cls, name: str, client_type: str = 'AC', display_order: int = 999) -> 'Client':
        """Create a new client record from an imported name.
        
        Args:
            name: Display name as typed by the operator or found in the file
            client_type: AC or AV
            display_order: Position on the dashboard; new clients go last
        """
        name = ' '.join(name.split())
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            initials=generate_initials(name),
            client_type=client_type,
            display_order=display_order,
            is_active=True,
            collaborators=[],
            created_at=utc_now()
        )

    @property
    def total_demands(self) -> int:
        return (
            (self.demands_completed or 0)
            + (self.demands_in_progress or 0)
            + (self.demands_not_started or 0)
            + (self.demands_cancelled or 0)
        )

    def as_target(self) -> Target:
        """Typed view used by the matcher."""
        return Target(id=self.id, name=self.name)
    
    def __repr__(self):
        """String representation."""
        return f"<Client(name='{self.name}', type='{self.client_type}')>"
