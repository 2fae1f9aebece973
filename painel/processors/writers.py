"""Bulk writers, one per imported workbook type."""
from typing import Any, Callable, Dict, Iterable, Optional
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..context import ImportContext
from ..db import aggregates
from ..db.activity import log_activity
from ..db.models import Demand, License, Notification, Process
from ..db.session import SessionManager
from ..matching.reconciliation import ResolvedImport
from ..parsers.records import (
    DemandRecord,
    LicenseRecord,
    NotificationRecord,
    ProcessRecord
)
from ..parsers.spreadsheets import (
    group_by_company,
    summarize_condicionantes,
    summarize_notification_items
)
from ..utils.dates import utc_now
from .base import BulkWriter, DuplicatePolicy, WriteStats
from .error_tracker import ErrorTracker


class DemandWriter(BulkWriter[DemandRecord]):
    """Demands are keyed by their external code; rows without one are always new."""

    entity_type = 'demandas'
    model = Demand
    overwrite_fields = (
        'data', 'client_id', 'empresa_excel', 'descricao', 'responsavel', 'status',
        'topico', 'subtopico', 'plano', 'comentario', 'origem', 'imported_at'
    )
    update_fields = ('client_id', 'descricao', 'responsavel', 'status', 'comentario', 'data', 'imported_at')

    def find_existing(self, session: Session, record: DemandRecord):
        if not record.codigo:
            return None
        return session.execute(
            select(Demand).where(Demand.codigo == record.codigo)
        ).scalars().first()

    def to_values(self, record: DemandRecord, client_id: Optional[str]) -> Dict[str, Any]:
        return {
            'codigo': record.codigo,
            'data': record.data,
            'client_id': client_id,
            'empresa_excel': record.empresa,
            'descricao': record.descricao,
            'responsavel': record.responsavel,
            'status': record.status,
            'topico': record.topico,
            'subtopico': record.subtopico,
            'plano': record.plano,
            'comentario': record.comentario,
            'origem': record.origem,
            'imported_at': utc_now()
        }

    def describe(self, record: DemandRecord) -> str:
        return f"{record.codigo or '(sem código)'} ({record.empresa})"

    def recalculate(self, session: Session, client_id: str) -> None:
        aggregates.recalculate_client_demands(session, client_id)


class LicenseWriter(BulkWriter[LicenseRecord]):
    """Licenses are keyed by company and license number."""

    entity_type = 'licenças'
    model = License
    overwrite_fields = (
        'client_id', 'tipo_licenca', 'num_processo', 'data_emissao', 'vencimento', 'status_calculado'
    )
    update_fields = ('client_id', 'vencimento', 'status_calculado', 'num_processo')

    def find_existing(self, session: Session, record: LicenseRecord):
        if not record.licenca:
            return None
        return session.execute(
            select(License).where(
                License.empresa_excel == record.empresa,
                License.licenca == record.licenca
            )
        ).scalars().first()

    def to_values(self, record: LicenseRecord, client_id: Optional[str]) -> Dict[str, Any]:
        return {
            'client_id': client_id,
            'empresa_excel': record.empresa,
            'tipo_licenca': record.tipo_licenca,
            'licenca': record.licenca,
            'num_processo': record.num_processo,
            'data_emissao': record.data_emissao,
            'vencimento': record.vencimento,
            'status_calculado': record.status_calculado
        }

    def describe(self, record: LicenseRecord) -> str:
        return f"{record.licenca or '(sem número)'} ({record.empresa})"

    def recalculate(self, session: Session, client_id: str) -> None:
        aggregates.recalculate_client_licenses(session, client_id, self.context.today)


class ProcessWriter(BulkWriter[ProcessRecord]):
    """Processes are keyed by company and process number."""

    entity_type = 'processos'
    model = Process
    overwrite_fields = ('client_id', 'tipo_processo', 'nome', 'data_protocolo', 'status')
    update_fields = ('client_id', 'status', 'data_protocolo')

    def find_existing(self, session: Session, record: ProcessRecord):
        if not record.numero_processo:
            return None
        return session.execute(
            select(Process).where(
                Process.empresa_excel == record.empresa,
                Process.numero_processo == record.numero_processo
            )
        ).scalars().first()

    def to_values(self, record: ProcessRecord, client_id: Optional[str]) -> Dict[str, Any]:
        return {
            'client_id': client_id,
            'empresa_excel': record.empresa,
            'tipo_processo': record.tipo_processo,
            'nome': record.nome,
            'numero_processo': record.numero_processo,
            'data_protocolo': record.data_protocolo,
            'status': record.status
        }

    def describe(self, record: ProcessRecord) -> str:
        return f"{record.numero_processo or '(sem número)'} ({record.empresa})"

    def recalculate(self, session: Session, client_id: str) -> None:
        aggregates.recalculate_client_processes(session, client_id)


class NotificationWriter(BulkWriter[NotificationRecord]):
    """Notifications are unique per company and notification number."""

    entity_type = 'notificações'
    model = Notification
    overwrite_fields = ('client_id', 'numero_processo', 'descricao', 'data_recebimento', 'status')
    update_fields = ('client_id', 'status', 'descricao')

    def find_existing(self, session: Session, record: NotificationRecord):
        return session.execute(
            select(Notification).where(
                Notification.empresa_excel == record.empresa,
                Notification.numero_notificacao == record.numero_notificacao
            )
        ).scalars().first()

    def to_values(self, record: NotificationRecord, client_id: Optional[str]) -> Dict[str, Any]:
        return {
            'client_id': client_id,
            'empresa_excel': record.empresa,
            'numero_processo': record.numero_processo,
            'numero_notificacao': record.numero_notificacao,
            'descricao': record.descricao,
            'data_recebimento': record.data_recebimento,
            'status': record.status
        }

    def describe(self, record: NotificationRecord) -> str:
        return f"{record.numero_notificacao} ({record.empresa})"

    def recalculate(self, session: Session, client_id: str) -> None:
        aggregates.recalculate_client_notifications(session, client_id)


class SummaryWriter:
    """Store per-client status counts for workbooks without a table.

    Notification items and license conditions only feed the dashboard
    counters: the records of each client are summarized and the counts
    replace the client's current ones.
    """

    entity_type = 'resumo'
    summarize: Callable = None
    apply_summary: Callable = None

    def __init__(
        self,
        session_manager: SessionManager,
        context: Optional[ImportContext] = None,
        debug: bool = False
    ):
        self.session_manager = session_manager
        self.context = context or ImportContext()
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)
        self.stats = WriteStats()
        self.error_tracker = ErrorTracker()

    def write(self, records: Iterable, resolved: ResolvedImport) -> Dict[str, Any]:
        """Summarize records per company and store the counts on each client."""
        for empresa, group in group_by_company(list(records)).items():
            client_id = resolved.client_for(empresa)
            if not client_id:
                self.stats.excluded += len(group)
                continue
            counts = self.summarize(group)
            try:
                with self.session_manager as session:
                    self.apply_summary(session, client_id, counts)
            except Exception as e:
                self.logger.error(f"Failed to store {self.entity_type} for {empresa}: {str(e)}")
                self.error_tracker.add_error('WRITE_ERROR', str(e), {'empresa': empresa})
                self.stats.failed += 1
                continue
            self.stats.updated += 1
            self.stats.affected_clients.add(client_id)
            if self.debug:
                self.logger.debug(f"{empresa}: {counts}")

        try:
            with self.session_manager as session:
                log_activity(
                    session,
                    self.context,
                    action_type='import',
                    entity_type=self.entity_type,
                    description=f"Importação de {self.entity_type}: {self.stats.updated} clientes atualizados"
                )
        except Exception as e:
            self.logger.error(f"Failed to record import activity: {str(e)}")

        self.stats.completed_at = utc_now()
        self.logger.info(f"{self.entity_type}: {self.stats.updated} clients updated, {self.stats.failed} failed")
        self.error_tracker.log_summary(self.logger)
        return self.stats.to_dict()


class NotificationItemWriter(SummaryWriter):
    entity_type = 'itens de notificação'
    summarize = staticmethod(summarize_notification_items)
    apply_summary = staticmethod(aggregates.apply_notification_item_summary)


class CondicionanteWriter(SummaryWriter):
    entity_type = 'condicionantes'
    summarize = staticmethod(summarize_condicionantes)
    apply_summary = staticmethod(aggregates.apply_condicionante_summary)


WRITERS = {
    'demands': DemandWriter,
    'licenses': LicenseWriter,
    'processes': ProcessWriter,
    'notifications': NotificationWriter,
    'notification-items': NotificationItemWriter,
    'condicionantes': CondicionanteWriter
}


def create_writer(
    kind: str,
    session_manager: SessionManager,
    policy: DuplicatePolicy = DuplicatePolicy.SKIP,
    context: Optional[ImportContext] = None,
    debug: bool = False
):
    """Instantiate the writer for an import kind."""
    writer_class = WRITERS[kind]
    if issubclass(writer_class, BulkWriter):
        return writer_class(session_manager, policy=policy, context=context, debug=debug)
    return writer_class(session_manager, context=context, debug=debug)
