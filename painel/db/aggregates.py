"""Recomputation of the per-client counters shown on the dashboard.

Each function recomputes one family of counters for a single client from
the rows currently stored, so running it twice is harmless.
"""
import logging
from datetime import date
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models import Client, Demand, License, Process, Notification
from ..utils.normalization import extract_collaborators

logger = logging.getLogger(__name__)

DEMAND_COLUMNS = {
    'CONCLUIDO': 'demands_completed',
    'EM_EXECUCAO': 'demands_in_progress',
    'NAO_FEITO': 'demands_not_started',
    'CANCELADO': 'demands_cancelled'
}

LICENSE_COLUMNS = {
    'VALIDA': 'lic_validas_count',
    'PROXIMO_VENCIMENTO': 'lic_proximo_venc_count',
    'FORA_VALIDADE': 'lic_fora_validade_count'
}

PROCESS_COLUMNS = {
    'DEFERIDO': 'proc_deferido_count',
    'EM_ANALISE_ORGAO': 'proc_em_analise_orgao_count',
    'EM_ANALISE_RAMOS': 'proc_em_analise_ramos_count',
    'NOTIFICADO': 'proc_notificado_count',
    'REPROVADO': 'proc_reprovado_count',
    'OUTROS': 'proc_outros_count'
}

NOTIFICATION_COLUMNS = {
    'PENDENTE': 'notif_pendente_count',
    'ATENDIDA': 'notif_atendida_count'
}

NOTIFICATION_ITEM_COLUMNS = {
    'ATENDIDO': 'notif_item_atendido_count',
    'PENDENTE': 'notif_item_pendente_count',
    'VENCIDO': 'notif_item_vencido_count'
}

CONDICIONANTE_COLUMNS = {
    'ATENDIDA': 'cond_atendidas_count',
    'A_VENCER': 'cond_a_vencer_count',
    'VENCIDA': 'cond_vencidas_count'
}


def _count_by(session: Session, column, client_column, client_id: str) -> Dict[str, int]:
    rows = session.execute(
        select(column, func.count()).where(client_column == client_id).group_by(column)
    ).all()
    return {status: count for status, count in rows}


def _apply(client: Client, columns: Dict[str, str], counts: Dict[str, int]) -> None:
    for status, attribute in columns.items():
        setattr(client, attribute, counts.get(status, 0))


def _get_client(session: Session, client_id: str) -> Optional[Client]:
    client = session.get(Client, client_id)
    if client is None:
        logger.warning(f"Client {client_id} not found, skipping recalculation")
    return client


def recalculate_client_demands(session: Session, client_id: str) -> None:
    """Recount demands by status and refresh the collaborator list."""
    client = _get_client(session, client_id)
    if client is None:
        return
    _apply(client, DEMAND_COLUMNS, _count_by(session, Demand.status, Demand.client_id, client_id))

    collaborators = set(client.collaborators or [])
    for (responsavel,) in session.execute(
        select(Demand.responsavel).where(Demand.client_id == client_id).distinct()
    ):
        collaborators.update(extract_collaborators(responsavel))
    client.collaborators = sorted(collaborators)


def recalculate_client_licenses(session: Session, client_id: str, today: Optional[date] = None) -> None:
    """Recount licenses by status and find the next expiry date."""
    client = _get_client(session, client_id)
    if client is None:
        return
    today = today or date.today()
    _apply(client, LICENSE_COLUMNS, _count_by(session, License.status_calculado, License.client_id, client_id))
    client.lic_proxima_data_vencimento = session.execute(
        select(func.min(License.vencimento)).where(
            License.client_id == client_id,
            License.vencimento >= today
        )
    ).scalar()


def recalculate_client_processes(session: Session, client_id: str) -> None:
    """Recount processes by status."""
    client = _get_client(session, client_id)
    if client is None:
        return
    counts = _count_by(session, Process.status, Process.client_id, client_id)
    _apply(client, PROCESS_COLUMNS, counts)
    client.proc_total_count = sum(counts.values())


def recalculate_client_notifications(session: Session, client_id: str) -> None:
    """Recount notifications by status."""
    client = _get_client(session, client_id)
    if client is None:
        return
    counts = _count_by(session, Notification.status, Notification.client_id, client_id)
    _apply(client, NOTIFICATION_COLUMNS, counts)
    client.notif_total_count = sum(counts.values())


def apply_notification_item_summary(session: Session, client_id: str, counts: Dict[str, int]) -> None:
    """Store notification item counts, which have no table of their own."""
    client = _get_client(session, client_id)
    if client is not None:
        _apply(client, NOTIFICATION_ITEM_COLUMNS, counts)


def apply_condicionante_summary(session: Session, client_id: str, counts: Dict[str, int]) -> None:
    """Store license condition counts, which have no table of their own."""
    client = _get_client(session, client_id)
    if client is not None:
        _apply(client, CONDICIONANTE_COLUMNS, counts)
