"""Status normalization for the imported workbooks."""

from datetime import date, timedelta
from typing import Optional

from ..utils.normalization import normalize_text

DEMAND_STATUS_MAP = {
    'concluido': 'CONCLUIDO',
    'concluida': 'CONCLUIDO',
    'em_execucao': 'EM_EXECUCAO',
    'em execucao': 'EM_EXECUCAO',
    'nao_feito': 'NAO_FEITO',
    'nao feito': 'NAO_FEITO',
    'cancelado': 'CANCELADO',
    'cancelada': 'CANCELADO'
}

# Licenses expiring within this many days are flagged
EXPIRY_WARNING_DAYS = 30


def normalize_demand_status(value: Optional[str]) -> str:
    """Map a free-text demand status onto the four known statuses."""
    text = normalize_text(value)
    if not text:
        return 'NAO_FEITO'
    if text in DEMAND_STATUS_MAP:
        return DEMAND_STATUS_MAP[text]

    key = text.upper().replace(' ', '_')
    if 'CONCLU' in key:
        return 'CONCLUIDO'
    if 'EXECU' in key or 'ANDAMENTO' in key:
        return 'EM_EXECUCAO'
    if 'CANCEL' in key:
        return 'CANCELADO'
    return 'NAO_FEITO'


def calculate_license_status(vencimento: Optional[date], today: Optional[date] = None) -> str:
    """Derive a license status from its expiry date.

    A license without an expiry date is treated as expired.
    """
    if vencimento is None:
        return 'FORA_VALIDADE'
    today = today or date.today()
    if vencimento < today:
        return 'FORA_VALIDADE'
    if vencimento <= today + timedelta(days=EXPIRY_WARNING_DAYS):
        return 'PROXIMO_VENCIMENTO'
    return 'VALIDA'


def normalize_process_status(value: Optional[str]) -> str:
    text = normalize_text(value).upper()
    if not text:
        return 'OUTROS'
    # INDEFERIDO contains DEFERIDO, so it must be checked first
    if 'REPROVADO' in text or 'INDEFERIDO' in text:
        return 'REPROVADO'
    if 'DEFERIDO' in text:
        return 'DEFERIDO'
    if 'EM ANALISE PELO ORGAO' in text:
        return 'EM_ANALISE_ORGAO'
    if 'EM ANALISE PELA RAMOS' in text:
        return 'EM_ANALISE_RAMOS'
    if 'NOTIFICADO' in text:
        return 'NOTIFICADO'
    return 'OUTROS'


def normalize_notification_status(value: Optional[str]) -> str:
    return 'ATENDIDA' if 'ATEND' in normalize_text(value).upper() else 'PENDENTE'


def normalize_notification_item_status(value: Optional[str]) -> str:
    text = normalize_text(value).upper()
    if 'ATEND' in text:
        return 'ATENDIDO'
    if 'VENC' in text:
        return 'VENCIDO'
    # "A FAZER" and "PENDENTE" are the same thing on the dashboard
    return 'PENDENTE'


def calculate_condicionante_status(value: Optional[str]) -> str:
    text = normalize_text(value)
    if 'atendida' in text or 'conclu' in text:
        return 'ATENDIDA'
    if 'vencida' in text:
        return 'VENCIDA'
    if 'vencer' in text or 'fazer' in text:
        return 'A_VENCER'
    return 'A_FAZER'
