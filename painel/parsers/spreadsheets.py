"""Row extraction for the dashboard's import workbooks.

Each workbook type has an `extract_*` function working on already-read
rows and a `parse_*` wrapper that reads the file first. Rows missing a
required value (the company, mostly) are skipped; a file yielding no
record at all raises NoValidRowsError.
"""

import logging
from collections import Counter
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, TypeVar, Union

from ..exceptions import NoValidRowsError
from ..utils.columns import cell_text, map_columns
from ..utils.dates import parse_date
from ..utils.normalization import extract_collaborators
from .records import (
    CondicionanteRecord,
    DemandRecord,
    LicenseRecord,
    NotificationItemRecord,
    NotificationRecord,
    ProcessRecord
)
from .statuses import (
    calculate_condicionante_status,
    calculate_license_status,
    normalize_demand_status,
    normalize_notification_item_status,
    normalize_notification_status,
    normalize_process_status
)
from .workbook import SheetRows, read_rows

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
R = TypeVar('R')

DEMAND_COLUMNS = {
    'codigo': ['Código', 'Codigo'],
    'data': ['Data'],
    'empresa': ['Empresa'],
    'descricao': ['Descrição', 'Descricao'],
    'responsavel': ['Responsável', 'Responsavel'],
    'status': ['Status'],
    'topico': ['Tópico', 'Topico'],
    'subtopico': ['Subtópico', 'Subtopico'],
    'plano': ['Plano'],
    'comentario': ['Comentário', 'Comentario'],
    'origem': ['Origem']
}

LICENSE_COLUMNS = {
    'ativo': ['Ativo'],
    'empresa': ['Empresa', 'Cliente'],
    'tipo_licenca': ['Tipo de Licença', 'Tipo Licença', 'TipoLicenca'],
    'licenca': ['Licença', 'Licenca', 'Código', 'Numero'],
    'num_processo': ['Nº Processo', 'N° Processo', 'Num Processo', 'NumProcesso', 'Processo'],
    'data_emissao': ['Data de Emissão', 'Data Emissão', 'Emissão', 'DataEmissao'],
    'vencimento': ['Vencimento', 'Data Vencimento', 'Validade'],
    'status': ['Status', 'Situação', 'Estado']
}

PROCESS_COLUMNS = {
    'empresa': ['Empresa'],
    'tipo_processo': ['Tipo de Processo', 'tipo_processo'],
    'nome': ['Nome'],
    'numero_processo': ['Nº do Processo', 'Nº Processo', 'N do Processo', 'numero_processo'],
    'data_protocolo': ['Data do Protocolo', 'data_protocolo'],
    'status': ['Status']
}

# Matched with "contains", so the most specific names come first
NOTIFICATION_COLUMNS = {
    'empresa': ['Empresa', 'Cliente'],
    'numero_notificacao': ['Nº da notificação', 'N° da notificação', 'Numero Notificação', 'Notificação'],
    'numero_processo': ['Nº Processo', 'N° Processo', 'Num Processo', 'Processo'],
    'descricao': ['Descrição', 'Descricao'],
    'data_recebimento': ['Data de recebimento', 'Data recebimento', 'Recebimento', 'Data'],
    'status': ['Status', 'Situação', 'Estado']
}

NOTIFICATION_ITEM_COLUMNS = {
    'empresa': ['Empresa', 'Cliente'],
    'status': ['Status', 'Situação', 'Estado']
}

CONDICIONANTE_COLUMNS = {
    'empresa': ['Empresa', 'Cliente'],
    'licenca': ['Licença', 'Licenca'],
    'numero_item': ['Nº item', 'N° item', 'Num item', 'NumItem', 'Numero', 'Item'],
    'descricao': ['Descrição', 'Descricao'],
    'protocolo': ['Protocolo'],
    'vencimento': ['Vencimento', 'Data Vencimento', 'Validade'],
    'dias_restantes': ['Dias restantes', 'DiasRestantes'],
    'data_atendimento': ['Data de atendimento', 'Data Atendimento', 'DataAtendimento'],
    'status': ['Status', 'Situação', 'Estado']
}


def _finish(records: List[R], sheet: SheetRows, kind: str) -> List[R]:
    if not records:
        raise NoValidRowsError(f"{kind} sheet {sheet.name!r}")
    skipped = len(sheet.rows) - len(records)
    logger.info(f"Extracted {len(records)} {kind} records ({skipped} rows skipped)")
    return records


def _int_or_none(value) -> Optional[int]:
    text = cell_text(value)
    try:
        return int(float(text)) if text else None
    except ValueError:
        return None


def extract_demands(sheet: SheetRows) -> List[DemandRecord]:
    """Demand rows need both a company and a description."""
    columns = map_columns(sheet.headers, DEMAND_COLUMNS)
    columns.require('empresa', 'descricao')

    records = []
    for row_number, row in sheet:
        empresa = columns.text(row, 'empresa')
        descricao = columns.text(row, 'descricao')
        if not empresa or not descricao:
            continue
        responsavel = columns.optional(row, 'responsavel')
        records.append(DemandRecord(
            empresa=empresa,
            descricao=descricao,
            codigo=columns.optional(row, 'codigo'),
            data=parse_date(columns.get(row, 'data')),
            responsavel=responsavel,
            status=normalize_demand_status(columns.text(row, 'status')),
            topico=columns.optional(row, 'topico'),
            subtopico=columns.optional(row, 'subtopico'),
            plano=columns.optional(row, 'plano'),
            comentario=columns.optional(row, 'comentario'),
            origem=columns.optional(row, 'origem'),
            collaborators=extract_collaborators(responsavel),
            row_number=row_number
        ))
    return _finish(records, sheet, 'demand')


def extract_licenses(sheet: SheetRows, today: Optional[date] = None) -> List[LicenseRecord]:
    """License rows marked inactive (Ativo other than SIM) are skipped."""
    columns = map_columns(sheet.headers, LICENSE_COLUMNS)
    columns.require('empresa')

    records = []
    for row_number, row in sheet:
        empresa = columns.text(row, 'empresa')
        if not empresa:
            continue
        ativo = columns.text(row, 'ativo').upper() if columns.has('ativo') else 'SIM'
        if ativo and ativo != 'SIM':
            continue
        vencimento = parse_date(columns.get(row, 'vencimento'))
        records.append(LicenseRecord(
            empresa=empresa,
            tipo_licenca=columns.optional(row, 'tipo_licenca'),
            licenca=columns.optional(row, 'licenca'),
            num_processo=columns.optional(row, 'num_processo'),
            data_emissao=parse_date(columns.get(row, 'data_emissao')),
            vencimento=vencimento,
            status_original=columns.optional(row, 'status'),
            status_calculado=calculate_license_status(vencimento, today),
            ativo=ativo or 'SIM',
            row_number=row_number
        ))
    return _finish(records, sheet, 'license')


def extract_processes(sheet: SheetRows) -> List[ProcessRecord]:
    columns = map_columns(sheet.headers, PROCESS_COLUMNS)
    columns.require('empresa')

    records = []
    for row_number, row in sheet:
        empresa = columns.text(row, 'empresa')
        if not empresa:
            continue
        status_raw = columns.optional(row, 'status')
        records.append(ProcessRecord(
            empresa=empresa,
            tipo_processo=columns.optional(row, 'tipo_processo'),
            nome=columns.optional(row, 'nome'),
            numero_processo=columns.optional(row, 'numero_processo'),
            data_protocolo=parse_date(columns.get(row, 'data_protocolo')),
            status_raw=status_raw,
            status=normalize_process_status(status_raw),
            row_number=row_number
        ))
    return _finish(records, sheet, 'process')


def extract_notifications(sheet: SheetRows) -> List[NotificationRecord]:
    """Notification rows need a company and a notification number."""
    columns = map_columns(sheet.headers, NOTIFICATION_COLUMNS, contains=True)
    columns.require('empresa', 'numero_notificacao')

    records = []
    for row_number, row in sheet:
        empresa = columns.text(row, 'empresa')
        numero = columns.text(row, 'numero_notificacao')
        if not empresa or not numero:
            continue
        records.append(NotificationRecord(
            empresa=empresa,
            numero_notificacao=numero,
            numero_processo=columns.optional(row, 'numero_processo'),
            descricao=columns.optional(row, 'descricao'),
            data_recebimento=parse_date(columns.get(row, 'data_recebimento')),
            status=normalize_notification_status(columns.text(row, 'status')),
            row_number=row_number
        ))
    return _finish(records, sheet, 'notification')


def extract_notification_items(sheet: SheetRows) -> List[NotificationItemRecord]:
    columns = map_columns(sheet.headers, NOTIFICATION_ITEM_COLUMNS, contains=True)
    columns.require('empresa', 'status')

    records = []
    for row_number, row in sheet:
        empresa = columns.text(row, 'empresa')
        if not empresa:
            continue
        records.append(NotificationItemRecord(
            empresa=empresa,
            status=normalize_notification_item_status(columns.text(row, 'status')),
            row_number=row_number
        ))
    return _finish(records, sheet, 'notification item')


def extract_condicionantes(sheet: SheetRows) -> List[CondicionanteRecord]:
    """Condition rows need a company and a status."""
    columns = map_columns(sheet.headers, CONDICIONANTE_COLUMNS)
    columns.require('empresa', 'status')

    records = []
    for row_number, row in sheet:
        empresa = columns.text(row, 'empresa')
        status = columns.text(row, 'status')
        if not empresa or not status:
            continue
        records.append(CondicionanteRecord(
            empresa=empresa,
            status_original=status,
            licenca=columns.optional(row, 'licenca'),
            numero_item=columns.optional(row, 'numero_item'),
            descricao=columns.optional(row, 'descricao'),
            protocolo=columns.optional(row, 'protocolo'),
            vencimento=parse_date(columns.get(row, 'vencimento')),
            dias_restantes=_int_or_none(columns.get(row, 'dias_restantes')),
            data_atendimento=parse_date(columns.get(row, 'data_atendimento')),
            status_calculado=calculate_condicionante_status(status),
            row_number=row_number
        ))
    return _finish(records, sheet, 'condicionante')


def parse_demands(path: PathLike) -> List[DemandRecord]:
    return extract_demands(read_rows(path))


def parse_licenses(path: PathLike, today: Optional[date] = None) -> List[LicenseRecord]:
    return extract_licenses(read_rows(path), today)


def parse_processes(path: PathLike) -> List[ProcessRecord]:
    return extract_processes(read_rows(path))


def parse_notifications(path: PathLike) -> List[NotificationRecord]:
    return extract_notifications(read_rows(path))


def parse_notification_items(path: PathLike) -> List[NotificationItemRecord]:
    return extract_notification_items(read_rows(path))


def parse_condicionantes(path: PathLike) -> List[CondicionanteRecord]:
    return extract_condicionantes(read_rows(path))


def group_by_company(records: List[R]) -> Dict[str, List[R]]:
    """Group records by their `empresa`, keeping first-seen order."""
    groups: Dict[str, List[R]] = {}
    for record in records:
        groups.setdefault(record.empresa, []).append(record)
    return groups


def summarize_notification_items(records: List[NotificationItemRecord]) -> Dict[str, int]:
    counts = Counter(record.status for record in records)
    return {status: counts.get(status, 0) for status in ('ATENDIDO', 'PENDENTE', 'VENCIDO')}


def summarize_condicionantes(records: List[CondicionanteRecord]) -> Dict[str, int]:
    """Counts per dashboard bucket; "a fazer" conditions count as upcoming."""
    counts = Counter(record.status_calculado for record in records)
    return {
        'ATENDIDA': counts.get('ATENDIDA', 0),
        'A_VENCER': counts.get('A_VENCER', 0) + counts.get('A_FAZER', 0),
        'VENCIDA': counts.get('VENCIDA', 0)
    }
