"""Typed records produced by the spreadsheet parsers.

Every record carries `empresa`, the company name exactly as it appears in
the file; the matcher resolves it to a client.
"""

from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Dict, List, Optional


@dataclass
class DemandRecord:
    empresa: str
    descricao: str
    codigo: Optional[str] = None
    data: Optional[date] = None
    responsavel: Optional[str] = None
    status: str = 'NAO_FEITO'
    topico: Optional[str] = None
    subtopico: Optional[str] = None
    plano: Optional[str] = None
    comentario: Optional[str] = None
    origem: Optional[str] = None
    collaborators: List[str] = field(default_factory=list)
    row_number: int = 0


@dataclass
class LicenseRecord:
    empresa: str
    tipo_licenca: Optional[str] = None
    licenca: Optional[str] = None
    num_processo: Optional[str] = None
    data_emissao: Optional[date] = None
    vencimento: Optional[date] = None
    status_original: Optional[str] = None
    status_calculado: str = 'FORA_VALIDADE'
    ativo: str = 'SIM'
    row_number: int = 0


@dataclass
class ProcessRecord:
    empresa: str
    tipo_processo: Optional[str] = None
    nome: Optional[str] = None
    numero_processo: Optional[str] = None
    data_protocolo: Optional[date] = None
    status_raw: Optional[str] = None
    status: str = 'OUTROS'
    row_number: int = 0


@dataclass
class NotificationRecord:
    empresa: str
    numero_notificacao: str
    numero_processo: Optional[str] = None
    descricao: Optional[str] = None
    data_recebimento: Optional[date] = None
    status: str = 'PENDENTE'
    row_number: int = 0


@dataclass
class NotificationItemRecord:
    empresa: str
    status: str = 'PENDENTE'
    row_number: int = 0


@dataclass
class CondicionanteRecord:
    empresa: str
    status_original: str
    licenca: Optional[str] = None
    numero_item: Optional[str] = None
    descricao: Optional[str] = None
    protocolo: Optional[str] = None
    vencimento: Optional[date] = None
    dias_restantes: Optional[int] = None
    data_atendimento: Optional[date] = None
    status_calculado: str = 'A_FAZER'
    row_number: int = 0


def record_to_dict(record) -> Dict[str, Any]:
    """Serialize a record for JSON output (dates as ISO strings)."""
    result = {}
    for f in fields(record):
        value = getattr(record, f.name)
        result[f.name] = value.isoformat() if isinstance(value, date) else value
    return result
