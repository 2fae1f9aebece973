"""Recover per-client indicators from the monthly PDF report.

The report is a table whose rows read
"YEAR MONTH COMPANY cancelado em_execucao nao_feito concluido total
licencas protocolos projetos taxas contatos". Text extraction flattens
the table, so rows are recovered by splitting the page text wherever a
new "YEAR MONTH NAME" sequence starts.
"""

import hashlib
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from pypdf import PdfReader

from ..exceptions import ImportFileError
from ..utils.normalization import normalize_client_name

logger = logging.getLogger(__name__)

METRIC_DEFINITIONS = [
    ('cancelado', 'Cancelado'),
    ('em_execucao', 'Em Execução'),
    ('nao_feito', 'Não Feito'),
    ('concluido', 'Concluído'),
    ('total', 'Total'),
    ('licencas', 'Licenças'),
    ('protocolos', 'Protocolos'),
    ('projetos', 'Projetos'),
    ('taxas', 'Taxas'),
    ('contatos', 'Contatos'),
]

_LETTER = r'[^\W\d_]'
_ROW_START = re.compile(rf'(?=\b\d{{4}}\s+\d{{1,2}}\s+(?:\d+\s+)?{_LETTER})')
_ROW = re.compile(rf'(\d{{4}})\s+(\d{{1,2}})\s+((?:\d+\s+)?{_LETTER}[^\d]*?)((?:\s+\d+)+)')
_FALLBACK = re.compile(rf'({_LETTER}(?:{_LETTER}|[ \-/.]){{3,40}})\s+(?:\d+(?:\s+|$)){{3,}}')
_TOTALS_MARKER = 'Totais:'


@dataclass
class ReportMetric:
    key: str
    label: str
    value: int


@dataclass
class ReportClient:
    name: str
    normalized_name: str
    metrics: List[ReportMetric] = field(default_factory=list)
    source_page: int = 1


@dataclass
class ParsedReport:
    year: Optional[int] = None
    month: Optional[int] = None
    clients: List[ReportClient] = field(default_factory=list)
    raw_text: str = ''

    @property
    def period_label(self) -> Optional[str]:
        if self.year and self.month:
            return f"{self.month:02d}/{self.year}"
        return str(self.year) if self.year else None


def parse_row(text: str):
    """Parse one "YEAR MONTH COMPANY numbers..." chunk.

    Returns:
        (year, month, company, values) or None when the chunk is not a row
    """
    match = _ROW.search(text)
    if not match:
        return None
    company = ' '.join(match.group(3).split())
    values = [int(number) for number in match.group(4).split()]
    return int(match.group(1)), int(match.group(2)), company, values


def parse_report_text(pages: List[str]) -> ParsedReport:
    """Extract the clients and their metrics from page texts.

    Companies are de-duplicated by normalized name, keeping the first
    occurrence. When no table row is recognised at all, a looser scan for
    "NAME followed by 3+ numbers" recovers names without metrics.
    """
    report = ParsedReport(raw_text='\n\n'.join(pages))
    seen = set()

    for page_number, page_text in enumerate(pages, start=1):
        flattened = ' '.join(page_text.split())
        for chunk in _ROW_START.split(flattened):
            # the totals line shares a chunk with the last row
            chunk = chunk.split(_TOTALS_MARKER)[0]
            parsed = parse_row(chunk)
            if parsed is None:
                continue
            year, month, company, values = parsed
            if len(company) <= 2:
                continue
            if report.year is None:
                report.year, report.month = year, month

            normalized = normalize_client_name(company)
            if not normalized or normalized in seen:
                continue
            seen.add(normalized)
            report.clients.append(ReportClient(
                name=company,
                normalized_name=normalized,
                metrics=[
                    ReportMetric(key, label, value)
                    for (key, label), value in zip(METRIC_DEFINITIONS, values)
                ],
                source_page=page_number
            ))

    if not report.clients:
        # line breaks are kept so a heading never merges into a name
        for match in _FALLBACK.finditer(report.raw_text):
            company = match.group(1).strip()
            normalized = normalize_client_name(company)
            if len(company) > 3 and normalized and normalized not in seen:
                seen.add(normalized)
                report.clients.append(ReportClient(name=company, normalized_name=normalized))
        if report.clients:
            logger.warning(f"No report rows found, recovered {len(report.clients)} names without metrics")

    logger.info(f"Detected {len(report.clients)} clients in report (period {report.period_label})")
    return report


def read_pdf_pages(path: Union[str, Path]) -> List[str]:
    """Extract the text of every page."""
    path = Path(path)
    try:
        reader = PdfReader(str(path))
        return [page.extract_text() or '' for page in reader.pages]
    except Exception as e:
        raise ImportFileError(f"could not read PDF {path.name}: {e}") from e


def parse_pdf(path: Union[str, Path]) -> ParsedReport:
    return parse_report_text(read_pdf_pages(path))


def file_sha256(path: Union[str, Path]) -> str:
    """Hex SHA-256 of a file's content, used to detect re-uploads."""
    digest = hashlib.sha256()
    with open(path, 'rb') as f:
        for block in iter(lambda: f.read(65536), b''):
            digest.update(block)
    return digest.hexdigest()
