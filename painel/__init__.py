"""Import pipeline for the Painel de Indicadores dashboard."""

from .context import ImportContext
from .importer import SpreadsheetImporter, ImportRun, IMPORT_KINDS
from .matching import Matcher, MatchResult, MatchType, ReconciliationSession
from .processors import DuplicatePolicy, PdfImportService

__all__ = [
    'ImportContext',
    'SpreadsheetImporter',
    'ImportRun',
    'IMPORT_KINDS',
    'Matcher',
    'MatchResult',
    'MatchType',
    'ReconciliationSession',
    'DuplicatePolicy',
    'PdfImportService'
]
