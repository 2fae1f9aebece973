"""Utility functions and helpers."""

from .normalization import (
    normalize_client_name,
    normalize_text,
    generate_initials,
    extract_collaborators
)
from .dates import parse_date, utc_now
from .columns import ColumnMap, cell_text, find_column, map_columns, select_sheet

__all__ = [
    'normalize_client_name',
    'normalize_text',
    'generate_initials',
    'extract_collaborators',
    'parse_date',
    'utc_now',
    'ColumnMap',
    'cell_text',
    'find_column',
    'map_columns',
    'select_sheet'
]
