"""Writers that turn reconciled records into database rows."""

from .base import BulkWriter, DuplicatePolicy, WriteStats
from .error_tracker import ErrorTracker
from .writers import (
    DemandWriter,
    LicenseWriter,
    ProcessWriter,
    NotificationWriter,
    NotificationItemWriter,
    CondicionanteWriter,
    WRITERS,
    create_writer
)
from .pdf_import import PdfImportService

__all__ = [
    'BulkWriter',
    'DuplicatePolicy',
    'WriteStats',
    'ErrorTracker',
    'DemandWriter',
    'LicenseWriter',
    'ProcessWriter',
    'NotificationWriter',
    'NotificationItemWriter',
    'CondicionanteWriter',
    'WRITERS',
    'create_writer',
    'PdfImportService'
]
