"""Spreadsheet and PDF parsers producing typed records."""

from .records import (
    DemandRecord,
    LicenseRecord,
    ProcessRecord,
    NotificationRecord,
    NotificationItemRecord,
    CondicionanteRecord,
    record_to_dict
)
from .workbook import SheetRows, read_rows
from .spreadsheets import (
    parse_demands,
    parse_licenses,
    parse_processes,
    parse_notifications,
    parse_notification_items,
    parse_condicionantes,
    group_by_company,
    summarize_notification_items,
    summarize_condicionantes
)
from .pdf_report import ParsedReport, ReportClient, ReportMetric, parse_pdf, parse_report_text, file_sha256

__all__ = [
    'DemandRecord',
    'LicenseRecord',
    'ProcessRecord',
    'NotificationRecord',
    'NotificationItemRecord',
    'CondicionanteRecord',
    'record_to_dict',
    'SheetRows',
    'read_rows',
    'parse_demands',
    'parse_licenses',
    'parse_processes',
    'parse_notifications',
    'parse_notification_items',
    'parse_condicionantes',
    'group_by_company',
    'summarize_notification_items',
    'summarize_condicionantes',
    'ParsedReport',
    'ReportClient',
    'ReportMetric',
    'parse_pdf',
    'parse_report_text',
    'file_sha256'
]
