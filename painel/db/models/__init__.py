"""SQLAlchemy models for database tables."""

from .base import Base
from .client import Client
from .client_alias import ClientAlias
from .demand import Demand, DEMAND_STATUSES
from .license import License
from .process import Process
from .notification import Notification
from .activity_log import ActivityLog
from .pdf_import import PdfImport, PdfDetectedClient, PdfMetric

__all__ = [
    'Base',
    'Client',
    'ClientAlias',
    'Demand',
    'DEMAND_STATUSES',
    'License',
    'Process',
    'Notification',
    'ActivityLog',
    'PdfImport',
    'PdfDetectedClient',
    'PdfMetric'
]
