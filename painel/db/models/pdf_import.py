"""PDF report import sessions and what they detected."""
import uuid
from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from .base import Base
from ...utils.dates import utc_now

PDF_IMPORT_STATUSES = ('uploaded', 'parsing', 'ready', 'imported', 'failed')
MATCH_STATUSES = ('auto', 'linked', 'pending', 'unmatched')

class PdfImport(Base):
    """One uploaded report and its processing status."""
    
    __tablename__ = 'pdf_imports'
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    filename = Column(String, nullable=False)
    file_path = Column(String)
    file_hash = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default='uploaded')
    period_label = Column(String)
    total_clients_detected = Column(Integer, nullable=False, default=0)
    total_matched = Column(Integer, nullable=False, default=0)
    total_pending = Column(Integer, nullable=False, default=0)
    total_unmatched = Column(Integer, nullable=False, default=0)
    error_message = Column(String)
    created_by = Column(String)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    imported_at = Column(DateTime)

    detected_clients = relationship("PdfDetectedClient", back_populates="pdf_import", cascade="all, delete-orphan")
    metrics = relationship("PdfMetric", back_populates="pdf_import", cascade="all, delete-orphan")
    
    def __repr__(self):
        return f"<PdfImport(filename='{self.filename}', status='{self.status}')>"

class PdfDetectedClient(Base):
    """A company name found in a report."""
    
    __tablename__ = 'pdf_detected_clients'
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    pdf_import_id = Column(String, ForeignKey('pdf_imports.id', ondelete='CASCADE'), nullable=False)
    raw_name = Column(String, nullable=False)
    normalized_name = Column(String, nullable=False)
    matched_client_id = Column(String, ForeignKey('clients.id', ondelete='SET NULL'))
    match_score = Column(Float)
    match_status = Column(String, nullable=False, default='unmatched')
    suggestions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    pdf_import = relationship("PdfImport", back_populates="detected_clients")
    
    def __repr__(self):
        return f"<PdfDetectedClient(name='{self.raw_name}', status='{self.match_status}')>"

class PdfMetric(Base):
    """A numeric indicator read from a report row."""
    
    __tablename__ = 'pdf_metrics'
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    pdf_import_id = Column(String, ForeignKey('pdf_imports.id', ondelete='CASCADE'), nullable=False)
    detected_client_id = Column(String, ForeignKey('pdf_detected_clients.id', ondelete='CASCADE'), nullable=False)
    client_id = Column(String, ForeignKey('clients.id', ondelete='SET NULL'))
    metric_key = Column(String, nullable=False)
    metric_label = Column(String, nullable=False)
    value = Column(Float, nullable=False, default=0)
    period_year = Column(Integer)
    period_month = Column(Integer)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    pdf_import = relationship("PdfImport", back_populates="metrics")
    
    def __repr__(self):
        return f"<PdfMetric(key='{self.metric_key}', value={self.value})>"
