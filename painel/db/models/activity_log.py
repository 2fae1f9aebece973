"""Audit trail of operator and import actions."""
import uuid
from sqlalchemy import Column, String, DateTime, Text
from .base import Base
from ...utils.dates import utc_now

class ActivityLog(Base):
    """One entry of the activity feed."""
    
    __tablename__ = 'activity_logs'
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_name = Column(String, nullable=False)
    action_type = Column(String, nullable=False)
    entity_type = Column(String, nullable=False)
    entity_id = Column(String)
    entity_name = Column(String)
    client_name = Column(String)
    description = Column(Text, nullable=False)
    old_value = Column(Text)
    new_value = Column(Text)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    
    def __repr__(self):
        return f"<ActivityLog(action='{self.action_type}', entity='{self.entity_type}')>"
