"""
Concierge Request Model for guest service tracking
"""

from sqlalchemy import Column, DateTime, Integer, String, Text

from .database import Base
from .models import utcnow


class ConciergeRequest(Base):
    __tablename__ = "concierge_requests"

    id = Column(String(20), primary_key=True)  # CR0001, CR0002, ...
    guest_name = Column(String(255), nullable=False)
    guest_id = Column(String(50), nullable=False)
    room_number = Column(String(20), nullable=False, index=True)
    request_type = Column(String(30), nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(String(10), default="medium", nullable=False)
    status = Column(String(20), default="pending", nullable=False, index=True)

    request_date = Column(DateTime, default=utcnow)
    required_by_date = Column(DateTime, nullable=True)
    assigned_to = Column(String(255), nullable=True)
    assigned_date = Column(DateTime, nullable=True)
    completed_date = Column(DateTime, nullable=True)

    notes = Column(Text, default="")
    staff_notes = Column(Text, default="")
    progress_percentage = Column(Integer, default=0, nullable=False)
    last_updated = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
