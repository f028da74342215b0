"""
Event model; the seating chart is stored whole in one JSON column
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, JSON

from seatplan.core.db import Base

class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    event_date = Column(Date, nullable=True)
    location = Column(String(255), nullable=True)
    public_code = Column(String(50), unique=True, nullable=False, index=True)
    seating_data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
