"""
Event-related Pydantic schemas
"""

from datetime import date, datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

class EventCreate(BaseModel):
    """Schema for creating an event"""
    title: str = Field(min_length=1)
    description: Optional[str] = None
    event_date: Optional[date] = None
    location: Optional[str] = None

class EventResponse(BaseModel):
    """Basic event response"""
    id: int
    title: str
    description: Optional[str] = None
    event_date: Optional[date] = None
    location: Optional[str] = None
    public_code: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PublicEvent(BaseModel):
    """Read-only shared view of an event and its seating chart"""
    id: int
    title: str
    description: Optional[str] = None
    event_date: Optional[date] = None
    location: Optional[str] = None
    seating_data: Dict[str, Any]

    class Config:
        from_attributes = True
