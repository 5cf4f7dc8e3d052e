"""
Alert schemas.

``AlertRead`` is the single outward view of an alert. It is built by
``services.alert_lifecycle.to_alert_read`` which resolves the display fields.
"""

from datetime import datetime
from typing import Optional

from .common import BaseSchema


class EventCreate(BaseSchema):
    """Incoming sensor event. Either ``residentId`` or ``elderly`` + ``room``."""
    resident_id: Optional[int] = None
    elderly: Optional[str] = None
    room: Optional[str] = None
    type: Optional[str] = None
    confidence: Optional[float] = None
    time: Optional[str] = None
    media_url: Optional[str] = None
    source: Optional[str] = None
    device_id: Optional[str] = None


class AlertStatusUpdate(BaseSchema):
    status: Optional[str] = None


class AlertMediaUpdate(BaseSchema):
    media_url: Optional[str] = None


class AlertRead(BaseSchema):
    id: int
    type: str
    status: str
    room: str
    elderly: str
    confidence: float
    confidence_percent: int
    time: str
    source: str
    media_url: Optional[str] = None
    created_at: Optional[datetime] = None
    acknowledged_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    resident_id: Optional[int] = None
    resident_exists: bool
    display_name: str
    device_id: Optional[str] = None


class AlertDetail(AlertRead):
    resident_display_name: str
