from datetime import datetime
from typing import List, Optional

from .common import BaseSchema


class RecentAlert(BaseSchema):
    id: int
    type: str
    status: str
    room: str
    confidence_percent: int
    created_at: Optional[datetime] = None
    display_name: str
    resident_name: Optional[str] = None
    device_id: Optional[str] = None
    device_name: Optional[str] = None
    owner_email: Optional[str] = None


class AdminStats(BaseSchema):
    ok: bool = True
    total_household_admins: Optional[int] = None
    active_pro_subscriptions: Optional[int] = None
    total_devices: Optional[int] = None
    alerts_today: Optional[int] = None
    recent_alerts: Optional[List[RecentAlert]] = None
    errors: List[str] = []
