from datetime import datetime
from typing import Optional

from pydantic import StrictBool, field_validator

from .common import BaseSchema


class DeviceRead(BaseSchema):
    id: int
    device_id: str
    name: Optional[str] = None
    room: Optional[str] = None
    user_id: Optional[int] = None
    is_active: bool
    last_seen_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class DeviceCreate(BaseSchema):
    device_id: Optional[str] = None
    name: Optional[str] = None
    room: Optional[str] = None


class DeviceUpdate(BaseSchema):
    """Partial update; only fields present in the request body are applied."""
    name: Optional[str] = None
    room: Optional[str] = None
    is_active: Optional[StrictBool] = None


class Heartbeat(BaseSchema):
    device_id: Optional[str] = None
    name: Optional[str] = None
    room: Optional[str] = None

    @field_validator("device_id", mode="before")
    @classmethod
    def coerce_device_id(cls, v):
        # Sensor firmware may send a numeric id.
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v) if v else None
        return v


class ClaimRequest(BaseSchema):
    device_id: Optional[str] = None
