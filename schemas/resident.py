from datetime import datetime
from typing import Optional

from .common import BaseSchema
from .device import DeviceRead


class ResidentCreate(BaseSchema):
    name: Optional[str] = None
    room: Optional[str] = None


class ResidentUpdate(BaseSchema):
    name: Optional[str] = None
    room: Optional[str] = None


class AssignDevice(BaseSchema):
    device_id: Optional[int] = None


class ResidentRead(BaseSchema):
    id: int
    name: str
    room: str
    device_id: Optional[int] = None
    created_at: Optional[datetime] = None
    device: Optional[DeviceRead] = None
