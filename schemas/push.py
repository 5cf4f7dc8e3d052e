from datetime import datetime
from typing import Optional

from .common import BaseSchema


class PushRegister(BaseSchema):
    token: Optional[str] = None
    platform: str = "ios"


class PushMessage(BaseSchema):
    title: Optional[str] = None
    body: Optional[str] = None


class PushSendOne(PushMessage):
    token: Optional[str] = None


class PushTokenRead(BaseSchema):
    id: int
    token: str
    platform: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
