from datetime import datetime
from typing import Optional

from .common import BaseSchema


class PlanSelect(BaseSchema):
    plan: Optional[str] = None


class SubscriptionRead(BaseSchema):
    id: int
    user_id: int
    plan: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
