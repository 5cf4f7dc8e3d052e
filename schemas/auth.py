"""
Authentication and account schemas.
"""

from datetime import datetime
from typing import Optional
from pydantic import StrictBool

from .common import BaseSchema


class Credentials(BaseSchema):
    """Signup/login request. Presence is checked by the service for precise messages."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseSchema):
    id: int
    email: str
    created_at: Optional[datetime] = None


class HouseholdAdminRead(BaseSchema):
    id: int
    email: str
    is_disabled: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HouseholdAdminStatusUpdate(BaseSchema):
    is_disabled: Optional[StrictBool] = None
