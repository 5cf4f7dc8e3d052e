"""
SQLAlchemy ORM models for UltraCare Backend.

Contains all database models organized by module.
"""

from .user import User
from .subscription import Subscription, PlanEnum, SubscriptionStatusEnum
from .device import Device
from .resident import Resident
from .alert import Alert, AlertStatusEnum
from .push_token import PushToken

__all__ = [
    "User",
    "Subscription",
    "PlanEnum",
    "SubscriptionStatusEnum",
    "Device",
    "Resident",
    "Alert",
    "AlertStatusEnum",
    "PushToken",
]
