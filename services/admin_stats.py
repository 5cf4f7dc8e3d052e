"""
Platform metrics for the admin dashboard.

Each metric is computed on its own; a failing metric is reported as ``None``
and named in ``errors`` so the rest of the dashboard still renders.
"""

import logging
from typing import Awaitable, Callable, List, TypeVar
from sqlalchemy.ext.asyncio import AsyncSession

from models.alert import Alert
from repositories.alert import AlertRepository
from repositories.device import DeviceRepository
from repositories.subscription import SubscriptionRepository
from repositories.user import UserRepository
from schemas.admin import AdminStats, RecentAlert
from services.alert_lifecycle import display_name, linked_device, to_percent
from services.helpers import local_midnight_utc

logger = logging.getLogger(__name__)

RECENT_ALERTS_LIMIT = 10

T = TypeVar("T")


def to_recent_alert(alert: Alert) -> RecentAlert:
    device = linked_device(alert)
    owner = device.owner if device else None
    return RecentAlert(
        id=alert.id,
        type=alert.type,
        status=alert.status,
        room=alert.room,
        confidence_percent=to_percent(alert.confidence),
        created_at=alert.created_at,
        display_name=display_name(alert),
        resident_name=alert.resident.name if alert.resident else None,
        device_id=device.device_id if device else None,
        device_name=device.name if device else None,
        owner_email=owner.email if owner else None,
    )


async def _recent_alerts(db: AsyncSession) -> List[RecentAlert]:
    alerts = await AlertRepository(db).list_recent(limit=RECENT_ALERTS_LIMIT)
    return [to_recent_alert(a) for a in alerts]


async def collect_stats(db: AsyncSession, tz_name: str) -> AdminStats:
    stats = AdminStats()

    async def metric(name: str, compute: Callable[[], Awaitable[T]]):
        try:
            return await compute()
        except Exception as e:
            logger.error(f"Admin metric {name} failed: {str(e)}")
            await db.rollback()
            stats.errors.append(name)
            return None

    stats.total_household_admins = await metric(
        "totalHouseholdAdmins", lambda: UserRepository(db).count()
    )
    stats.active_pro_subscriptions = await metric(
        "activeProSubscriptions", lambda: SubscriptionRepository(db).count_active_pro()
    )
    stats.total_devices = await metric(
        "totalDevices", lambda: DeviceRepository(db).count()
    )
    stats.alerts_today = await metric(
        "alertsToday", lambda: AlertRepository(db).count_created_since(local_midnight_utc(tz_name))
    )
    stats.recent_alerts = await metric("recentAlerts", lambda: _recent_alerts(db))
    return stats
