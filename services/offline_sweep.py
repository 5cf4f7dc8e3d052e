"""
Offline sweep.

Periodically raises a ``Device offline`` alert for every active device whose
last heartbeat is older than ``OFFLINE_AFTER_SECONDS``. At most one open
(``New``) offline alert exists per device.
"""

import logging
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession

from models.alert import AlertStatusEnum, OFFLINE_ALERT_TYPE, SYSTEM_ELDERLY
from repositories.alert import AlertRepository
from repositories.device import DeviceRepository
from services.helpers import local_time_label, offline_cutoff, utcnow

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "offline_sweep"
UNKNOWN_ROOM = "Unknown"
SYSTEM_SOURCE = "system"


async def sweep_offline_devices(
    db: AsyncSession,
    started_at: datetime,
    offline_after_seconds: int,
    tz_name: str,
) -> int:
    """Create missing offline alerts. Returns the number created."""
    cutoff = offline_cutoff(started_at, offline_after_seconds)
    stale = await DeviceRepository(db).list_stale_active(cutoff)

    alert_repo = AlertRepository(db)
    created = 0
    for device in stale:
        if await alert_repo.find_open_offline_alert(device.id):
            continue

        await alert_repo.create({
            "device_id": device.id,
            "elderly": SYSTEM_ELDERLY,
            "room": device.room or UNKNOWN_ROOM,
            "type": OFFLINE_ALERT_TYPE,
            "confidence": 1.0,
            "status": AlertStatusEnum.NEW.value,
            "time": local_time_label(tz_name, started_at),
            "source": SYSTEM_SOURCE,
        })
        created += 1
        logger.warning(f"Device {device.device_id} offline since {device.last_seen_at}")

    return created


async def run_offline_sweep(context) -> int:
    """Scheduler entry point. Failures are logged and the next run proceeds."""
    started_at = utcnow()
    try:
        async with context.session_factory() as db:
            created = await sweep_offline_devices(
                db,
                started_at,
                context.settings.OFFLINE_AFTER_SECONDS,
                context.settings.TIMEZONE,
            )
    except Exception as e:
        logger.error(f"Offline sweep failed: {str(e)}", exc_info=True)
        return 0

    if created:
        logger.info(f"Offline sweep created {created} alerts")
    return created
