from datetime import datetime, timezone, timedelta
from typing import Optional
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def local_zone(tz_name: str) -> ZoneInfo:
    return ZoneInfo(tz_name)


def local_time_label(tz_name: str, moment: Optional[datetime] = None) -> str:
    """Short wall-clock label stored on alerts, e.g. ``03:20 PM``."""
    moment = moment or utcnow()
    return moment.astimezone(local_zone(tz_name)).strftime("%I:%M %p")


def local_midnight_utc(tz_name: str, moment: Optional[datetime] = None) -> datetime:
    """Start of the current local day in ``tz_name``, expressed in UTC."""
    moment = moment or utcnow()
    local = moment.astimezone(local_zone(tz_name))
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)


def offline_cutoff(started_at: datetime, offline_after_seconds: int) -> datetime:
    return started_at - timedelta(seconds=offline_after_seconds)
