"""School-calendar helpers: the configured zone, today, and creation days."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from periodlog.config import settings


def school_tz() -> ZoneInfo:
    return ZoneInfo(settings.school_timezone)


def school_now(tz: Optional[ZoneInfo] = None) -> datetime:
    return datetime.now(tz or school_tz())


def school_today(tz: Optional[ZoneInfo] = None) -> date:
    return school_now(tz).date()


def to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def from_epoch_ms(timestamp: int, tz: Optional[ZoneInfo] = None) -> datetime:
    return datetime.fromtimestamp(timestamp / 1000, tz=tz or timezone.utc)


def creation_day(timestamp: int, tz: ZoneInfo) -> date:
    """Calendar day a log was created on, as seen in ``tz``."""
    return from_epoch_ms(timestamp, tz).date()
