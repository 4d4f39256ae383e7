from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_local(dt: datetime, time_zone: str | None = None) -> datetime:
    dt = ensure_aware(dt)
    if time_zone:
        return dt.astimezone(ZoneInfo(time_zone))
    return dt
