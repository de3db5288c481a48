from datetime import datetime, timezone as dt_timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def get_zoneinfo(tz_name: Optional[str]) -> dt_timezone | ZoneInfo:
    if not tz_name:
        return dt_timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return dt_timezone.utc


def now_utc() -> datetime:
    return datetime.now(dt_timezone.utc)


def to_local(dt: datetime, tz_name: Optional[str]) -> datetime:
    """Convert to the display timezone. Naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(get_zoneinfo(tz_name))


def format_time(dt: datetime, tz_name: Optional[str]) -> str:
    """Short time for SMS bodies, e.g. ``08:30 AM``."""
    return to_local(dt, tz_name).strftime("%I:%M %p")


def format_datetime(dt: datetime, tz_name: Optional[str]) -> str:
    """Full timestamp for email bodies, e.g. ``Mon, 06 May 2024 08:30 AM IST``."""
    return to_local(dt, tz_name).strftime("%a, %d %b %Y %I:%M %p %Z").strip()
