"""Timezone helpers: every "now"-relative window is computed from an explicit
instant and an IANA zone, never from the process clock or locale."""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

logger = structlog.get_logger()

UTC_NAME = "UTC"


def zone_or_utc(name: str | None) -> ZoneInfo:
    """ZoneInfo for ``name``, or UTC when the name is empty or unknown."""
    if not name:
        return ZoneInfo(UTC_NAME)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(UTC_NAME)


def resolve_timezone(name: str | None) -> tuple[ZoneInfo, str]:
    """Like zone_or_utc() but logs the fallback and returns the effective name."""
    zone = zone_or_utc(name)
    if name and zone.key != name:
        logger.warning("timezone.unknown_fallback_utc", timezone=name)
        return zone, UTC_NAME
    return zone, zone.key


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops offsets) and normalize aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_today(now: datetime, zone: ZoneInfo) -> date:
    return as_utc(now).astimezone(zone).date()


def local_day_bounds(now: datetime, zone: ZoneInfo) -> tuple[datetime, datetime]:
    """[start, end] of the local calendar day containing ``now``, in UTC.

    ``end`` is the last microsecond before the next local midnight so the range
    can be used with inclusive comparisons across DST changes.
    """
    today = local_today(now, zone)
    start = datetime.combine(today, time.min, tzinfo=zone)
    next_start = datetime.combine(today + timedelta(days=1), time.min, tzinfo=zone)
    end = next_start - timedelta(microseconds=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def format_clock(value: datetime, zone: ZoneInfo) -> str:
    """12-hour clock time in ``zone``, e.g. ``9:05 AM``."""
    return as_utc(value).astimezone(zone).strftime("%I:%M %p").lstrip("0")
