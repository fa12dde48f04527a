"""
Calendar and schedule utilities for the batch workflows.

Archive keys are derived from a fixed UTC offset so they do not depend on the
host time zone. Trigger times are resolved from a named time zone.
"""

from datetime import datetime, time, timedelta, timezone
from typing import Optional, Tuple

import pytz

from ladderbot.constants import ArchiveConstants


def parse_clock_time(clock: str) -> Tuple[int, int]:
    """
    Parse an "HH:MM" string into an (hour, minute) pair.

    Raises:
        ValueError: If the format or the components are invalid
    """
    parts = clock.strip().split(':')
    if len(parts) != 2:
        raise ValueError(f"Invalid clock time: {clock}. Use HH:MM")

    try:
        hour = int(parts[0])
        minute = int(parts[1])
    except ValueError as e:
        raise ValueError(f"Invalid clock time: {clock}. Use HH:MM") from e

    if not 0 <= hour < 24 or not 0 <= minute < 60:
        raise ValueError(f"Invalid clock time components: hour={hour}, minute={minute}")
    return hour, minute


def scheduled_time(clock: str, timezone_name: str) -> time:
    """
    Build a timezone-aware trigger time for discord.ext.tasks loops.

    The zone's current UTC offset is frozen into a fixed-offset tzinfo.

    Args:
        clock: Local wall-clock time as "HH:MM"
        timezone_name: IANA zone name (e.g. "Asia/Seoul")

    Returns:
        datetime.time carrying the resolved offset
    """
    hour, minute = parse_clock_time(clock)
    tz = pytz.timezone(timezone_name)
    today = datetime.now(tz).date()
    localized = tz.localize(datetime.combine(today, time(hour, minute)))
    return time(hour, minute, tzinfo=timezone(localized.utcoffset()))


def is_archive_day(timezone_name: str, archive_day: int, now: Optional[datetime] = None) -> bool:
    """Check whether the local calendar day in timezone_name is archive_day."""
    tz = pytz.timezone(timezone_name)
    if now is None:
        local_now = datetime.now(tz)
    else:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        local_now = now.astimezone(tz)
    return local_now.day == archive_day


def previous_month_key(now: Optional[datetime] = None, utc_offset_hours: int = 9,
                       is_test: bool = False) -> str:
    """
    Get the archive key of the calendar month before now.

    The month is evaluated on the civil calendar at UTC+utc_offset_hours.
    Naive datetimes are treated as UTC.

    Returns:
        "YYYY-MM", or "YYYY-MM-TEST" when is_test is set
    """
    civil_tz = timezone(timedelta(hours=utc_offset_hours))
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    local_now = now.astimezone(civil_tz)
    if local_now.month == 1:
        year, month = local_now.year - 1, 12
    else:
        year, month = local_now.year, local_now.month - 1

    key = ArchiveConstants.KEY_FORMAT.format(year=year, month=month)
    if is_test:
        key += ArchiveConstants.TEST_SUFFIX
    return key


def has_fixed_offset(timezone_name: str, year: Optional[int] = None) -> bool:
    """
    Check whether a zone keeps one UTC offset all year.

    scheduled_time() freezes the offset in force at startup, which is only
    correct for zones like this.

    Raises:
        ValueError: If the zone name is not known
    """
    try:
        tz = pytz.timezone(timezone_name)
    except pytz.UnknownTimeZoneError as e:
        raise ValueError(f"Unknown time zone: {timezone_name}") from e
    year = year or datetime.now(timezone.utc).year
    offsets = {
        tz.localize(datetime(year, month, 1, 12)).utcoffset()
        for month in range(1, 13)
    }
    return len(offsets) == 1
