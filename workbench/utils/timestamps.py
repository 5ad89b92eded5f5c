"""UTC timestamp helpers.

Every timestamp in the workbench is timezone-aware UTC. These helpers cover
the clock, storage formatting (ISO 8601 with a ``Z`` suffix) and the
human-readable format used by exports.
"""

from datetime import datetime, timezone
from typing import Optional

STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"
DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def current_year() -> int:
    """Return the current calendar year in UTC."""
    return utc_now().year


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime for database storage.

    Args:
        dt: Datetime to format (naive values are treated as UTC)

    Returns:
        ISO 8601 string with microseconds and 'Z' suffix, or None

    Example:
        >>> format_timestamp(datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc))
        '2025-11-04T12:00:00.000000Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return None
    return dt_utc.strftime(STORAGE_FORMAT)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO 8601 timestamp back into an aware UTC datetime.

    Accepts values with or without microseconds and with or without the
    trailing 'Z'. Empty values yield None.
    """
    if not value:
        return None

    cleaned = value.strip().rstrip("Z")
    try:
        parsed = datetime.strptime(cleaned, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        parsed = datetime.strptime(cleaned, "%Y-%m-%dT%H:%M:%S")

    return parsed.replace(tzinfo=timezone.utc)


def format_for_display(dt: Optional[datetime]) -> str:
    """Format a datetime as ``YYYY-MM-DD HH:MM:SS`` (UTC) for reports.

    Returns an empty string for None.
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""
    return dt_utc.strftime(DISPLAY_FORMAT)
