"""UTC datetime utilities."""

from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Attach UTC to naive datetimes and convert aware ones to UTC.

    SQLite hands back naive datetimes for timezone-aware columns, so values
    read from the store pass through here before being compared or returned.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_instant(value: object) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or date-time into an aware UTC datetime.

    Date-only values mean midnight UTC. Naive date-times are read as UTC.

    Returns:
        The parsed instant, or None when the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None

    try:
        # Offsets near the ends of the calendar overflow on conversion to UTC
        return ensure_utc(parsed)
    except (ValueError, OverflowError):
        return None
