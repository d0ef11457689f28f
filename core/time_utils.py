from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from core.settings import DISPLAY_TIMEZONE

STORE_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
STORE_DATE_FORMAT = "%Y-%m-%d"


def now_utc() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_store_datetime(value: str) -> datetime:
    """Parse a store timestamp ('YYYY-MM-DD HH:MM:SS', UTC) into an aware datetime."""
    return datetime.strptime(value, STORE_DATETIME_FORMAT).replace(tzinfo=timezone.utc)


def format_local_datetime(value: str, tz_name: str | None = None) -> str:
    """Render a store timestamp in the display timezone, e.g. '01 Jan 2024, 05:30 PM'.

    Unparsable input is returned unchanged.
    """
    try:
        dt = parse_store_datetime(value)
        local = dt.astimezone(ZoneInfo(tz_name or DISPLAY_TIMEZONE))
    except (TypeError, ValueError, KeyError):
        return value
    return local.strftime("%d %b %Y, %I:%M %p")


def format_local_date(value: str, tz_name: str | None = None) -> str:
    """Render a store date ('YYYY-MM-DD', midnight UTC) as '01 Jan 2024' in the display timezone."""
    try:
        dt = datetime.strptime(value, STORE_DATE_FORMAT).replace(tzinfo=timezone.utc)
        local = dt.astimezone(ZoneInfo(tz_name or DISPLAY_TIMEZONE))
    except (TypeError, ValueError, KeyError):
        return value
    return local.strftime("%d %b %Y")
