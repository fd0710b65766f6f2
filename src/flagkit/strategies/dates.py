"""
Date and timezone helpers for date-driven strategies.

Golden Rules:
1. Every datetime handled by a strategy is timezone-aware
2. Naive input is interpreted in the configured timezone (UTC by default)
3. Parsing never raises: failures return None and the caller fails closed

Accepted inputs:
- datetime / date objects
- ISO 8601 strings: "2025-06-01", "2025-06-01T09:30:00", "2025-06-01T09:30:00Z",
  "2025-06-01T09:30:00-05:00", "2025-06-01 09:30:00"
"""

from datetime import date, datetime, time, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

UTC = timezone.utc


# ============================================================
# TIMEZONES
# ============================================================

def resolve_timezone(tz_name: Any) -> tzinfo | None:
    """
    Resolve an IANA timezone name.

    Returns None for missing, non-string or unknown names.
    """
    if not isinstance(tz_name, str) or not tz_name.strip():
        return None
    try:
        return ZoneInfo(tz_name.strip())
    except (ZoneInfoNotFoundError, ValueError):
        return None


def is_valid_timezone(tz_name: Any) -> bool:
    """Check if timezone name is a valid IANA timezone."""
    return resolve_timezone(tz_name) is not None


# ============================================================
# PARSING
# ============================================================

def parse_datetime(value: Any, tz: tzinfo | None = None) -> datetime | None:
    """
    Parse a config or context value into an aware datetime.

    Args:
        value: datetime, date or ISO 8601 string
        tz: Timezone applied to naive values (UTC if omitted)

    Returns:
        Aware datetime, or None if the value can't be parsed
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time())
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz or UTC)
    return dt


def start_of_day(dt: datetime) -> datetime:
    """Normalize to 00:00:00 in the datetime's own timezone."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    """Normalize to 23:59:59 in the datetime's own timezone."""
    return dt.replace(hour=23, minute=59, second=59, microsecond=0)


def now_in(tz: tzinfo | None = None) -> datetime:
    """Current time, timezone-aware."""
    return datetime.now(tz or UTC)


def resolve_now(context: dict[str, Any], tz: tzinfo | None = None) -> datetime | None:
    """
    Get "now" for an evaluation.

    Uses context["current_date"] when present so evaluations can be pinned
    to a fixed instant. Returns None if that value is present but unparsable.
    """
    current = context.get("current_date")
    if current is None:
        return now_in(tz)
    return parse_datetime(current, tz)
