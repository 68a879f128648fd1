# File: utils/dt_utils.py
"""Date and time utilities for PetBudget.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo, dateutil.

Every timestamp persisted by PetBudget is an ISO 8601 UTC string. Day keys
(quest resets, check-ins) are "YYYY-MM-DD" strings in the local timezone.
Older saves stored epoch milliseconds; dt_parse accepts those too.

Functions:
    - dt_now_utc: Current time in UTC
    - dt_day_key: Local calendar day keys
    - dt_parse: Normalize ISO strings, epoch millis and datetimes to UTC
    - dt_to_iso: Serialize a datetime as a UTC ISO string
    - dt_elapsed_units: Whole time units between two instants
    - dt_range_start: Lower bound for a report date range
    - dt_format_duration: Format timedelta to human-readable string
    - dt_time_until: Time remaining until a target instant
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
import logging
import math
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil import parser as dt_parser
from dateutil.relativedelta import relativedelta

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

# Report date ranges
DATE_RANGE_TODAY = "today"
DATE_RANGE_LAST_7_DAYS = "last7days"
DATE_RANGE_LAST_30_DAYS = "last30days"
DATE_RANGE_ALL = "all"

# Epoch values above this are milliseconds rather than seconds
_EPOCH_MILLIS_THRESHOLD = 100_000_000_000


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone used for local day keys.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone (naive values are taken as UTC)."""
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(tz_info)


def start_of_local_day(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Get the start of day (00:00:00) for a datetime in local timezone.

    Args:
        dt_obj: Datetime object (can be in any timezone)
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime at 00:00:00 in local timezone (timezone-aware)
    """
    return as_local(dt_obj, tz).replace(hour=0, minute=0, second=0, microsecond=0)


def dt_day_key(dt_obj: datetime, tz: ZoneInfo | None = None) -> str:
    """Return the local calendar day of a datetime as "YYYY-MM-DD"."""
    return as_local(dt_obj, tz).date().isoformat()


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse(value: str | int | float | date | datetime | None) -> datetime | None:
    """Normalize a stored timestamp to a UTC-aware datetime.

    Accepts:
    - ISO 8601 strings ("2025-04-07T14:30:00+00:00", "2025-04-07")
    - Epoch numbers (milliseconds from older saves, or seconds)
    - date and datetime objects (naive values are taken as UTC)

    Returns:
        UTC datetime, or None if the value cannot be interpreted.
    """
    if value is None or isinstance(value, bool):
        return None

    result: datetime | None = None

    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime.combine(value, datetime.min.time())
    elif isinstance(value, int | float):
        if not math.isfinite(value) or value <= 0:
            return None
        seconds = value / 1000 if value > _EPOCH_MILLIS_THRESHOLD else value
        try:
            result = datetime.fromtimestamp(seconds, UTC)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            result = dt_parser.isoparse(value)
        except ValueError:
            try:
                result = dt_parser.parse(value)
            except (ValueError, OverflowError):
                _LOGGER.debug("DEBUG: Unparseable timestamp: %s", value)
                return None
    else:
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=UTC)
    return result.astimezone(UTC)


def dt_to_iso(dt_obj: datetime) -> str:
    """Serialize a datetime as a UTC ISO 8601 string."""
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(UTC).isoformat()


# ==============================================================================
# Interval Arithmetic
# ==============================================================================


def dt_elapsed_units(start: datetime, end: datetime, unit: timedelta) -> int:
    """Return the number of whole `unit` intervals from start to end.

    Negative spans (clock moved backwards) count as zero.

    Examples:
        dt_elapsed_units(t, t + timedelta(seconds=119), timedelta(minutes=1)) → 1
        dt_elapsed_units(t, t, timedelta(minutes=1)) → 0
    """
    if end <= start:
        return 0
    return int((end - start) // unit)


def dt_range_start(
    date_range: str, now: datetime, tz: ZoneInfo | None = None
) -> datetime | None:
    """Return the inclusive lower bound for a report date range.

    Returns:
        UTC datetime, or None for DATE_RANGE_ALL (no lower bound).
    """
    if date_range == DATE_RANGE_TODAY:
        return start_of_local_day(now, tz).astimezone(UTC)
    if date_range == DATE_RANGE_LAST_7_DAYS:
        return now - relativedelta(days=7)
    if date_range == DATE_RANGE_LAST_30_DAYS:
        return now - relativedelta(days=30)
    return None


def dt_format_duration(td: timedelta | None) -> str:
    """Format a timedelta into a human-readable duration string.

    Examples:
        dt_format_duration(timedelta(days=1, hours=6)) → "1d 6h"
        dt_format_duration(timedelta(seconds=45)) → "45s"
        dt_format_duration(None) → "0"
    """
    if td is None or td <= timedelta():
        return "0"

    total_seconds = int(td.total_seconds())
    if total_seconds <= 0:
        return "0"

    days, remainder = divmod(total_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts: list[str] = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if seconds > 0 and not days and not hours:
        parts.append(f"{seconds}s")

    return " ".join(parts) if parts else "0"


def dt_time_until(target_dt: datetime | None, now: datetime | None = None) -> timedelta:
    """Return the time remaining until target_dt (zero once it has passed)."""
    if target_dt is None:
        return timedelta()
    current = now or dt_now_utc()
    if current >= target_dt:
        return timedelta()
    return target_dt - current
