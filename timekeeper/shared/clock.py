"""
Clock Module

Time helpers shared by the timer and report services. All calendar days are
UTC days rendered as ``YYYY-MM-DD``.

Author: Timekeeper Development Team
"""

from datetime import date, datetime, timedelta, timezone
import time

from .errors import BadRequestError

DATE_FORMAT = "%Y-%m-%d"


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def utc_day(epoch_ms: int) -> str:
    """Calendar day (UTC) containing the given instant."""
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).strftime(DATE_FORMAT)


def parse_day(value: str, field: str = "date") -> date:
    """
    Parse a ``YYYY-MM-DD`` string.

    Raises:
        BadRequestError: If the value is not a valid calendar day
    """
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise BadRequestError(f"Invalid {field} '{value}', expected YYYY-MM-DD")


def week_bounds(day: date) -> tuple:
    """Sunday and Saturday of the week containing ``day``."""
    # weekday(): Monday=0 .. Sunday=6, shifted so Sunday=0
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    end = start + timedelta(days=6)
    return start, end
