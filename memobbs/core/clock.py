# memobbs/core/clock.py
"""Fixed-offset (UTC+8) timestamp helpers.

Timestamps are stored as fixed-width ISO-8601 strings such as
``2024-03-01T08:15:30.123+08:00`` so that sorting the strings sorts the
instants. Date ranges are half-open and expressed as bare ``YYYY-MM-DD``
bounds, which compare correctly against the stored strings.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple

CST = timezone(timedelta(hours=8), name="UTC+08:00")

TIMESTAMP_LENGTH = len("2024-03-01T08:15:30.123+08:00")


def now_cst() -> datetime:
    return datetime.now(CST)


def format_timestamp(moment: datetime) -> str:
    """Render an aware datetime as a fixed-width UTC+8 string."""
    if moment.tzinfo is None:
        raise ValueError("Timestamp must be timezone-aware")
    return moment.astimezone(CST).isoformat(timespec="milliseconds")


def now_iso() -> str:
    return format_timestamp(now_cst())


def parse_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` calendar date."""
    if len(value) != 10:
        raise ValueError(f"Invalid date: {value!r}")
    return datetime.strptime(value, "%Y-%m-%d").date()


def day_bounds(day: date) -> Tuple[str, str]:
    """Half-open ``[start, end)`` bounds covering one calendar day."""
    return day.isoformat(), (day + timedelta(days=1)).isoformat()


def month_bounds(year: int, month: int) -> Tuple[str, str]:
    """Half-open ``[start, end)`` bounds covering one calendar month."""
    start = date(year, month, 1)
    if month == 12:
        end = date(year + 1, 1, 1)
    else:
        end = date(year, month + 1, 1)
    return start.isoformat(), end.isoformat()


def month_days(year: int, month: int) -> List[str]:
    """Every day of the month as zero-padded ``YYYY-MM-DD`` strings."""
    _, last_day = calendar.monthrange(year, month)
    return [date(year, month, day).isoformat() for day in range(1, last_day + 1)]


def in_day(timestamp: str, day: str, next_day: Optional[str] = None) -> bool:
    """Whether a stored timestamp falls on ``day`` (half-open range check)."""
    if next_day is None:
        _, next_day = day_bounds(parse_date(day))
    return day <= timestamp < next_day
