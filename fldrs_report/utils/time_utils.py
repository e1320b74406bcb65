"""
Time and date utilities for the reporting window.

Key concepts:
  - Source timestamps are local (``*_LCL``) and stored naive; no timezone
    conversion happens anywhere in the report.
  - The trip window is measured in calendar months back from the run date.
  - Cutoff dates are compared against timestamps at midnight of that day.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timezone
from typing import Any, Optional

# Formats seen in the Oracle mirrors, tried in order after ISO 8601.
_TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y/%m/%d %H:%M:%S",
    "%d-%b-%y %I.%M.%S.%f %p",
    "%d-%b-%Y %H:%M:%S",
)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a source timestamp value into a naive ``datetime``.

    ``None`` and empty strings are treated as missing and return ``None``.
    ``date`` values are promoted to midnight. Timezone-aware values are
    stripped of their tzinfo (wall-clock time is kept).

    Args:
        value: A ``datetime``, ``date``, or string from the source.

    Returns:
        Naive ``datetime`` or ``None``.

    Raises:
        ValueError: If ``value`` is non-empty but cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return start_of_day(value)
    if not isinstance(value, str):
        raise ValueError(f"Unsupported timestamp type {type(value).__name__}: {value!r}")

    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text).replace(tzinfo=None)
    except ValueError:
        pass

    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    raise ValueError(f"Cannot parse timestamp {value!r}.")


def start_of_day(day: date) -> datetime:
    """Return midnight of ``day`` as a naive ``datetime``."""
    return datetime.combine(day, time.min)


def months_before(day: date, months: int) -> date:
    """Return the same calendar day ``months`` months before ``day``.

    The day is clamped to the last day of the target month, so
    ``months_before(date(2024, 2, 29), 12) == date(2023, 2, 28)``.

    Raises:
        ValueError: If ``months`` is negative.
    """
    if months < 0:
        raise ValueError(f"months must be >= 0, got {months}.")
    total = day.year * 12 + (day.month - 1) - months
    year, month0 = divmod(total, 12)
    month = month0 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)
