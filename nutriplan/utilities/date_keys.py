"""Date keys: the ``YYYY-MM-DD`` strings that identify a calendar day.

Keys are built from the local calendar fields of a date (year, month, day),
never from a UTC conversion, so a datetime at local midnight always maps to
its own day. Two dates are the same day iff their keys are equal, and keys
sort chronologically as plain strings.
"""
from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

from nutriplan.domain.errors import ValidationError

DateLike = Union[date, datetime]

_KEY_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def date_to_key(d: DateLike) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def key_to_date(key: str) -> date:
    """Parse a key back into a ``date``. Raises ValidationError on bad input."""
    if not isinstance(key, str) or not _KEY_PATTERN.match(key):
        raise ValidationError(f"Invalid date '{key}', expected YYYY-MM-DD", field="date")
    y, m, d = (int(part) for part in key.split('-'))
    try:
        return date(y, m, d)
    except ValueError:
        raise ValidationError(f"Invalid date '{key}'", field="date") from None


def normalize_key(value: Union[str, DateLike]) -> str:
    """Accept a key or a date and return the canonical key."""
    if isinstance(value, (date, datetime)):
        return date_to_key(value)
    return date_to_key(key_to_date(value))


def today_key(today: Optional[date] = None) -> str:
    return date_to_key(today or date.today())


def is_past(key: str, today: Optional[date] = None) -> bool:
    # keys compare chronologically
    return key < today_key(today)


def month_keys(year: int, month: int) -> List[str]:
    """Every key of the month, 1st through last day."""
    days_in_month = calendar.monthrange(year, month)[1]
    return [date_to_key(date(year, month, day)) for day in range(1, days_in_month + 1)]


def range_keys(start: Union[str, DateLike], end: Union[str, DateLike]) -> List[str]:
    """Every key from start to end inclusive.

    A start after the end is rejected, the bounds are never swapped.
    """
    start_date = key_to_date(normalize_key(start))
    end_date = key_to_date(normalize_key(end))
    if start_date > end_date:
        raise ValidationError(
            f"Start date {date_to_key(start_date)} is after end date {date_to_key(end_date)}",
            field="start",
        )
    span = (end_date - start_date).days
    return [date_to_key(start_date + timedelta(days=i)) for i in range(span + 1)]


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move ``delta`` months forward (or back) and return (year, month)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


__all__ = [
    'date_to_key', 'key_to_date', 'normalize_key', 'today_key', 'is_past',
    'month_keys', 'range_keys', 'shift_month',
]
