"""Assignment modes and how each one turns user input into a set of date keys."""
from enum import Enum
from typing import Iterable, Optional, Set

from nutriplan.domain.errors import ValidationError
from nutriplan.utilities.date_keys import month_keys, normalize_key, range_keys


class AssignmentMode(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    MONTH = "month"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value) -> "AssignmentMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValidationError(f"Unknown mode '{value}'. Must be one of: {allowed}", field="mode") from None


def resolve_single(clicked) -> Set[str]:
    if clicked is None:
        raise ValidationError("No day selected", field="date")
    return {normalize_key(clicked)}


def resolve_multiple(selection: Iterable) -> Set[str]:
    return {normalize_key(d) for d in selection}


def resolve_month(year: int, month: int) -> Set[str]:
    return set(month_keys(year, month))


def resolve_custom(start, end) -> Set[str]:
    if not start or not end:
        raise ValidationError("Both a start and an end date are required", field="start" if not start else "end")
    return set(range_keys(start, end))


def resolve_targets(mode, *, clicked=None, selection: Optional[Iterable] = None,
                    year: Optional[int] = None, month: Optional[int] = None,
                    start=None, end=None) -> Set[str]:
    """Resolve the target keys for ``mode``; an empty result is rejected."""
    mode = AssignmentMode.parse(mode)
    if mode is AssignmentMode.SINGLE:
        targets = resolve_single(clicked)
    elif mode is AssignmentMode.MULTIPLE:
        targets = resolve_multiple(selection or ())
    elif mode is AssignmentMode.MONTH:
        if year is None or month is None:
            raise ValidationError("No month displayed", field="month")
        targets = resolve_month(year, month)
    else:
        targets = resolve_custom(start, end)
    if not targets:
        raise ValidationError("No dates selected", field="dates")
    return targets
