"""Month grid and per-cell calendar state.

A cell is ``assigned`` when some plan holds its key, ``selected`` while it
sits in the multiple-mode selection, ``empty`` otherwise. ``past`` is derived
from today and only blocks single-click assignment.
"""
import calendar
from datetime import date
from typing import Dict, Iterable, List, Optional

from nutriplan.domain.MealPlan import MealPlan
from nutriplan.utilities.constants import WEEKDAYS
from nutriplan.utilities.date_keys import date_to_key, today_key

EMPTY = "empty"
SELECTED = "selected"
ASSIGNED = "assigned"


def month_days(year: int, month: int) -> List[Optional[date]]:
    """Days of the month, preceded by None blanks so the 1st lands on its weekday (Monday first)."""
    first_weekday, days_in_month = calendar.monthrange(year, month)
    days: List[Optional[date]] = [None] * first_weekday
    days.extend(date(year, month, d) for d in range(1, days_in_month + 1))
    return days


def cell_state(key: str, assignments: Dict[str, MealPlan], selection: Iterable[str]) -> str:
    if key in selection:
        return SELECTED
    if key in assignments:
        return ASSIGNED
    return EMPTY


def render_month(year: int, month: int, assignments: Dict[str, MealPlan],
                 selection: Iterable[str] = (), today: Optional[date] = None,
                 delete_mode: bool = False, filter_start: Optional[str] = None,
                 filter_end: Optional[str] = None) -> dict:
    """Build the calendar view for one month.

    ``filter_start``/``filter_end`` hide days outside the range; blank cells
    are kept for alignment.
    """
    selected = set(selection)
    today_k = today_key(today)
    cells = []
    for d in month_days(year, month):
        if d is None:
            cells.append(None)
            continue
        key = date_to_key(d)
        if filter_start and key < filter_start:
            continue
        if filter_end and key > filter_end:
            continue
        plan = assignments.get(key)
        past = key < today_k
        cells.append({
            "day": d.day,
            "date": key,
            "state": cell_state(key, assignments, selected),
            "plan_id": plan.id if plan else None,
            "plan_name": plan.plan_name if plan else None,
            "diet_type": plan.diet_type if plan else None,
            "calories": plan.calories if plan else None,
            "is_today": key == today_k,
            "is_past": past,
            # single-click assignment only onto free, non-past days
            "assignable": plan is None and not past and not delete_mode,
        })
    return {
        "year": year,
        "month": month,
        "title": f"{calendar.month_name[month]} {year}",
        "weekdays": list(WEEKDAYS),
        "cells": cells,
    }
