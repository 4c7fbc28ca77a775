"""Schedule aggregation for a client's month.

Counts planned days per plan and the calories the client is scheduled for.
"""
from collections import defaultdict
from typing import List, Optional

from nutriplan.domain.MealPlan import MealPlan
from nutriplan.utilities.date_keys import month_keys


def client_day_plan(plans: List[MealPlan], key: str) -> Optional[MealPlan]:
    """The plan a client follows on ``key``: the first plan listing that day."""
    for plan in plans:
        if key in plan.assigned_dates:
            return plan
    return None


def summarize_month(plans: List[MealPlan], year: int, month: int):
    """Aggregate the month's schedule.

    Returns structure:
    {
      'year': int, 'month': int, 'days': int,
      'assigned_days': int, 'free_days': int,
      'plans': [ { 'id': str, 'planName': str, 'dietType': str, 'days': int, 'calories': int }, ... ],
      'total_calories': int, 'average_calories': float
    }
    """
    keys = month_keys(year, month)
    per_plan = defaultdict(int)
    total_calories = 0
    assigned = 0
    for key in keys:
        plan = client_day_plan(plans, key)
        if plan is None:
            continue
        assigned += 1
        per_plan[plan.id] += 1
        total_calories += plan.calories or 0

    rows = []
    for plan in plans:
        days = per_plan.get(plan.id, 0)
        if not days:
            continue
        rows.append({
            'id': plan.id,
            'planName': plan.plan_name,
            'dietType': plan.diet_type,
            'days': days,
            'calories': plan.calories,
        })
    rows.sort(key=lambda r: (-r['days'], r['planName'].lower()))

    return {
        'year': year,
        'month': month,
        'days': len(keys),
        'assigned_days': assigned,
        'free_days': len(keys) - assigned,
        'plans': rows,
        'total_calories': total_calories,
        'average_calories': round(total_calories / assigned, 1) if assigned else 0.0,
    }


__all__ = ["summarize_month", "client_day_plan"]
