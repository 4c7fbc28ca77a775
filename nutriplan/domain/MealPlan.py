"""MealPlan domain entity: a dietitian's plan for one client plus the days it is assigned to."""
from typing import Iterable, List, Optional, Set

from nutriplan.domain.Meal import Meal
from nutriplan.utilities.constants import DEFAULT_DIET_TYPE


class MealPlan:
    def __init__(self, id: str = "", plan_name: str = "", diet_type: str = DEFAULT_DIET_TYPE,
                 calories: int = 0, notes: str = "", image_url: str = "",
                 meals: Optional[List[Meal]] = None, assigned_dates: Optional[Iterable[str]] = None):
        self.id = id
        self.plan_name = plan_name
        self.diet_type = diet_type
        self.calories = calories
        self.notes = notes
        self.image_url = image_url
        self.meals = meals[:] if meals else []
        self.assigned_dates: Set[str] = set(assigned_dates or ())

    def __str__(self) -> str:
        return f"{self.plan_name} ({self.diet_type}, {self.calories} kcal) - {len(self.assigned_dates)} days"

    __repr__ = __str__

    def has_name(self, name: str) -> bool:
        """Case-insensitive name match, ignoring surrounding whitespace."""
        return self.plan_name.strip().casefold() == (name or "").strip().casefold()

    def holds(self, key: str) -> bool:
        return key in self.assigned_dates

    def sorted_dates(self) -> List[str]:
        return sorted(self.assigned_dates)

    def copy(self) -> "MealPlan":
        return MealPlan(self.id, self.plan_name, self.diet_type, self.calories, self.notes,
                        self.image_url, [Meal(m.name, m.calories, m.details) for m in self.meals],
                        set(self.assigned_dates))

    @staticmethod
    def from_dict(data):
        '''Creates a MealPlan from an API payload (camelCase keys, ``id`` or ``_id``).'''
        d = dict(data) if isinstance(data, dict) else {}
        try:
            calories = int(d.get("calories") or 0)
        except (TypeError, ValueError):
            calories = 0
        return MealPlan(
            id=str(d.get("id") or d.get("_id") or ""),
            plan_name=str(d.get("planName") or "").strip(),
            diet_type=d.get("dietType") or DEFAULT_DIET_TYPE,
            calories=calories,
            notes=d.get("notes") or "",
            image_url=d.get("imageUrl") or "",
            meals=[Meal.from_dict(m) for m in d.get("meals") or []],
            assigned_dates=[k for k in d.get("assignedDates") or [] if isinstance(k, str)],
        )

    def to_dict(self):
        return {
            "id": self.id,
            "planName": self.plan_name,
            "dietType": self.diet_type,
            "calories": self.calories,
            "notes": self.notes,
            "imageUrl": self.image_url,
            "meals": [m.to_dict() for m in self.meals],
            "assignedDates": self.sorted_dates(),
        }

    def detail(self):
        """Read-only view shown when an assigned calendar cell is opened."""
        return {
            "planName": self.plan_name,
            "dietType": self.diet_type,
            "calories": self.calories,
            "meals": [m.to_dict() for m in self.meals],
            "notes": self.notes,
            "imageUrl": self.image_url or None,
        }
