from typing import Final

DIET_TYPES: Final[tuple[str, ...]] = (
    "Vegan", "Vegetarian", "Keto", "Mediterranean", "High-Protein", "Low-Carb", "Anything"
)
DEFAULT_DIET_TYPE: Final[str] = "Anything"

# Limits enforced by the meal-plan API on create; checked locally as well
PLAN_NAME_MIN: Final[int] = 2
PLAN_NAME_MAX: Final[int] = 100
PLAN_CALORIES_MIN: Final[int] = 500
PLAN_CALORIES_MAX: Final[int] = 5000
NOTES_MAX: Final[int] = 500
MEAL_NAME_MIN: Final[int] = 2
MEAL_NAME_MAX: Final[int] = 100
MEAL_CALORIES_MAX: Final[int] = 2000
MEAL_DETAILS_MAX: Final[int] = 500

WEEKDAYS: Final[tuple[str, ...]] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

ASSIGNMENT_MODES: Final[tuple[str, ...]] = ("single", "multiple", "month", "custom")
