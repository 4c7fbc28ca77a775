"""Meal entity: one dish of a meal plan (name, calories, free-text details)."""


class Meal:
    def __init__(self, name: str = "", calories: int = 0, details: str = ""):
        self.name = name
        self.calories = calories
        self.details = details

    def __str__(self) -> str:
        return f"{self.name} - {self.calories} kcal"

    __repr__ = __str__

    def __eq__(self, other):
        if not isinstance(other, Meal):
            return NotImplemented
        return (self.name, self.calories, self.details) == (other.name, other.calories, other.details)

    @staticmethod
    def from_dict(data):
        '''Creates a Meal from an API payload. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        try:
            calories = int(d.get("calories") or 0)
        except (TypeError, ValueError):
            calories = 0
        return Meal(
            name=str(d.get("name") or "").strip(),
            calories=calories,
            details=str(d.get("details") or "").strip(),
        )

    def to_dict(self):
        return {"name": self.name, "calories": self.calories, "details": self.details}
