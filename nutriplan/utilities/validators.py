"""
Input validation schemas using Pydantic for plan drafts and calendar requests.
"""
import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from nutriplan.domain.errors import ValidationError
from nutriplan.utilities.constants import (
    ASSIGNMENT_MODES,
    DIET_TYPES,
    MEAL_CALORIES_MAX,
    MEAL_DETAILS_MAX,
    MEAL_NAME_MAX,
    MEAL_NAME_MIN,
    NOTES_MAX,
    PLAN_CALORIES_MAX,
    PLAN_CALORIES_MIN,
    PLAN_NAME_MAX,
    PLAN_NAME_MIN,
)

_URL_PATTERN = re.compile(r'^https?://.+')


class MealInput(BaseModel):
    """Schema for one meal entry of a plan draft."""
    name: str = Field(..., min_length=MEAL_NAME_MIN, max_length=MEAL_NAME_MAX)
    calories: int = Field(0, ge=0, le=MEAL_CALORIES_MAX)
    details: str = Field("", max_length=MEAL_DETAILS_MAX)

    @field_validator('name', 'details', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v if v is not None else ""

    @field_validator('calories', mode='before')
    @classmethod
    def blank_calories(cls, v):
        """An empty calories field counts as 0."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0
        return v


class PlanDraftInput(BaseModel):
    """Schema for a new meal plan, mirroring the API's create rules."""
    model_config = ConfigDict(populate_by_name=True)

    plan_name: str = Field(..., alias='planName', min_length=PLAN_NAME_MIN, max_length=PLAN_NAME_MAX)
    diet_type: str = Field(..., alias='dietType')
    calories: int = Field(..., ge=PLAN_CALORIES_MIN, le=PLAN_CALORIES_MAX)
    notes: str = Field("", max_length=NOTES_MAX)
    image_url: str = Field("", alias='imageUrl')
    meals: List[MealInput]

    @field_validator('plan_name', 'notes', 'image_url', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v if v is not None else ""

    @field_validator('diet_type')
    @classmethod
    def validate_diet_type(cls, v):
        if v not in DIET_TYPES:
            raise ValueError('Invalid diet type. Must be one of: ' + ', '.join(DIET_TYPES))
        return v

    @field_validator('image_url')
    @classmethod
    def validate_image_url(cls, v):
        if v and not _URL_PATTERN.match(v):
            raise ValueError('Image URL must be a valid HTTP/HTTPS URL')
        return v

    @field_validator('meals')
    @classmethod
    def validate_meals(cls, v):
        """Ensure plan has at least one meal."""
        if not v:
            raise ValueError('At least one meal is required')
        return v

    def to_payload(self, dietitian_id: str, client_id: str) -> dict:
        """Body for ``POST /meal-plans``."""
        return {
            "planName": self.plan_name,
            "dietType": self.diet_type,
            "calories": self.calories,
            "notes": self.notes,
            "imageUrl": self.image_url,
            "meals": [m.model_dump() for m in self.meals],
            "dietitianId": dietitian_id,
            "userId": client_id,
        }


class CalendarRangeInput(BaseModel):
    """Schema for a custom-range request (keys are validated by the codec)."""
    start: str = Field(..., min_length=1)
    end: str = Field(..., min_length=1)


class ModeInput(BaseModel):
    mode: str = Field(..., pattern=r'^(' + '|'.join(ASSIGNMENT_MODES) + r')$')


def validate_plan_draft(data) -> PlanDraftInput:
    """Validate a draft (dict or PlanDraftInput) and raise our ValidationError on failure."""
    if isinstance(data, PlanDraftInput):
        return data
    try:
        return PlanDraftInput.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(loc) for loc in first.get("loc", ()))
        message = first.get("msg", "Invalid plan")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        raise ValidationError(message, field=field or None) from exc


def plan_name_of(data) -> Optional[str]:
    """Best-effort name lookup on a raw draft, used before full validation."""
    if isinstance(data, PlanDraftInput):
        return data.plan_name
    if isinstance(data, dict):
        name = data.get("planName", data.get("plan_name"))
        return name.strip() if isinstance(name, str) else None
    return None
