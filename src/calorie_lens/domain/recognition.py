"""Models for food recognition results."""

import math

from pydantic import BaseModel, field_validator


class RecognizedFood(BaseModel):
    """Single food object as returned by the vision model.

    Fields are repaired one by one instead of rejecting the whole record:
    missing or non-numeric numbers become 0 and missing strings become ''.
    """

    name: str = ""
    calories: int = 0
    quantity: str = ""
    grams: int = 0
    carbs: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    confidence: int = 0

    @field_validator("name", "quantity", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("calories", "grams", mode="before")
    @classmethod
    def _coerce_int(cls, value: object) -> int:
        return round(_to_number(value))

    @field_validator("carbs", "protein", "fat", mode="before")
    @classmethod
    def _coerce_float(cls, value: object) -> float:
        return _to_number(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: object) -> int:
        return min(max(round(_to_number(value)), 0), 100)


def _to_number(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number
