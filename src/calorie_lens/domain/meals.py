"""Domain models for meal logging."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

from calorie_lens.domain.foods import FoodRecord


class MealType(StrEnum):
    """User-chosen meal slot, independent of wall-clock time."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


MEAL_TYPE_ORDER: dict[str, int] = {
    MealType.BREAKFAST: 1,
    MealType.LUNCH: 2,
    MealType.DINNER: 3,
    MealType.SNACK: 4,
}
UNKNOWN_MEAL_TYPE_ORDER = 999


@dataclass(frozen=True)
class MealRecord:
    """A saved analysis: the foods of one meal and their calorie total."""

    id: str
    captured_at: datetime
    meal_type: str
    meal_date: date | None
    foods: list[FoodRecord] = field(default_factory=list)
    total_calories: int = 0
    image_ref: str = ""


def meal_type_rank(meal_type: str) -> int:
    """Return the display precedence of a meal type; unknown types sort last."""
    return MEAL_TYPE_ORDER.get(meal_type, UNKNOWN_MEAL_TYPE_ORDER)
