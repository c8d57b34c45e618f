"""Domain models for nutrition statistics."""

from dataclasses import dataclass
from datetime import date

from calorie_lens.domain.meals import MealRecord
from calorie_lens.domain.profile import Targets


@dataclass(frozen=True)
class DailyAggregate:
    """Per-day rollup of meal records, derived on every read."""

    date: date
    total_calories: int
    total_carbs: int
    total_protein: int
    total_fat: int
    meal_count: int
    goal: int
    calorie_percentage: int
    carbs_percentage: int
    protein_percentage: int
    fat_percentage: int


@dataclass(frozen=True)
class MonthlySummary:
    """Daily aggregates of one calendar month with per-day averages."""

    month: str
    days: list[DailyAggregate]
    avg_calories: float
    avg_carbs: float
    avg_protein: float
    avg_fat: float


@dataclass(frozen=True)
class TodaySummary:
    """Today's intake measured against the current targets."""

    date: date
    intake: int
    goal: int
    remaining: int
    percentage: int
    is_over_limit: bool
    targets: Targets
    aggregate: DailyAggregate | None


@dataclass(frozen=True)
class DayDetail:
    """Meals of one day in meal-type order plus the day's aggregate."""

    date: date
    meals: list[MealRecord]
    aggregate: DailyAggregate | None
