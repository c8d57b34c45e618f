"""Domain models for the user profile and nutrition targets."""

from dataclasses import dataclass
from enum import StrEnum


class Gender(StrEnum):
    """Gender used to pick the BMR formula."""

    MALE = "male"
    FEMALE = "female"


class NutritionGoal(StrEnum):
    """Nutrition goal selection driving macro ratios."""

    MUSCLE = "muscle"
    DIET = "diet"
    HEALTH = "health"


@dataclass(frozen=True)
class UserProfile:
    """Body measurements used for BMR estimation."""

    weight_kg: float
    height_cm: float
    gender: Gender
    age_years: int


DEFAULT_PROFILE = UserProfile(
    weight_kg=70, height_cm=170, gender=Gender.MALE, age_years=30
)


@dataclass(frozen=True)
class MacroTargets:
    """Daily macronutrient targets in grams."""

    carbs: int
    protein: int
    fat: int


@dataclass(frozen=True)
class Targets:
    """Calorie and macronutrient targets a day is measured against."""

    calories: int
    carbs: int
    protein: int
    fat: int


@dataclass(frozen=True)
class GoalUpdate:
    """Outcome of a goal or profile change."""

    calorie_goal: int
    nutrition_goal: NutritionGoal
    recommended_calories: int
    adopted: bool
