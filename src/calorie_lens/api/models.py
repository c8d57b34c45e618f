"""Pydantic models for the HTTP API."""

from datetime import date

from pydantic import BaseModel, Field

from calorie_lens.domain.meals import MealType
from calorie_lens.domain.profile import Gender, NutritionGoal


class AnalyzeRequest(BaseModel):
    """Photo to analyze, as a base64 data URL."""

    image: str = Field(min_length=1)


class FoodPayload(BaseModel):
    """Food record as exchanged with the client."""

    id: str = ""
    name: str
    calories: int = 0
    quantity: str = ""
    grams: int = 0
    carbs: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    confidence: int = Field(default=0, ge=0, le=100)


class SaveMealRequest(BaseModel):
    """Analysis the user chose to save."""

    foods: list[FoodPayload]
    image_ref: str = ""
    meal_type: MealType | None = None
    meal_date: date | None = None


class CalorieGoalRequest(BaseModel):
    """New calorie goal."""

    value: int


class NutritionGoalRequest(BaseModel):
    """New nutrition goal selection."""

    goal: NutritionGoal


class ProfileRequest(BaseModel):
    """Body measurements for BMR estimation."""

    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    gender: Gender
    age_years: int = Field(gt=0)
