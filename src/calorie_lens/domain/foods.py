"""Domain models for recognized foods."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FoodRecord:
    """A single food detected in a photo, with its nutrition estimate."""

    id: str
    name: str
    calories: int
    quantity: str
    grams: int
    carbs: float
    protein: float
    fat: float
    confidence: int
