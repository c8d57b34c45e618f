"""Meal logging service."""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Protocol

from calorie_lens.domain.foods import FoodRecord
from calorie_lens.domain.meals import MealRecord, MealType
from calorie_lens.errors import NetworkError, StorageError

logger = logging.getLogger(__name__)

BREAKFAST_START_HOUR = 5
LUNCH_START_HOUR = 11
DINNER_START_HOUR = 15
SNACK_START_HOUR = 21


class MealStore(Protocol):
    """Persistence interface for meal records.

    Implementations raise `StorageError` when an operation fails.
    """

    def create_meal(
        self,
        meal_type: str,
        meal_date: date | None,
        total_calories: int,
        image_ref: str,
    ) -> MealRecord:
        """Insert a meal row and return it without foods."""

    def create_food_items(self, meal_id: str, foods: list[FoodRecord]) -> None:
        """Insert the food rows of a meal."""

    def list_meals(self) -> list[MealRecord]:
        """Return all meals with their foods, newest first."""

    def delete_meal(self, meal_id: str) -> None:
        """Delete one meal and its foods."""

    def delete_all_meals(self) -> None:
        """Delete every meal."""


@dataclass
class MealLogService:
    """Service that persists analyses as meals and reads them back."""

    store: MealStore

    def save_meal(
        self,
        foods: list[FoodRecord],
        image_ref: str,
        meal_type: str,
        meal_date: date | None,
    ) -> MealRecord:
        """Persist a meal and its foods.

        There is no transaction primitive: when the food insert fails the meal
        row is deleted again before the error propagates.
        """
        total_calories = sum(food.calories for food in foods)
        meal = self.store.create_meal(
            meal_type=meal_type,
            meal_date=meal_date,
            total_calories=total_calories,
            image_ref=image_ref,
        )
        try:
            self.store.create_food_items(meal.id, foods)
        except (StorageError, NetworkError):
            logger.exception(
                "Failed to save food items; rolling back meal",
                extra={"meal_id": meal.id},
            )
            try:
                self.store.delete_meal(meal.id)
            except (StorageError, NetworkError):
                logger.exception(
                    "Rollback failed; meal left without foods",
                    extra={"meal_id": meal.id},
                )
            raise
        return replace(meal, foods=list(foods))

    def list_meals(self) -> list[MealRecord]:
        """Return all meals, or an empty history when the store is unreachable."""
        try:
            return self.store.list_meals()
        except (StorageError, NetworkError):
            logger.exception("Failed to load meal history")
            return []

    def delete_meal(self, meal_id: str) -> None:
        """Delete a single meal."""
        self.store.delete_meal(meal_id)

    def clear_history(self) -> None:
        """Delete all meals."""
        self.store.delete_all_meals()


def default_meal_type(now: datetime | None = None) -> MealType:
    """Suggest a meal slot from the time of day."""
    hour = (now or datetime.now()).hour
    if BREAKFAST_START_HOUR <= hour < LUNCH_START_HOUR:
        return MealType.BREAKFAST
    if LUNCH_START_HOUR <= hour < DINNER_START_HOUR:
        return MealType.LUNCH
    if DINNER_START_HOUR <= hour < SNACK_START_HOUR:
        return MealType.DINNER
    return MealType.SNACK
