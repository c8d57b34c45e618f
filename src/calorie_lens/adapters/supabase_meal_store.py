"""Supabase store for meals, their foods and the calorie goal."""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from supabase import Client

from calorie_lens.adapters.supabase_errors import storage_errors
from calorie_lens.domain.dates import parse_calendar_date
from calorie_lens.domain.foods import FoodRecord
from calorie_lens.domain.meals import MealRecord, MealType
from calorie_lens.errors import StorageError
from calorie_lens.services.goals import CalorieGoalStore
from calorie_lens.services.meals import MealStore

logger = logging.getLogger(__name__)

FOOD_COLUMNS = "id, name, calories, quantity, grams, carbs, protein, fat, confidence"
MEAL_COLUMNS = (
    "id, analysis_date, total_calories, image_url, meal_type, meal_date, "
    f"food_items ({FOOD_COLUMNS})"
)
# Older schemas predate the meal slot columns.
LEGACY_MEAL_COLUMNS = (
    f"id, analysis_date, total_calories, image_url, food_items ({FOOD_COLUMNS})"
)
LEGACY_COLUMN_NAMES = ("meal_type", "meal_date")


@dataclass
class SupabaseMealStore(MealStore, CalorieGoalStore):
    """Supabase implementation of the meal store."""

    client: Client

    def create_meal(
        self,
        meal_type: str,
        meal_date: date | None,
        total_calories: int,
        image_ref: str,
    ) -> MealRecord:
        """Insert a meal row; the database stamps ``analysis_date``."""
        payload: dict[str, object] = {
            "image_url": image_ref,
            "total_calories": total_calories,
        }
        if meal_type:
            payload["meal_type"] = meal_type
        if meal_date:
            payload["meal_date"] = meal_date.isoformat()
        with storage_errors("save meal"):
            response = self.client.table("food_analyses").insert(payload).execute()
        if not response.data or not response.data[0].get("id"):
            raise StorageError("Failed to save meal: no id was returned")
        row = response.data[0]
        return MealRecord(
            id=str(row["id"]),
            captured_at=_parse_timestamp(row.get("analysis_date")),
            meal_type=meal_type,
            meal_date=meal_date,
            foods=[],
            total_calories=total_calories,
            image_ref=image_ref,
        )

    def create_food_items(self, meal_id: str, foods: list[FoodRecord]) -> None:
        """Insert the food rows of a meal."""
        payload = [
            {
                "analysis_id": meal_id,
                "name": food.name,
                "calories": food.calories,
                "quantity": food.quantity or "",
                "grams": food.grams or 0,
                "carbs": food.carbs or 0,
                "protein": food.protein or 0,
                "fat": food.fat or 0,
                "confidence": food.confidence or 0,
            }
            for food in foods
        ]
        if not payload:
            return
        with storage_errors("save food items"):
            self.client.table("food_items").insert(payload).execute()

    def list_meals(self) -> list[MealRecord]:
        """Return all meals with their foods, newest first."""
        try:
            with storage_errors("load meals"):
                rows = self._select_meals(MEAL_COLUMNS)
        except StorageError as exc:
            if not any(name in exc.message for name in LEGACY_COLUMN_NAMES):
                raise
            logger.warning("Meal slot columns missing; using legacy query")
            with storage_errors("load meals"):
                rows = self._select_meals(LEGACY_MEAL_COLUMNS)
        return [_parse_meal(row) for row in rows]

    def delete_meal(self, meal_id: str) -> None:
        """Delete a meal; its food rows cascade."""
        with storage_errors("delete meal"):
            self.client.table("food_analyses").delete().eq("id", meal_id).execute()

    def delete_all_meals(self) -> None:
        """Delete every meal row."""
        with storage_errors("delete meals"):
            self.client.table("food_analyses").delete().gt(
                "total_calories", -1
            ).execute()

    def get_calorie_goal(self) -> int | None:
        """Return the most recently stored calorie goal."""
        with storage_errors("load calorie goal"):
            response = (
                self.client.table("calorie_goals")
                .select("goal_value")
                .order("created_at", desc=True)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        value = response.data[0].get("goal_value")
        return int(value) if value is not None else None

    def set_calorie_goal(self, value: int) -> None:
        """Append a calorie goal row."""
        with storage_errors("save calorie goal"):
            self.client.table("calorie_goals").insert({"goal_value": value}).execute()

    def _select_meals(self, columns: str) -> list[dict[str, object]]:
        response = (
            self.client.table("food_analyses")
            .select(columns)
            .order("analysis_date", desc=True)
            .execute()
        )
        return response.data or []


def _parse_meal(row: dict[str, object]) -> MealRecord:
    foods = [_parse_food(food) for food in row.get("food_items") or []]
    return MealRecord(
        id=str(row["id"]),
        captured_at=_parse_timestamp(row.get("analysis_date")),
        meal_type=str(row.get("meal_type") or MealType.BREAKFAST),
        meal_date=parse_calendar_date(row.get("meal_date")),
        foods=foods,
        total_calories=int(row.get("total_calories") or 0),
        image_ref=str(row.get("image_url") or ""),
    )


def _parse_food(row: dict[str, object]) -> FoodRecord:
    return FoodRecord(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        calories=int(row.get("calories") or 0),
        quantity=str(row.get("quantity") or ""),
        grams=int(row.get("grams") or 0),
        carbs=float(row.get("carbs") or 0.0),
        protein=float(row.get("protein") or 0.0),
        fat=float(row.get("fat") or 0.0),
        confidence=int(row.get("confidence") or 0),
    )


def _parse_timestamp(raw: object) -> datetime:
    if isinstance(raw, str) and raw:
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            logger.warning("Unreadable analysis date", extra={"value": raw})
    return datetime.min
