"""Tests for stats service."""

from datetime import date

from calorie_lens.services.goals import GoalService
from calorie_lens.services.meals import MealLogService
from calorie_lens.services.stats import StatsService
from tests.conftest import InMemoryMealStore, make_food, make_meal

TODAY = date(2025, 8, 24)


def _service(meal_store: InMemoryMealStore, goal_service: GoalService) -> StatsService:
    meals = [
        make_meal(TODAY, [make_food(calories=500)], meal_type="lunch"),
        make_meal(TODAY, [make_food(calories=300)], meal_type="breakfast"),
        make_meal(date(2025, 8, 23), [make_food(calories=900)], meal_type="dinner"),
        make_meal(date(2025, 7, 2), [make_food(calories=1200)], meal_type="dinner"),
    ]
    meal_store.meals = {meal.id: meal for meal in meals}
    return StatsService(
        meal_service=MealLogService(meal_store), goal_service=goal_service
    )


def test_get_today_summarizes_intake(
    meal_store: InMemoryMealStore, goal_service: GoalService
) -> None:
    summary = _service(meal_store, goal_service).get_today(TODAY)

    assert summary.intake == 800
    assert summary.goal == 2000
    assert summary.remaining == 1200
    assert summary.percentage == 40
    assert not summary.is_over_limit
    assert summary.targets.protein == 84
    assert summary.aggregate is not None
    assert summary.aggregate.meal_count == 2


def test_get_today_flags_over_limit(
    meal_store: InMemoryMealStore, goal_service: GoalService
) -> None:
    service = _service(meal_store, goal_service)
    goal_service.set_calorie_goal(500)

    summary = service.get_today(TODAY)

    assert summary.is_over_limit
    assert summary.remaining == -300
    assert summary.percentage == 160


def test_get_today_without_meals(
    meal_store: InMemoryMealStore, goal_service: GoalService
) -> None:
    summary = _service(meal_store, goal_service).get_today(date(2025, 9, 1))

    assert summary.intake == 0
    assert summary.aggregate is None


def test_goal_change_applies_to_past_days(
    meal_store: InMemoryMealStore, goal_service: GoalService
) -> None:
    service = _service(meal_store, goal_service)
    before = service.get_daily()
    goal_service.set_calorie_goal(1000)
    after = service.get_daily()

    assert before[1].calorie_percentage == 45
    assert after[1].calorie_percentage == 90
    assert {day.goal for day in after} == {1000}


def test_get_monthly_groups_days(
    meal_store: InMemoryMealStore, goal_service: GoalService
) -> None:
    months = _service(meal_store, goal_service).get_monthly()

    assert [month.month for month in months] == ["2025-08", "2025-07"]
    assert months[0].avg_calories == 850
    assert len(months[1].days) == 1


def test_get_day_orders_meals_by_type(
    meal_store: InMemoryMealStore, goal_service: GoalService
) -> None:
    detail = _service(meal_store, goal_service).get_day(TODAY)

    assert [meal.meal_type for meal in detail.meals] == ["breakfast", "lunch"]
    assert detail.aggregate is not None
    assert detail.aggregate.total_calories == 800


def test_get_day_without_meals(
    meal_store: InMemoryMealStore, goal_service: GoalService
) -> None:
    detail = _service(meal_store, goal_service).get_day(date(2025, 1, 1))

    assert detail.meals == []
    assert detail.aggregate is None
