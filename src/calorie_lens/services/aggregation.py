"""Daily and monthly aggregation of meal records.

Every function here is pure: the targets a day is measured against are passed
in explicitly. There is no goal history, so the current calorie goal applies
to past days as well.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date

from calorie_lens.domain.dates import meal_calendar_date
from calorie_lens.domain.meals import MealRecord, meal_type_rank
from calorie_lens.domain.profile import Targets
from calorie_lens.domain.stats import DailyAggregate, MonthlySummary
from calorie_lens.services.targets import round_half_up


def percentage(actual: float, target: float) -> int:
    """Return ``actual`` as a rounded percentage of ``target``; 0 when target <= 0."""
    if target <= 0:
        return 0
    return round_half_up(100 * actual / target)


def sort_meals_by_type(meals: Iterable[MealRecord]) -> list[MealRecord]:
    """Order meals breakfast, lunch, dinner, snack; unknown types last."""
    return sorted(meals, key=lambda meal: meal_type_rank(meal.meal_type))


def group_meals_by_date(meals: Iterable[MealRecord]) -> dict[date, list[MealRecord]]:
    """Group meals by calendar date, newest date first, meals in type order."""
    grouped: dict[date, list[MealRecord]] = defaultdict(list)
    for meal in meals:
        grouped[meal_calendar_date(meal)].append(meal)
    return {
        day: sort_meals_by_type(grouped[day])
        for day in sorted(grouped, reverse=True)
    }


def aggregate_day(day: date, meals: list[MealRecord], targets: Targets) -> DailyAggregate:
    """Sum one day's meals and measure them against the targets.

    Macro totals are reported in whole grams; percentages use the exact sums.
    """
    calories = 0
    carbs = protein = fat = 0.0
    for meal in meals:
        calories += meal.total_calories
        for food in meal.foods:
            carbs += food.carbs
            protein += food.protein
            fat += food.fat
    return DailyAggregate(
        date=day,
        total_calories=calories,
        total_carbs=round_half_up(carbs),
        total_protein=round_half_up(protein),
        total_fat=round_half_up(fat),
        meal_count=len(meals),
        goal=targets.calories,
        calorie_percentage=percentage(calories, targets.calories),
        carbs_percentage=percentage(carbs, targets.carbs),
        protein_percentage=percentage(protein, targets.protein),
        fat_percentage=percentage(fat, targets.fat),
    )


def aggregate(meals: Iterable[MealRecord], targets: Targets) -> list[DailyAggregate]:
    """Return one aggregate per calendar date, most recent first."""
    return [
        aggregate_day(day, day_meals, targets)
        for day, day_meals in group_meals_by_date(meals).items()
    ]


def calculate_today_intake(
    meals: Iterable[MealRecord], today: date | None = None
) -> int:
    """Return the calories logged for today (system local date by default)."""
    current = today or date.today()
    return sum(
        meal.total_calories for meal in meals if meal_calendar_date(meal) == current
    )


def group_by_month(aggregates: Iterable[DailyAggregate]) -> list[MonthlySummary]:
    """Group daily aggregates into calendar months, newest month first.

    Averages are taken over the days that have records.
    """
    months: dict[str, list[DailyAggregate]] = defaultdict(list)
    for entry in aggregates:
        months[entry.date.strftime("%Y-%m")].append(entry)

    summaries = []
    for month in sorted(months, reverse=True):
        days = sorted(months[month], key=lambda entry: entry.date, reverse=True)
        count = len(days)
        summaries.append(
            MonthlySummary(
                month=month,
                days=days,
                avg_calories=sum(day.total_calories for day in days) / count,
                avg_carbs=sum(day.total_carbs for day in days) / count,
                avg_protein=sum(day.total_protein for day in days) / count,
                avg_fat=sum(day.total_fat for day in days) / count,
            )
        )
    return summaries
