"""Statistics service combining meal history with the current targets."""

from dataclasses import dataclass
from datetime import date

from calorie_lens.domain.stats import (
    DailyAggregate,
    DayDetail,
    MonthlySummary,
    TodaySummary,
)
from calorie_lens.services.aggregation import (
    aggregate,
    aggregate_day,
    calculate_today_intake,
    group_by_month,
    group_meals_by_date,
    percentage,
)
from calorie_lens.services.goals import GoalService
from calorie_lens.services.meals import MealLogService


@dataclass
class StatsService:
    """Read model for the daily tracker and history views."""

    meal_service: MealLogService
    goal_service: GoalService

    def get_daily(self) -> list[DailyAggregate]:
        """Return per-day aggregates, most recent first."""
        targets = self.goal_service.get_current_targets()
        return aggregate(self.meal_service.list_meals(), targets)

    def get_monthly(self) -> list[MonthlySummary]:
        """Return daily aggregates grouped by month."""
        return group_by_month(self.get_daily())

    def get_today(self, today: date | None = None) -> TodaySummary:
        """Return today's intake against the current targets."""
        current = today or date.today()
        targets = self.goal_service.get_current_targets()
        meals = self.meal_service.list_meals()
        intake = calculate_today_intake(meals, current)
        todays_meals = group_meals_by_date(meals).get(current)
        return TodaySummary(
            date=current,
            intake=intake,
            goal=targets.calories,
            remaining=targets.calories - intake,
            percentage=percentage(intake, targets.calories),
            is_over_limit=intake > targets.calories,
            targets=targets,
            aggregate=(
                aggregate_day(current, todays_meals, targets) if todays_meals else None
            ),
        )

    def get_day(self, day: date) -> DayDetail:
        """Return one day's meals in meal-type order with its aggregate."""
        targets = self.goal_service.get_current_targets()
        meals = group_meals_by_date(self.meal_service.list_meals()).get(day, [])
        return DayDetail(
            date=day,
            meals=meals,
            aggregate=aggregate_day(day, meals, targets) if meals else None,
        )
