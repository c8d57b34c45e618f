"""Calendar date derivation for meal records."""

from datetime import date

from calorie_lens.domain.meals import MealRecord


def meal_calendar_date(meal: MealRecord) -> date:
    """Return the calendar date a meal belongs to.

    Fallback order: the user-chosen ``meal_date``, then the date portion of
    ``captured_at``.
    """
    if meal.meal_date is not None:
        return meal.meal_date
    return meal.captured_at.date()


def parse_calendar_date(raw: object) -> date | None:
    """Parse a stored date or timestamp string into a calendar date.

    Tries the part before ``T`` first, then the first ten characters.
    """
    if not isinstance(raw, str) or not raw:
        return None
    for candidate in (raw.split("T")[0], raw[:10]):
        try:
            return date.fromisoformat(candidate)
        except ValueError:
            continue
    return None
