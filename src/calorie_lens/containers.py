"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_lens.adapters.openai_food_recognizer import OpenAIFoodRecognizer
from calorie_lens.adapters.supabase_meal_store import SupabaseMealStore
from calorie_lens.adapters.supabase_settings_repository import (
    SupabaseSettingsRepository,
)
from calorie_lens.config import Settings, normalize_base_url
from calorie_lens.errors import ConfigError
from calorie_lens.services.goals import GoalService
from calorie_lens.services.meals import MealLogService
from calorie_lens.services.recognition import RecognitionService
from calorie_lens.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    recognition_service: RecognitionService
    meal_service: MealLogService
    goal_service: GoalService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    if not resolved_settings.supabase_url or not resolved_settings.supabase_service_key:
        raise ConfigError("The meal store is not configured.")
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_store = SupabaseMealStore(supabase_client)
    settings_repository = SupabaseSettingsRepository(supabase_client)
    recognizer = OpenAIFoodRecognizer.create(
        resolved_settings.openai_api_key,
        base_url=normalize_base_url(resolved_settings.openai_api_base),
    )
    recognition_service = RecognitionService(
        client=recognizer,
        model=resolved_settings.openai_model,
        max_tokens=resolved_settings.openai_max_tokens,
        temperature=resolved_settings.openai_temperature,
    )
    meal_service = MealLogService(meal_store)
    goal_service = GoalService(settings=settings_repository, goal_store=meal_store)
    stats_service = StatsService(meal_service=meal_service, goal_service=goal_service)

    async def close_resources() -> None:
        await recognizer.client.close()

    return AppContainer(
        settings=resolved_settings,
        recognition_service=recognition_service,
        meal_service=meal_service,
        goal_service=goal_service,
        stats_service=stats_service,
        close_resources=close_resources,
    )
