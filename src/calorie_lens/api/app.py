"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from calorie_lens.api.models import (
    AnalyzeRequest,
    CalorieGoalRequest,
    NutritionGoalRequest,
    ProfileRequest,
    SaveMealRequest,
)
from calorie_lens.app_logging import configure_logging
from calorie_lens.containers import AppContainer
from calorie_lens.domain.foods import FoodRecord
from calorie_lens.domain.profile import UserProfile
from calorie_lens.errors import (
    CalorieLensError,
    ConfigError,
    NetworkError,
    ParseError,
    StorageError,
    ValidationError,
    to_notice,
)
from calorie_lens.services.meals import default_meal_type

ERROR_STATUS: dict[type[CalorieLensError], int] = {
    ValidationError: 422,
    ParseError: 502,
    NetworkError: 503,
    ConfigError: 500,
    StorageError: 500,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(CalorieLensError)
    async def handle_app_error(
        request: Request, exc: CalorieLensError
    ) -> JSONResponse:
        logger.warning(
            "Request failed",
            extra={"path": request.url.path, "code": exc.code},
        )
        return _error_response(request.app.state.container, exc)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/analyze")
    async def analyze(payload: AnalyzeRequest, request: Request) -> JSONResponse:
        """Recognize the foods in a photo."""
        state_container: AppContainer = request.app.state.container
        try:
            foods = await state_container.recognition_service.recognize(
                payload.image
            )
        except Exception as exc:
            logger.exception("Food recognition failed")
            return _error_response(
                state_container, exc, context="Food analysis failed", foods=[]
            )
        return JSONResponse({"foods": [asdict(food) for food in foods]})

    @app.post("/api/analyze/upload")
    async def analyze_upload(request: Request) -> JSONResponse:
        """Recognize the foods in a photo sent as the raw request body."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await request.body()
        try:
            if not image_bytes:
                raise ValidationError("Upload a JPG or PNG photo.")
            foods = await state_container.recognition_service.recognize_bytes(
                image_bytes
            )
        except Exception as exc:
            logger.exception("Food recognition failed")
            return _error_response(
                state_container, exc, context="Food analysis failed", foods=[]
            )
        return JSONResponse({"foods": [asdict(food) for food in foods]})

    @app.get("/api/meals")
    async def list_meals(request: Request) -> dict[str, object]:
        """Return the meal history, newest first."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.meal_service.list_meals()
        return {"meals": [asdict(meal) for meal in meals]}

    @app.post("/api/meals", status_code=status.HTTP_201_CREATED)
    async def save_meal(payload: SaveMealRequest, request: Request) -> dict[str, object]:
        """Save an analysis as a meal."""
        state_container: AppContainer = request.app.state.container
        foods = [FoodRecord(**food.model_dump()) for food in payload.foods]
        meal = state_container.meal_service.save_meal(
            foods=foods,
            image_ref=payload.image_ref,
            meal_type=payload.meal_type or default_meal_type(),
            meal_date=payload.meal_date or date.today(),
        )
        return {"meal": asdict(meal)}

    @app.delete("/api/meals/{meal_id}")
    async def delete_meal(meal_id: str, request: Request) -> dict[str, str]:
        """Delete a single meal."""
        state_container: AppContainer = request.app.state.container
        state_container.meal_service.delete_meal(meal_id)
        return {"status": "ok"}

    @app.delete("/api/meals")
    async def clear_meals(request: Request) -> dict[str, str]:
        """Delete the whole meal history."""
        state_container: AppContainer = request.app.state.container
        state_container.meal_service.clear_history()
        return {"status": "ok"}

    @app.get("/api/stats/daily")
    async def daily_stats(request: Request) -> dict[str, object]:
        """Return per-day aggregates."""
        state_container: AppContainer = request.app.state.container
        days = state_container.stats_service.get_daily()
        return {"days": [asdict(day) for day in days]}

    @app.get("/api/stats/today")
    async def today_stats(request: Request) -> dict[str, object]:
        """Return today's intake against the targets."""
        state_container: AppContainer = request.app.state.container
        return asdict(state_container.stats_service.get_today())

    @app.get("/api/stats/monthly")
    async def monthly_stats(request: Request) -> dict[str, object]:
        """Return daily aggregates grouped by month."""
        state_container: AppContainer = request.app.state.container
        months = state_container.stats_service.get_monthly()
        return {"months": [asdict(month) for month in months]}

    @app.get("/api/stats/days/{day}")
    async def day_stats(day: date, request: Request) -> dict[str, object]:
        """Return one day's meals and aggregate."""
        state_container: AppContainer = request.app.state.container
        return asdict(state_container.stats_service.get_day(day))

    @app.get("/api/goals/calories")
    async def get_calorie_goal(request: Request) -> dict[str, int]:
        """Return the calorie goal."""
        state_container: AppContainer = request.app.state.container
        return {"value": state_container.goal_service.get_calorie_goal()}

    @app.put("/api/goals/calories")
    async def set_calorie_goal(
        payload: CalorieGoalRequest, request: Request
    ) -> dict[str, int]:
        """Set the calorie goal."""
        state_container: AppContainer = request.app.state.container
        value = state_container.goal_service.set_calorie_goal(payload.value)
        return {"value": value}

    @app.get("/api/goals/nutrition")
    async def get_nutrition_goal(request: Request) -> dict[str, str]:
        """Return the nutrition goal selection."""
        state_container: AppContainer = request.app.state.container
        return {"goal": state_container.goal_service.get_nutrition_goal().value}

    @app.put("/api/goals/nutrition")
    async def set_nutrition_goal(
        payload: NutritionGoalRequest, request: Request
    ) -> dict[str, object]:
        """Select a nutrition goal."""
        state_container: AppContainer = request.app.state.container
        update = state_container.goal_service.set_nutrition_goal(payload.goal)
        return asdict(update)

    @app.get("/api/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the user profile."""
        state_container: AppContainer = request.app.state.container
        return asdict(state_container.goal_service.get_profile())

    @app.put("/api/profile")
    async def set_profile(payload: ProfileRequest, request: Request) -> dict[str, object]:
        """Save the user profile."""
        state_container: AppContainer = request.app.state.container
        update = state_container.goal_service.set_profile(
            UserProfile(**payload.model_dump())
        )
        return asdict(update)

    @app.get("/api/targets")
    async def get_targets(request: Request) -> dict[str, object]:
        """Return the current calorie and macro targets."""
        state_container: AppContainer = request.app.state.container
        return asdict(state_container.goal_service.get_current_targets())

    return app


def _error_response(
    state_container: AppContainer,
    exc: Exception,
    context: str | None = None,
    **extra: object,
) -> JSONResponse:
    """Return a `{message, code}` body with a status matching the error."""
    notice = to_notice(exc, context)
    message = notice.message
    if state_container.settings.is_local:
        cause = exc.__cause__ or exc
        detail = f"{type(cause).__name__}: {cause}".strip()
        message = f"{message} (debug: {detail})"
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(
        {**extra, "message": message, "code": notice.code},
        status_code=status_code,
    )
