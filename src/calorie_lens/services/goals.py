"""Calorie goal, nutrition goal and profile state."""

import json
import logging
from dataclasses import asdict, dataclass
from typing import Protocol

from calorie_lens.domain.profile import (
    DEFAULT_PROFILE,
    Gender,
    GoalUpdate,
    NutritionGoal,
    Targets,
    UserProfile,
)
from calorie_lens.errors import NetworkError, StorageError, ValidationError
from calorie_lens.services.targets import build_targets, compute_recommended_calories

logger = logging.getLogger(__name__)

DEFAULT_CALORIE_GOAL = 2000
MIN_CALORIE_GOAL = 500
MAX_CALORIE_GOAL = 10000
DEFAULT_NUTRITION_GOAL = NutritionGoal.HEALTH

CALORIE_GOAL_KEY = "calorie_goal"
NUTRITION_GOAL_KEY = "nutrition_goal"
USER_PROFILE_KEY = "user_profile"


class SettingsRepository(Protocol):
    """Key-value store for settings that survive restarts."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if any."""

    def set(self, key: str, value: str) -> None:
        """Store a value for a key."""


class CalorieGoalStore(Protocol):
    """Remote persistence for the calorie goal."""

    def get_calorie_goal(self) -> int | None:
        """Return the latest stored goal, if any."""

    def set_calorie_goal(self, value: int) -> None:
        """Store a new goal."""


@dataclass
class GoalService:
    """Holds the calorie goal, nutrition goal and profile, and derives targets."""

    settings: SettingsRepository
    goal_store: CalorieGoalStore

    def get_calorie_goal(self) -> int:
        """Return the calorie goal, preferring the store over the local copy."""
        try:
            stored = self.goal_store.get_calorie_goal()
        except (StorageError, NetworkError):
            logger.warning("Falling back to local calorie goal", exc_info=True)
            stored = None
        if stored is not None:
            self._remember_goal(stored)
            return stored
        return _parse_int(self._read(CALORIE_GOAL_KEY), DEFAULT_CALORIE_GOAL)

    def set_calorie_goal(self, value: int) -> int:
        """Validate and persist a calorie goal."""
        validate_calorie_goal(value)
        self.settings.set(CALORIE_GOAL_KEY, str(value))
        try:
            self.goal_store.set_calorie_goal(value)
        except (StorageError, NetworkError):
            logger.exception(
                "Failed to store calorie goal remotely", extra={"goal": value}
            )
        return value

    def is_default_goal(self) -> bool:
        """Return True when the calorie goal still looks untouched.

        A goal equal to the default counts as untouched, even if the user
        chose that value on purpose.
        """
        return self.get_calorie_goal() == DEFAULT_CALORIE_GOAL

    def get_nutrition_goal(self) -> NutritionGoal:
        """Return the nutrition goal selection."""
        raw = self._read(NUTRITION_GOAL_KEY)
        try:
            return NutritionGoal(raw) if raw else DEFAULT_NUTRITION_GOAL
        except ValueError:
            logger.warning("Ignoring unknown nutrition goal", extra={"value": raw})
            return DEFAULT_NUTRITION_GOAL

    def set_nutrition_goal(self, goal: NutritionGoal) -> GoalUpdate:
        """Persist a nutrition goal and recompute the recommendation."""
        self.settings.set(NUTRITION_GOAL_KEY, goal.value)
        return self._recommend(self.get_profile(), goal)

    def get_profile(self) -> UserProfile:
        """Return the stored profile or the default one."""
        raw = self._read(USER_PROFILE_KEY)
        if not raw:
            return DEFAULT_PROFILE
        try:
            return profile_from_dict(json.loads(raw))
        except (ValueError, TypeError, KeyError):
            logger.warning("Ignoring unreadable user profile", exc_info=True)
            return DEFAULT_PROFILE

    def set_profile(self, profile: UserProfile) -> GoalUpdate:
        """Persist the profile and recompute the recommendation."""
        self.settings.set(USER_PROFILE_KEY, json.dumps(asdict(profile)))
        return self._recommend(profile, self.get_nutrition_goal())

    def get_current_targets(self) -> Targets:
        """Return targets for the current goal, selection and profile."""
        return build_targets(
            self.get_nutrition_goal(), self.get_calorie_goal(), self.get_profile()
        )

    def _read(self, key: str) -> str | None:
        try:
            return self.settings.get(key)
        except (StorageError, NetworkError):
            logger.warning("Failed to read setting", extra={"key": key}, exc_info=True)
            return None

    def _remember_goal(self, value: int) -> None:
        if self._read(CALORIE_GOAL_KEY) == str(value):
            return
        try:
            self.settings.set(CALORIE_GOAL_KEY, str(value))
        except (StorageError, NetworkError):
            logger.warning("Failed to cache calorie goal locally", exc_info=True)

    def _recommend(self, profile: UserProfile, goal: NutritionGoal) -> GoalUpdate:
        recommended = compute_recommended_calories(profile, goal)
        adopted = False
        if self.is_default_goal():
            if _in_range(recommended):
                self.set_calorie_goal(recommended)
                adopted = True
            else:
                logger.warning(
                    "Recommended calories out of range; keeping default",
                    extra={"recommended": recommended},
                )
        return GoalUpdate(
            calorie_goal=self.get_calorie_goal(),
            nutrition_goal=goal,
            recommended_calories=recommended,
            adopted=adopted,
        )


def validate_calorie_goal(value: int) -> None:
    """Raise `ValidationError` unless the goal is within the accepted range."""
    if not _in_range(value):
        raise ValidationError(
            f"Calorie goal must be between {MIN_CALORIE_GOAL} "
            f"and {MAX_CALORIE_GOAL}."
        )


def profile_from_dict(data: dict[str, object]) -> UserProfile:
    """Build a profile from its stored JSON form."""
    return UserProfile(
        weight_kg=float(data["weight_kg"]),
        height_cm=float(data["height_cm"]),
        gender=Gender(data["gender"]),
        age_years=int(data["age_years"]),
    )


def _in_range(value: int) -> bool:
    return MIN_CALORIE_GOAL <= value <= MAX_CALORIE_GOAL


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default
