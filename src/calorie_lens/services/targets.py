"""BMR and nutrition target calculations."""

import logging
import math

from calorie_lens.domain.profile import (
    Gender,
    MacroTargets,
    NutritionGoal,
    Targets,
    UserProfile,
)

logger = logging.getLogger(__name__)

PROTEIN_KCAL_PER_G = 4
CARB_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9

PROTEIN_PER_KG: dict[NutritionGoal, float] = {
    NutritionGoal.MUSCLE: 2.2,
    NutritionGoal.DIET: 1.8,
    NutritionGoal.HEALTH: 1.2,
}

# Share of the non-protein calories going to (carbs, fat).
ENERGY_SPLIT: dict[NutritionGoal, tuple[float, float]] = {
    NutritionGoal.MUSCLE: (0.45, 0.55),
    NutritionGoal.DIET: (0.30, 0.70),
    NutritionGoal.HEALTH: (0.55, 0.45),
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)


def compute_bmr(profile: UserProfile) -> float:
    """Return the basal metabolic rate using the Harris-Benedict formula."""
    if profile.gender == Gender.MALE:
        return (
            88.362
            + 13.397 * profile.weight_kg
            + 4.799 * profile.height_cm
            - 5.677 * profile.age_years
        )
    return (
        447.593
        + 9.247 * profile.weight_kg
        + 3.098 * profile.height_cm
        - 4.330 * profile.age_years
    )


def compute_recommended_calories(profile: UserProfile, goal: NutritionGoal) -> int:
    """Return the daily calorie recommendation for a goal."""
    bmr = compute_bmr(profile)
    if goal == NutritionGoal.MUSCLE:
        return round_half_up(bmr * 1.7 + 300)
    if goal == NutritionGoal.DIET:
        return round_half_up(bmr * 1.4 - 200)
    return round_half_up(bmr * 1.5)


def compute_macro_targets(
    goal: NutritionGoal, calorie_target: int, profile: UserProfile
) -> MacroTargets:
    """Split a calorie target into protein, carb and fat grams.

    Protein is fixed per kg of body weight; the remaining calories are split
    between carbs and fat by the goal's ratio. When protein alone exceeds the
    calorie target the remainder is clamped to zero.
    """
    protein = round_half_up(profile.weight_kg * PROTEIN_PER_KG[goal])
    remaining = calorie_target - protein * PROTEIN_KCAL_PER_G
    if remaining < 0:
        logger.warning(
            "Protein target exceeds calorie target; clamping carbs and fat",
            extra={"calorie_target": calorie_target, "protein_g": protein},
        )
        remaining = 0
    carb_ratio, fat_ratio = ENERGY_SPLIT[goal]
    return MacroTargets(
        carbs=round_half_up(remaining * carb_ratio / CARB_KCAL_PER_G),
        protein=protein,
        fat=round_half_up(remaining * fat_ratio / FAT_KCAL_PER_G),
    )


def build_targets(
    goal: NutritionGoal, calorie_goal: int, profile: UserProfile
) -> Targets:
    """Return calorie and macro targets for the current goal state."""
    macros = compute_macro_targets(goal, calorie_goal, profile)
    return Targets(
        calories=calorie_goal,
        carbs=macros.carbs,
        protein=macros.protein,
        fat=macros.fat,
    )
