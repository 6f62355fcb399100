# -*- coding: utf-8 -*-
"""
Calorie target calculator

Maintenance energy (BMR x activity multiplier), goal-adjusted daily target and
macro energy shares.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict

from ..errors import PreconditionError

KCAL_PER_GRAM = {"protein": 4.0, "carbs": 4.0, "fat": 9.0}

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very-active": 1.9,
}

GOAL_ADJUSTMENTS = {
    "bulk": 500,
    "maintain": 0,
    "cut": -500,
}


@dataclass(frozen=True)
class CalorieTargets:
    bmr: float
    maintenance_calories: int
    target_calories: int


def _check_body(weight_kg: float, height_cm: float, age: int, gender: str) -> str:
    if weight_kg <= 0 or height_cm <= 0 or age <= 0:
        raise PreconditionError("weight, height and age must be positive")
    g = (gender or "").strip().lower()
    if g not in {"male", "female"}:
        raise PreconditionError("gender must be 'male' or 'female'")
    return g


def harris_benedict(weight_kg: float, height_cm: float, age: int, gender: str) -> float:
    """Revised Harris-Benedict BMR (kcal/day)."""
    g = _check_body(weight_kg, height_cm, age, gender)
    if g == "male":
        return 88.362 + 13.397 * weight_kg + 4.799 * height_cm - 5.677 * age
    return 447.593 + 9.247 * weight_kg + 3.098 * height_cm - 4.330 * age


def mifflin_st_jeor(weight_kg: float, height_cm: float, age: int, gender: str) -> float:
    """Mifflin-St Jeor BMR (kcal/day)."""
    g = _check_body(weight_kg, height_cm, age, gender)
    s = 5 if g == "male" else -161
    return 10 * weight_kg + 6.25 * height_cm - 5 * age + s


BMR_FORMULAS = {
    "harris_benedict": harris_benedict,
    "mifflin_st_jeor": mifflin_st_jeor,
}


def activity_multiplier(activity_level: str) -> float:
    key = (activity_level or "").strip().lower().replace("_", "-")
    if key not in ACTIVITY_MULTIPLIERS:
        raise PreconditionError(f"unknown activity level: {activity_level}")
    return ACTIVITY_MULTIPLIERS[key]


def compute_targets(
    *,
    weight_kg: float,
    height_cm: float,
    age: int,
    gender: str,
    activity_level: str = "moderate",
    goal: str = "maintain",
    formula: str = "harris_benedict",
) -> CalorieTargets:
    fn = BMR_FORMULAS.get(formula)
    if fn is None:
        raise PreconditionError(f"unknown BMR formula: {formula}")
    if goal not in GOAL_ADJUSTMENTS:
        raise PreconditionError(f"unknown goal: {goal}")

    bmr = fn(weight_kg, height_cm, age, gender)
    maintenance = int(math.floor(bmr * activity_multiplier(activity_level) + 0.5))
    return CalorieTargets(
        bmr=round(bmr, 1),
        maintenance_calories=maintenance,
        target_calories=maintenance + GOAL_ADJUSTMENTS[goal],
    )


def macro_energy_percentages(calories: float, protein: float, carbs: float, fat: float) -> Dict[str, float]:
    """Share of total calories contributed by each macro, 0 when nothing was eaten."""
    out: Dict[str, float] = {}
    for key, grams in (("protein", protein), ("carbs", carbs), ("fat", fat)):
        if calories > 0:
            out[key] = round(grams * KCAL_PER_GRAM[key] / calories * 100, 1)
        else:
            out[key] = 0.0
    return out
