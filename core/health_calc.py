"""
core/health_calc.py
────────────────────────────────────────────────────────────────────────
Plan calculators used at the end of onboarding:

1. BMR             (Mifflin–St Jeor, midpoint offset for "other")
2. TDEE            (activity multiplier)
3. Target calories (goal adjustment, 1200 kcal floor)
4. Goal date       (0.5 kg / week, capped at one year)

All functions are pure.  Anything out of domain raises InvalidInputError –
the validator should have caught it first, so treat that as a bug.
"""

from __future__ import annotations

import math
from datetime import date, timedelta

from core.errors import InvalidInputError
from core.models.onboarding import ActivityLevel, Gender, Goal

# ──────────────────────────────────────────────────────────────────────
#  Tables / constants
# ──────────────────────────────────────────────────────────────────────
_GENDER_OFFSET = {
    Gender.male: 5,
    Gender.female: -161,
    Gender.other: -78,      # mean of the two above
}

ACTIVITY_MULTIPLIERS = {
    ActivityLevel.sedentary: 1.2,    # little or no exercise
    ActivityLevel.light: 1.375,      # 1-2 sessions / week
    ActivityLevel.moderate: 1.55,    # 3-5 sessions / week
    ActivityLevel.heavy: 1.725,      # 6-7 sessions / week
}

GOAL_ADJUSTMENTS = {
    Goal.lose_weight: -500,
    Goal.gain_weight: 500,
    Goal.get_fit: 0,
}

MIN_SAFE_CALORIES = 1200
SAFE_WEEKLY_RATE_KG = 0.5
FIT_PROGRAM_WEEKS = 12
MAX_PROGRAM_WEEKS = 52


def round_half_up(x: float) -> int:
    """x.5 always goes up (builtin round() is banker's rounding)."""
    return math.floor(x + 0.5)


def _enum(kind, value, what: str):
    try:
        return kind(value)
    except ValueError:
        raise InvalidInputError(f"Unknown {what}: {value!r}") from None


def _finite(*values: float) -> None:
    if any(
        isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v)
        for v in values
    ):
        raise InvalidInputError("Inputs must be finite numbers")


# ──────────────────────────────────────────────────────────────────────
#  BMR / TDEE
# ──────────────────────────────────────────────────────────────────────
def calculate_bmr(weight: float, height: float, age: int, gender: Gender | str) -> int:
    _finite(weight, height, age)
    if weight <= 0 or height <= 0 or age <= 0:
        raise InvalidInputError("Weight, height, and age must be positive numbers")
    if weight > 300 or height > 250 or age > 120:
        raise InvalidInputError("Input values are outside reasonable ranges")
    g = _enum(Gender, gender, "gender")

    base = 10 * weight + 6.25 * height - 5 * age
    return round_half_up(base + _GENDER_OFFSET[g])


def calculate_tdee(bmr: float, activity_level: ActivityLevel | str) -> int:
    _finite(bmr)
    if bmr <= 0:
        raise InvalidInputError("BMR must be a positive number")
    level = _enum(ActivityLevel, activity_level, "activity level")
    return round_half_up(bmr * ACTIVITY_MULTIPLIERS[level])


# ──────────────────────────────────────────────────────────────────────
#  Calories
# ──────────────────────────────────────────────────────────────────────
def calculate_target_calories(tdee: float, goal: Goal | str) -> int:
    _finite(tdee)
    if tdee <= 0:
        raise InvalidInputError("TDEE must be a positive number")
    g = _enum(Goal, goal, "goal")
    # TODO: per-gender floor (1500 kcal for men) needs gender passed in here
    return max(round_half_up(tdee + GOAL_ADJUSTMENTS[g]), MIN_SAFE_CALORIES)


# ──────────────────────────────────────────────────────────────────────
#  Timeline
# ──────────────────────────────────────────────────────────────────────
def program_weeks(current_weight: float, target_weight: float, goal: Goal | str) -> int:
    _finite(current_weight, target_weight)
    if current_weight <= 0 or target_weight <= 0:
        raise InvalidInputError("Weights must be positive numbers")
    g = _enum(Goal, goal, "goal")

    if g is Goal.get_fit:
        weeks = FIT_PROGRAM_WEEKS
    else:
        weeks = abs(current_weight - target_weight) / SAFE_WEEKLY_RATE_KG
    return min(math.ceil(weeks), MAX_PROGRAM_WEEKS)


def calculate_estimated_goal_date(
    current_weight: float,
    target_weight: float,
    goal: Goal | str,
    today: date | None = None,
) -> date:
    weeks = program_weeks(current_weight, target_weight, goal)
    return (today or date.today()) + timedelta(days=weeks * 7)
