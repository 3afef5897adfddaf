"""
User-facing checks for every wizard field.

`validate_field()` turns a raw value (form text, JSON number, date) into the
typed value stored on the draft, or raises ValidationError with a message the
client can show unchanged.
"""
from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Callable

from core.errors import ValidationError
from core.health_calc import round_half_up
from core.models.onboarding import ActivityLevel, Gender, Goal, OnboardingRecord

WEIGHT_RANGE = (30, 300)    # kg
HEIGHT_RANGE = (100, 250)   # cm
AGE_RANGE = (18, 100)       # years
MAX_TARGET_CHANGE = 0.25    # fraction of current weight


# ───────────────────────── helpers ──────────────────────────
def age_on(birth_date: date, today: date | None = None) -> int:
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def _number(field: str, raw: Any) -> float:
    if isinstance(raw, bool):
        raise ValidationError(field, "Please enter a valid number")
    try:
        val = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(field, "Please enter a valid number") from None
    if not math.isfinite(val):
        raise ValidationError(field, "Please enter a valid number")
    return val


def _in_range(field: str, val: float, bounds: tuple[int, int], label: str, unit: str) -> float:
    lo, hi = bounds
    if val < lo or val > hi:
        raise ValidationError(field, f"{label} must be between {lo} and {hi} {unit}")
    return val


def _choice(kind, label: str) -> Callable[..., Any]:
    def check(field: str, raw: Any, draft: OnboardingRecord, today: date | None):
        if isinstance(raw, kind):
            return raw
        allowed = [m.value for m in kind]
        if not isinstance(raw, str) or raw not in allowed:
            raise ValidationError(field, f"{label} must be one of: {', '.join(allowed)}")
        return kind(raw)

    return check


# ───────────────────────── per-field rules ──────────────────
def _current_weight(field, raw, draft, today) -> float:
    return _in_range(field, _number(field, raw), WEIGHT_RANGE, "Weight", "kg")


def _height(field, raw, draft, today) -> float:
    return _in_range(field, _number(field, raw), HEIGHT_RANGE, "Height", "cm")


def _birth_date(field, raw, draft, today) -> date:
    if isinstance(raw, datetime):
        born = raw.date()
    elif isinstance(raw, date):
        born = raw
    elif isinstance(raw, str):
        text = raw.strip()
        try:
            born = date.fromisoformat(text)
        except ValueError:
            # "1990-04-12T00:00:00" from date pickers
            try:
                born = datetime.fromisoformat(text).date()
            except ValueError:
                raise ValidationError(field, "Please enter your birth date") from None
    else:
        raise ValidationError(field, "Please enter your birth date")

    lo, hi = AGE_RANGE
    if not lo <= age_on(born, today) <= hi:
        raise ValidationError(field, f"Age must be between {lo} and {hi} years")
    return born


def _target_weight(field, raw, draft, today) -> float:
    target = _in_range(field, _number(field, raw), WEIGHT_RANGE, "Target weight", "kg")
    current = draft.current_weight
    if current is None:
        raise ValidationError(field, "Current weight data is missing")

    max_change = current * MAX_TARGET_CHANGE
    if abs(current - target) > max_change:
        raise ValidationError(
            field,
            "Target weight should be within 25% of your current weight "
            f"({round_half_up(current - max_change)} - "
            f"{round_half_up(current + max_change)} kg)",
        )
    return target


_RULES: dict[str, Callable[..., Any]] = {
    "goal": _choice(Goal, "Goal"),
    "current_weight": _current_weight,
    "height": _height,
    "gender": _choice(Gender, "Gender"),
    "birth_date": _birth_date,
    "activity_level": _choice(ActivityLevel, "Activity level"),
    "target_weight": _target_weight,
}


# ───────────────────────── public entrypoint ────────────────
def validate_field(
    field: str,
    raw: Any,
    draft: OnboardingRecord | None = None,
    today: date | None = None,
) -> Any:
    rule = _RULES.get(field)
    if rule is None:
        raise ValidationError(field, f"Unknown onboarding field: {field}")
    if raw is None:
        raise ValidationError(field, f"{field} is required")
    return rule(field, raw, draft or OnboardingRecord(), today)
