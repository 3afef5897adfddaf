# tests/test_validation.py
from __future__ import annotations

from datetime import date

import pytest

from core.errors import ValidationError
from core.models.onboarding import ActivityLevel, Gender, Goal, OnboardingRecord
from core.validation import age_on, validate_field

TODAY = date(2026, 3, 15)
DRAFT_80KG = OnboardingRecord(current_weight=80)


def _reason(field, raw, draft=None) -> str:
    with pytest.raises(ValidationError) as exc:
        validate_field(field, raw, draft, TODAY)
    assert exc.value.field == field
    return exc.value.message


# ── numbers ──────────────────────────────────────────────────────────
def test_weight_bounds_inclusive():
    assert validate_field("current_weight", 300) == 300.0
    assert validate_field("current_weight", "30") == 30.0
    assert _reason("current_weight", 300.01) == "Weight must be between 30 and 300 kg"
    assert _reason("current_weight", 29.99) == "Weight must be between 30 and 300 kg"


def test_height_bounds():
    assert validate_field("height", " 250 ") == 250.0
    assert _reason("height", 99.9) == "Height must be between 100 and 250 cm"


@pytest.mark.parametrize("raw", ["abc", "", True, float("nan"), "inf", [70], 10**400])
def test_non_numeric_rejected(raw):
    assert _reason("current_weight", raw) == "Please enter a valid number"


# ── birth date / age ─────────────────────────────────────────────────
def test_age_helper_handles_birthday_not_yet_reached():
    assert age_on(date(1996, 3, 15), TODAY) == 30
    assert age_on(date(1996, 3, 16), TODAY) == 29


def test_exactly_eighteen_accepted_one_day_short_rejected():
    assert validate_field("birth_date", date(2008, 3, 15), today=TODAY) == date(2008, 3, 15)
    assert _reason("birth_date", date(2008, 3, 16)) == "Age must be between 18 and 100 years"


def test_upper_age_bound():
    assert validate_field("birth_date", "1926-03-15", today=TODAY) == date(1926, 3, 15)
    assert _reason("birth_date", "1925-03-15") == "Age must be between 18 and 100 years"


def test_birth_date_garbage():
    assert _reason("birth_date", "15/03/1990") == "Please enter your birth date"
    assert _reason("birth_date", 19900315) == "Please enter your birth date"
    assert _reason("birth_date", "2008-03-15garbage") == "Please enter your birth date"


def test_birth_date_with_time_part():
    assert validate_field("birth_date", "1990-04-12T00:00:00", today=TODAY) == date(1990, 4, 12)


# ── enums ────────────────────────────────────────────────────────────
def test_enum_membership_exact():
    assert validate_field("gender", "other") is Gender.other
    assert validate_field("activity_level", "heavy") is ActivityLevel.heavy
    assert validate_field("goal", Goal.get_fit) is Goal.get_fit
    assert "male, female, other" in _reason("gender", "Male")
    assert _reason("goal", "lose") == "Goal must be one of: lose_weight, gain_weight, get_fit"
    assert _reason("activity_level", 3).startswith("Activity level must be one of")


# ── target weight ────────────────────────────────────────────────────
def test_target_weight_needs_current_weight():
    assert _reason("target_weight", 70) == "Current weight data is missing"
    assert _reason("target_weight", 70, OnboardingRecord()) == "Current weight data is missing"


def test_target_weight_within_quarter_of_current():
    # 25 % of 80 = 20 → [60, 100]; the bound itself is allowed
    assert validate_field("target_weight", 60, DRAFT_80KG, TODAY) == 60.0
    assert validate_field("target_weight", "100", DRAFT_80KG, TODAY) == 100.0
    assert _reason("target_weight", 59.9, DRAFT_80KG) == (
        "Target weight should be within 25% of your current weight (60 - 100 kg)"
    )


def test_target_weight_bounds_message_rounds_half_up():
    # 70 ± 17.5 → 52.5 / 87.5
    msg = _reason("target_weight", 50, OnboardingRecord(current_weight=70))
    assert msg.endswith("(53 - 88 kg)")


def test_target_weight_absolute_range_checked_first():
    assert _reason("target_weight", 301, DRAFT_80KG) == "Target weight must be between 30 and 300 kg"


# ── misc ─────────────────────────────────────────────────────────────
def test_unknown_and_empty_fields():
    assert _reason("bmr", 1500) == "Unknown onboarding field: bmr"
    assert _reason("height", None) == "height is required"
