from __future__ import annotations
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.models.onboarding import ActivityLevel, Gender, Goal


class OnboardingStepIn(BaseModel):
    """
    One wizard step.  Values stay raw (form text or JSON numbers) so the
    engine's validator can produce the user-facing message itself.
    Derived plan fields are not accepted here.
    """

    goal: Any = Field(None, examples=["lose_weight", "gain_weight", "get_fit"])
    current_weight: Any = Field(None, examples=[82.5])
    height: Any = Field(None, examples=[178])
    gender: Any = Field(None, examples=["male", "female", "other"])
    birth_date: Any = Field(None, examples=["1990-04-12"])
    activity_level: Any = Field(None, examples=["sedentary", "light", "moderate", "heavy"])
    target_weight: Any = Field(None, examples=[75])

    model_config = ConfigDict(extra="forbid")


class DraftOut(BaseModel):
    goal: Goal | None = None
    current_weight: float | None = None
    height: float | None = None
    gender: Gender | None = None
    birth_date: date | None = None
    activity_level: ActivityLevel | None = None
    target_weight: float | None = None
    missing: list[str] = []

    model_config = ConfigDict(from_attributes=True)


class PlanOut(BaseModel):
    age: int
    bmr: int
    tdee: int
    target_calories: int
    estimated_goal_date: date

    model_config = ConfigDict(from_attributes=True)


class FieldErrorOut(BaseModel):
    field: str
    message: str


class FieldErrorResponse(BaseModel):
    """Body of every 409 / 422 raised by the onboarding routes."""

    detail: FieldErrorOut
