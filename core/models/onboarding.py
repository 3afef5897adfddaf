from __future__ import annotations
from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Goal(str, Enum):
    lose_weight = "lose_weight"
    gain_weight = "gain_weight"
    get_fit = "get_fit"


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    light = "light"
    moderate = "moderate"
    heavy = "heavy"


# wizard order – finalize() reports the first gap in this order
BASE_FIELDS = (
    "goal",
    "current_weight",
    "height",
    "gender",
    "birth_date",
    "activity_level",
    "target_weight",
)
DERIVED_FIELDS = ("bmr", "tdee", "target_calories", "estimated_goal_date")


class OnboardingRecord(BaseModel):
    """Partial profile accumulated one wizard step at a time."""

    goal: Goal | None = None
    current_weight: float | None = None      # kg
    height: float | None = None              # cm
    gender: Gender | None = None
    birth_date: date | None = None
    activity_level: ActivityLevel | None = None
    target_weight: float | None = None       # kg
    # derived – only ever written by finalize()
    bmr: int | None = None
    tdee: int | None = None
    target_calories: int | None = None
    estimated_goal_date: date | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    def missing(self) -> list[str]:
        return [f for f in BASE_FIELDS if getattr(self, f) is None]

    @property
    def is_complete(self) -> bool:
        return not self.missing()


class FinalizedProfile(BaseModel):
    goal: Goal
    current_weight: float
    height: float
    gender: Gender
    birth_date: date
    activity_level: ActivityLevel
    target_weight: float
    age: int
    bmr: int
    tdee: int
    target_calories: int
    estimated_goal_date: date

    model_config = ConfigDict(frozen=True)


class ProfilePayload(FinalizedProfile):
    """What the remote profile service receives: plan + account identity."""

    id: str
    email: str
    first_name: str
    last_name: str | None = None
