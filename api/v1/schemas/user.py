from __future__ import annotations
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class AccountIdentity(BaseModel):
    id: str = Field(..., min_length=1)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+$")
    first_name: str = Field(..., min_length=1)
    last_name: str | None = None


class UserOut(AccountIdentity):
    """Stored profile: identity + onboarding answers + computed plan."""

    created_at: datetime | None = None
    is_active: bool = True
    goal_type: str
    current_weight: float
    height: float
    gender: str
    birth_date: date
    activity_level: str
    target_weight: float
    bmr: int
    tdee: int
    target_calories: int
    estimated_goal_date: date

    model_config = ConfigDict(from_attributes=True)
