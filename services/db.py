"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* The `users` table that receives a completed onboarding profile
* Small DAO helpers used by routers
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import AsyncGenerator

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, String, func
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings
from core.models.onboarding import ProfilePayload

_LOG = logging.getLogger(__name__)

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None


def _create_engine() -> AsyncEngine:
    if not settings.database_url:
        raise RuntimeError("Set DATABASE_URL to an async SQLAlchemy URL")
    return create_async_engine(settings.database_url, pool_pre_ping=True)


def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = _create_engine()
    return _ENGINE


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String)
    first_name: Mapped[str] = mapped_column(String)
    last_name: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # onboarding – base fields
    goal_type: Mapped[str] = mapped_column(String)
    current_weight: Mapped[float] = mapped_column(Float)
    height: Mapped[float] = mapped_column(Float)
    gender: Mapped[str] = mapped_column(String)
    birth_date: Mapped[date] = mapped_column(Date)
    activity_level: Mapped[str] = mapped_column(String)
    target_weight: Mapped[float] = mapped_column(Float)
    # onboarding – derived plan
    bmr: Mapped[int] = mapped_column(Integer)
    tdee: Mapped[int] = mapped_column(Integer)
    target_calories: Mapped[int] = mapped_column(Integer)
    estimated_goal_date: Mapped[date] = mapped_column(Date)


class ProfileExistsError(Exception):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"User {user_id} already exists")
        self.user_id = user_id


# ───────── DAO helpers ───────────────────────────────────────────────
async def create_profile(db: AsyncSession, payload: ProfilePayload) -> User:
    if await db.get(User, payload.id):
        raise ProfileExistsError(payload.id)

    data = payload.model_dump(mode="json", exclude={"age", "goal"})
    user = User(
        **{k: v for k, v in data.items() if k not in ("birth_date", "estimated_goal_date")},
        goal_type=payload.goal.value,
        birth_date=payload.birth_date,
        estimated_goal_date=payload.estimated_goal_date,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    _LOG.info("profile created for user %s", payload.id)
    return user


async def fetch_profile(db: AsyncSession, user_id: str) -> User | None:
    return await db.get(User, user_id)


# ───────── session helper ────────────────────────────────────────────
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async_session = async_sessionmaker(engine(), expire_on_commit=False)
    async with async_session() as session:
        yield session
