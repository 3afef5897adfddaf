from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from services.db import fetch_profile, get_session
from api.v1.schemas import UserOut

router = APIRouter()


# ───────────────────────── fetch one ────────────────────────
@router.get("/{user_id}", response_model=UserOut)
async def fetch_user(
    user_id: str,
    db: AsyncSession = Depends(get_session),
) -> UserOut:
    usr = await fetch_profile(db, user_id)
    if usr is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserOut.model_validate(usr, from_attributes=True)
