from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from core.errors import MissingFieldError, ValidationError
from core.models.onboarding import BASE_FIELDS, OnboardingRecord
from core.onboarding import OnboardingAccumulator
from services.db import ProfileExistsError, create_profile, get_session
from services.draft_store import DraftStore, JsonFileDraftStore
from api.v1.schemas import (
    AccountIdentity,
    DraftOut,
    FieldErrorOut,
    FieldErrorResponse,
    OnboardingStepIn,
    PlanOut,
    UserOut,
)

router = APIRouter()

_LOG = logging.getLogger(__name__)

SessionId = Path(..., pattern=r"^[A-Za-z0-9_-]{1,64}$")


# ───────────────────────── dependencies ─────────────────────
def get_draft_store(session_id: str = SessionId) -> DraftStore:
    return JsonFileDraftStore(settings.draft_dir, namespace=session_id)


def get_clock() -> Callable[[], date]:
    return date.today


def get_accumulator(
    store: DraftStore = Depends(get_draft_store),
    clock: Callable[[], date] = Depends(get_clock),
) -> OnboardingAccumulator:
    return OnboardingAccumulator(store, logger=logging.getLogger("onboarding"), clock=clock)


# ───────────────────────── helpers ──────────────────────────
def _draft_out(rec: OnboardingRecord) -> DraftOut:
    return DraftOut(**rec.model_dump(include=set(BASE_FIELDS)), missing=rec.missing())


def _unprocessable(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail=FieldErrorOut(field=exc.field, message=exc.message).model_dump(),
    )


def _incomplete(exc: MissingFieldError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=FieldErrorOut(field=exc.field, message=str(exc)).model_dump(),
    )


# ───────────────────────── draft ────────────────────────────
@router.get("/{session_id}", response_model=DraftOut)
def read_draft(acc: OnboardingAccumulator = Depends(get_accumulator)) -> DraftOut:
    return _draft_out(acc.draft())


@router.patch(
    "/{session_id}",
    response_model=DraftOut,
    responses={422: {"model": FieldErrorResponse}},
)
def apply_step(
    body: OnboardingStepIn,
    acc: OnboardingAccumulator = Depends(get_accumulator),
) -> DraftOut:
    update = body.model_dump(exclude_unset=True)
    if not update:
        raise HTTPException(
            status_code=422,
            detail=FieldErrorOut(field="step", message="Nothing to save in this step").model_dump(),
        )
    try:
        rec = acc.apply_step(update)
    except ValidationError as exc:
        raise _unprocessable(exc) from exc
    return _draft_out(rec)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def discard_draft(acc: OnboardingAccumulator = Depends(get_accumulator)) -> Response:
    acc.discard()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ───────────────────────── plan / register ──────────────────
@router.post(
    "/{session_id}/plan",
    response_model=PlanOut,
    responses={409: {"model": FieldErrorResponse}},
)
def preview_plan(acc: OnboardingAccumulator = Depends(get_accumulator)) -> PlanOut:
    try:
        plan = acc.finalize()
    except MissingFieldError as exc:
        raise _incomplete(exc) from exc
    return PlanOut.model_validate(plan, from_attributes=True)


@router.post(
    "/{session_id}/complete",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": FieldErrorResponse}},
)
async def complete_onboarding(
    body: AccountIdentity,
    acc: OnboardingAccumulator = Depends(get_accumulator),
    db: AsyncSession = Depends(get_session),
) -> UserOut:
    try:
        payload = acc.complete(body.model_dump())
    except MissingFieldError as exc:
        raise _incomplete(exc) from exc

    try:
        user = await create_profile(db, payload)
    except ProfileExistsError as exc:
        _LOG.warning("profile creation refused: %s", exc)
        raise HTTPException(
            status_code=409,
            detail=FieldErrorOut(field="id", message="User already exists").model_dump(),
        ) from exc

    # only once the row is stored – a failure above keeps the draft for retry
    acc.discard()
    return UserOut.model_validate(user, from_attributes=True)
