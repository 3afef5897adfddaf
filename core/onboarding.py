"""
core/onboarding.py
────────────────────────────────────────────────────────────────────────
Accumulates the wizard draft step by step and turns a complete draft into a
personalised plan:

    goal → weight → height → gender/birth date → activity → target weight
                                   │
                              finalize()
                                   │
        BMR → TDEE → target calories        goal date (independent)

Nothing here writes anywhere except the injected DraftStore, and finalize()
does not write at all – the caller persists the profile, then discard()s.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Mapping

from core.errors import MissingFieldError, ValidationError
from core.health_calc import (
    calculate_bmr,
    calculate_estimated_goal_date,
    calculate_target_calories,
    calculate_tdee,
)
from core.models.onboarding import (
    BASE_FIELDS,
    DERIVED_FIELDS,
    FinalizedProfile,
    OnboardingRecord,
    ProfilePayload,
)
from core.validation import age_on, validate_field
from services.draft_store import DraftStore

_STEP_ORDER = {f: i for i, f in enumerate(BASE_FIELDS)}


def merge_records(
    existing: OnboardingRecord | None,
    update: Mapping[str, Any] | OnboardingRecord,
) -> OnboardingRecord:
    """Shallow merge; keys in `update` win, everything else is kept."""
    base = existing.model_dump(exclude_none=True) if existing else {}
    if isinstance(update, OnboardingRecord):
        update = update.model_dump(exclude_none=True)
    return OnboardingRecord.model_validate({**base, **update})


class OnboardingAccumulator:
    def __init__(
        self,
        store: DraftStore,
        logger: logging.Logger | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._log = logger or logging.getLogger(__name__)
        self._clock = clock

    # --------------- draft access ------------------------------------
    def draft(self) -> OnboardingRecord:
        return self._store.get() or OnboardingRecord()

    def discard(self) -> None:
        self._store.clear()
        self._log.debug("onboarding draft discarded")

    # --------------- one wizard step ---------------------------------
    def apply_step(self, update: Mapping[str, Any]) -> OnboardingRecord:
        """
        Validate every field in `update`, merge it into the stored draft and
        persist the result.  Fields are checked in wizard order, so a step
        carrying both weights validates `target_weight` against the new
        `current_weight`.  On any ValidationError nothing is written.
        """
        current = self.draft()
        today = self._clock()
        staged = current
        accepted: dict[str, Any] = {}

        for field in sorted(update, key=lambda f: _STEP_ORDER.get(f, len(_STEP_ORDER))):
            if field in DERIVED_FIELDS:
                self._log.info("rejected step: %s is derived", field)
                raise ValidationError(field, f"{field} is calculated and cannot be set directly")
            try:
                value = validate_field(field, update[field], staged, today)
            except ValidationError as exc:
                self._log.info("rejected step: %s – %s", field, exc.message)
                raise
            if field == "goal" and current.goal is not None and value != current.goal:
                raise ValidationError("goal", "Goal has already been selected")
            accepted[field] = value
            staged = merge_records(staged, {field: value})

        record = merge_records(current, accepted)
        changed = any(getattr(current, f) != v for f, v in accepted.items())
        if changed and any(getattr(record, f) is not None for f in DERIVED_FIELDS):
            # stale plan – it gets recomputed on the next finalize()
            record = record.model_copy(update={f: None for f in DERIVED_FIELDS})

        self._store.set(record)
        self._log.debug("draft updated: %s (missing: %s)", sorted(accepted), record.missing())
        return record

    # --------------- plan --------------------------------------------
    def finalize(self, record: OnboardingRecord | None = None) -> FinalizedProfile:
        rec = record if record is not None else self.draft()
        missing = rec.missing()
        if missing:
            self._log.info("finalize blocked, first missing field: %s", missing[0])
            raise MissingFieldError(missing[0])

        today = self._clock()
        age = age_on(rec.birth_date, today)
        bmr = calculate_bmr(rec.current_weight, rec.height, age, rec.gender)
        tdee = calculate_tdee(bmr, rec.activity_level)
        kcal = calculate_target_calories(tdee, rec.goal)
        goal_date = calculate_estimated_goal_date(
            rec.current_weight, rec.target_weight, rec.goal, today=today
        )

        self._log.info(
            "plan computed: bmr=%d tdee=%d target=%d goal_date=%s",
            bmr, tdee, kcal, goal_date.isoformat(),
        )
        return FinalizedProfile(
            **rec.model_dump(include=set(BASE_FIELDS)),
            age=age,
            bmr=bmr,
            tdee=tdee,
            target_calories=kcal,
            estimated_goal_date=goal_date,
        )

    def complete(self, identity: Mapping[str, Any]) -> ProfilePayload:
        """Finalize and attach account identity (id, email, first/last name)."""
        plan = self.finalize()
        return ProfilePayload(**plan.model_dump(), **identity)
