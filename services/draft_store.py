"""
services/draft_store.py
────────────────────────────────────────────────────────────────────────
Local key-value home for the onboarding draft while the wizard is running.

One store instance == one namespace (device / wizard session).  There is no
compare-and-swap: callers serialise writes for the same namespace.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from core.models.onboarding import OnboardingRecord

_LOG = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "lets_go_lean.onboarding_data"
_SAFE_NAME = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


class DraftStore(Protocol):
    def get(self) -> OnboardingRecord | None: ...

    def set(self, record: OnboardingRecord) -> None: ...

    def clear(self) -> None: ...


class InMemoryDraftStore:
    def __init__(self, record: OnboardingRecord | None = None) -> None:
        self._record = record

    def get(self) -> OnboardingRecord | None:
        return self._record

    def set(self, record: OnboardingRecord) -> None:
        self._record = record

    def clear(self) -> None:
        self._record = None


class JsonFileDraftStore:
    """Draft serialised as JSON (ISO dates) in `<root>/<namespace>.json`."""

    def __init__(self, root: str | Path, namespace: str = DEFAULT_NAMESPACE) -> None:
        if not _SAFE_NAME.match(namespace) or namespace.startswith("."):
            raise ValueError(f"invalid draft namespace: {namespace!r}")
        self.path = Path(root) / f"{namespace}.json"

    def get(self) -> OnboardingRecord | None:
        if not self.path.exists():
            return None
        try:
            return OnboardingRecord.model_validate_json(self.path.read_text(encoding="utf-8"))
        except PydanticValidationError as exc:
            # unreadable draft – treat as no draft, the next set() overwrites it
            _LOG.warning("ignoring unreadable draft %s: %s", self.path, exc)
            return None

    def set(self, record: OnboardingRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(record.model_dump_json(exclude_none=True), encoding="utf-8")
        tmp.replace(self.path)
        _LOG.debug("draft saved → %s", self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
        _LOG.debug("draft cleared → %s", self.path)
