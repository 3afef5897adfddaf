"""
Centralised settings loader (pydantic-settings).
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / DB ────────────────────────────────────────────────
    env_name: str = Field("local")
    database_url: str | None = Field(None)      # e.g. postgresql+asyncpg://…
    log_level: str = Field("INFO")

    # ─── onboarding drafts (one JSON file per wizard session) ───────
    draft_dir: str = Field(".drafts")

    # allow other teammates’ env-vars without crashing
    model_config = {"extra": "ignore", "env_file": ".env", "env_file_encoding": "utf-8"}


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
