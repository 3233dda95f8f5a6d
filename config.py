"""
Centralised settings loader.

Values come from the environment (or a local ``.env``); field names map to
upper-case env vars, e.g. ``openrouter_api_key`` ← ``OPENROUTER_API_KEY``.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / DB / auth ────────────────────────────────────────
    env_name: str = "local"
    database_url: str | None = None
    jwt_secret: str = "changeme"
    auto_create_tables: bool = True
    log_level: str = "INFO"

    # ─── OpenRouter (chat completions) ──────────────────────────────
    openrouter_api_key: str | None = None
    openrouter_endpoint: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "openai/gpt-4o-mini"
    model_temperature: float = Field(0.7, ge=0, le=2)
    model_top_p: float = Field(1.0, gt=0, le=1)
    model_retry_count: int = Field(3, ge=1)
    model_retry_delay: float = Field(1.0, ge=0)   # seconds, doubled per attempt
    model_timeout: float = 120.0

    # "sync" runs the model call inside POST /generations,
    # "background" returns 202 at once and finishes in a background task
    generation_mode: Literal["sync", "background"] = "sync"

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
        protected_namespaces=("settings_",),
    )


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
