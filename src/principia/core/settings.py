"""Environment-driven settings for principia.

``PrincipiaSettings`` collects the few knobs the library has (log level and
format, service name, copy isolation) in one validated place so they can be
set from the environment or a ``.env`` file instead of being threaded
through every constructor.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Bad values fail at load time, not mid-operation
    - **Environment-driven:** Reads ``PRINCIPIA_*`` env vars and ``.env``
    - **Sensible defaults:** Works out of the box with no configuration
    - **Extra ignore:** Unknown env vars don't cause startup failures

Examples:
    >>> from principia.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.copy_entities
    True

Tags:
    settings, configuration, pydantic, environment, principia
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class PrincipiaSettings(BaseSettings):
    """Settings shared by repositories and services.

    Fields
    ──────
    log_level      : Structlog log level
    json_logs      : JSON output (True), console (False), or TTY auto-detect (None)
    service_name   : ``service.name`` attached to every log event
    copy_entities  : Deep-copy entities on the way in and out of repositories
    """

    model_config = SettingsConfigDict(
        env_prefix="PRINCIPIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None
    service_name: str = "principia"

    # ── Repository ───────────────────────────────────────────────
    copy_entities: bool = Field(
        default=True,
        description="Isolate stored entities from caller-side mutation",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> PrincipiaSettings:
    """Return the process-wide settings, loaded once."""
    return PrincipiaSettings()


__all__ = [
    "PrincipiaSettings",
    "get_settings",
]
