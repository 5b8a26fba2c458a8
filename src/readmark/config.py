"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/readmark/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_LOG_LEVELS = frozenset(("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"))


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class ValidationConfig(BaseModel):
    """Selection boundary validation tuning."""

    # Round-trip drift (in characters) tolerated before warning/correcting
    drift_tolerance: int = Field(default=1, ge=0)
    # Sentence expansion is dropped if the result would reach this many chars
    sentence_expansion_limit: int = Field(default=500, ge=1)
    sentence_expansion_on_drift: bool = True


class LoggingConfig(BaseModel):
    """Log destinations and levels used by ``readmark.setup_logging``."""

    log_dir: Path = Path("logs")
    level: str = "INFO"
    file_level: str = "DEBUG"

    @field_validator("level", "file_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _LOG_LEVELS:
            msg = f"Unknown log level {value!r}"
            raise ValueError(msg)
        return upper


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``VALIDATION__DRIFT_TOLERANCE``, ``LOGGING__LEVEL``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    validation: ValidationConfig = ValidationConfig()
    logging: LoggingConfig = LoggingConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
