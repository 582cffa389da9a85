# utils/config.py
# CodeMentor — Runtime settings read from the environment (and .env).
# Settings are built once and passed explicitly into each service.
# Imports from: utils/constants.py

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from utils.constants import (
    DEFAULT_DATABASE_URL,
    GEMINI_BASE_URL,
    GEMINI_MODEL,
    GEMINI_TIMEOUT_S,
)


@dataclass(frozen=True)
class Settings:
    gemini_api_key:   Optional[str] = None
    gemini_model:     str = GEMINI_MODEL
    gemini_base_url:  str = GEMINI_BASE_URL
    gemini_timeout_s: float = GEMINI_TIMEOUT_S
    database_url:     str = DEFAULT_DATABASE_URL
    log_level:        str = "INFO"

    @property
    def has_gemini_key(self) -> bool:
        return bool(self.gemini_api_key)


def _env(name: str) -> Optional[str]:
    """Returns the stripped variable, or None when unset or blank."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def load_settings() -> Settings:
    """
    Loads `.env` (without overriding real environment variables) and
    builds a Settings instance. A missing GEMINI_API_KEY is allowed here;
    services reject calls until it is configured.
    """
    load_dotenv()

    timeout_raw = _env("GEMINI_TIMEOUT_S")
    try:
        timeout_s = float(timeout_raw) if timeout_raw else GEMINI_TIMEOUT_S
    except ValueError:
        raise ValueError(f"GEMINI_TIMEOUT_S must be a number, got {timeout_raw!r}")

    return Settings(
        gemini_api_key=_env("GEMINI_API_KEY"),
        gemini_model=_env("GEMINI_MODEL") or GEMINI_MODEL,
        gemini_base_url=(_env("GEMINI_BASE_URL") or GEMINI_BASE_URL).rstrip("/"),
        gemini_timeout_s=timeout_s,
        database_url=_env("DATABASE_URL") or DEFAULT_DATABASE_URL,
        log_level=_env("LOG_LEVEL") or "INFO",
    )
