"""
Configuration loading for sttbridge.

Reads AppSettings from ``STTBRIDGE_*`` environment variables and sets
up logging.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from .schemas import DEFAULT_GEMINI_BASE_URL, DEFAULT_WHISPER_ENDPOINT, AppSettings

logger = logging.getLogger(__name__)

ENV_PREFIX = "STTBRIDGE_"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def load_settings_from_env() -> AppSettings:
    """Build AppSettings from the environment (uncached)."""
    timeout = _env("HTTP_TIMEOUT")
    return AppSettings(
        service_name=_env("SERVICE_NAME", "sttbridge"),
        environment=_env("ENVIRONMENT", "development"),
        debug=_env("DEBUG", "false").lower() == "true",
        log_level=_env("LOG_LEVEL", "INFO").upper(),
        default_stt_provider=_env("DEFAULT_STT_PROVIDER", "gemini").lower(),
        http_timeout=float(timeout) if timeout else None,
        gemini_api_key=_env("GEMINI_API_KEY", ""),
        gemini_base_url=_env("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL),
        whisper_api_key=_env("WHISPER_API_KEY", ""),
        whisper_endpoint=_env("WHISPER_ENDPOINT", DEFAULT_WHISPER_ENDPOINT),
    )


@lru_cache
def get_settings() -> AppSettings:
    """
    Get application settings.

    Cached for the process lifetime; call ``get_settings.cache_clear()``
    after changing the environment.
    """
    return load_settings_from_env()


def configure_logging(settings: AppSettings | None = None) -> None:
    """Configure root logging from settings."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.debug(f"Logging configured at {logging.getLevelName(level)}")


__all__ = [
    "ENV_PREFIX",
    "configure_logging",
    "get_settings",
    "load_settings_from_env",
]
