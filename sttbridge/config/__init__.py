"""
sttbridge Configuration

Provider settings models and environment-driven application settings.
"""

from .schemas import AppSettings, GeminiSettings, ProviderSettings, WhisperSettings
from .service import configure_logging, get_settings, load_settings_from_env

__all__ = [
    "AppSettings",
    "GeminiSettings",
    "ProviderSettings",
    "WhisperSettings",
    "configure_logging",
    "get_settings",
    "load_settings_from_env",
]
