"""
Configuration Schemas for sttbridge.

Pydantic models for provider settings and application settings.

Provider settings are immutable values. Persisted mappings use the
camelCase keys the host's settings store has always used (``apiKey``,
``baseUrl``, ...); Python code uses the snake_case attribute names.

Security:
    Credentials use SecretStr to prevent accidental logging.
    Access the value with `.get_secret_value()`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-preview-04-17"
DEFAULT_GEMINI_PROMPT = (
    "You are a speech recognition assistant. Transcribe verbatim any audio files "
    "the user sends you, without adding or omitting any words. Apart from the "
    "transcription itself, do not generate any other content. When outputting "
    "Chinese, use Simplified Chinese by default."
)

DEFAULT_WHISPER_ENDPOINT = "https://api.openai.com/v1/audio/transcriptions"
DEFAULT_WHISPER_MODEL = "whisper-1"


class ProviderSettings(BaseModel):
    """
    Base class for per-provider settings.

    Unknown keys are ignored, and missing or invalid values take their
    defaults, so ``from_persisted`` never fails on a stale or partial
    mapping.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @classmethod
    def from_persisted(cls, persisted: Mapping[str, Any] | None = None):
        """Merge a persisted mapping over the defaults."""
        values = {k: v for k, v in (persisted or {}).items() if v is not None}
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            invalid = {str(err["loc"][0]) for err in e.errors() if err["loc"]}

        # Drop both spellings of each invalid field
        for name, info in cls.model_fields.items():
            if name in invalid or info.alias in invalid:
                invalid.update({name, info.alias})
        dropped = sorted(k for k in values if k in invalid)
        logger.warning(f"Ignoring invalid persisted {cls.__name__} values for: {', '.join(dropped)}")
        return cls.model_validate({k: v for k, v in values.items() if k not in invalid})

    def to_persisted(self) -> dict[str, str]:
        """Dump to the persisted mapping shape, credentials revealed."""
        data = self.model_dump(by_alias=True)
        for key, value in data.items():
            if isinstance(value, SecretStr):
                data[key] = value.get_secret_value()
        return data

    def secret(self, name: str) -> str:
        """Return the plain value of a SecretStr field."""
        value = getattr(self, name)
        if isinstance(value, SecretStr):
            return value.get_secret_value()
        return value


class GeminiSettings(ProviderSettings):
    """Settings for the Gemini generateContent provider."""

    api_key: SecretStr = Field(default=SecretStr(""), alias="apiKey", description="Google AI API key")
    base_url: str = Field(default=DEFAULT_GEMINI_BASE_URL, alias="baseUrl")
    model_name: str = Field(default=DEFAULT_GEMINI_MODEL, alias="modelName")
    prompt: str = Field(default=DEFAULT_GEMINI_PROMPT, description="Instruction sent with the audio")


class WhisperSettings(ProviderSettings):
    """Settings for an OpenAI-Whisper-compatible transcription endpoint."""

    api_key: SecretStr = Field(default=SecretStr(""), alias="apiKey", description="Bearer token")
    endpoint: str = Field(default=DEFAULT_WHISPER_ENDPOINT, description="Full transcription URL")
    model: str = Field(default=DEFAULT_WHISPER_MODEL)
    language: str = Field(default="", description="Optional ISO 639-1 hint, empty for auto")


class AppSettings(BaseModel):
    """
    Application settings model.

    Used for type-safe settings access.

    Security:
        API keys use SecretStr to prevent accidental logging.
        Access secret values with: settings.gemini_api_key.get_secret_value()
    """

    # Service identity
    service_name: str = "sttbridge"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Provider selection
    default_stt_provider: str = "gemini"

    # HTTP; None means no client-side timeout
    http_timeout: float | None = Field(default=None, gt=0)

    # Provider credentials (SecretStr prevents accidental logging)
    gemini_api_key: SecretStr = Field(default=SecretStr(""), description="Google Gemini API key")
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    whisper_api_key: SecretStr = Field(default=SecretStr(""), description="Whisper-compatible API key")
    whisper_endpoint: str = DEFAULT_WHISPER_ENDPOINT


__all__ = [
    "AppSettings",
    "GeminiSettings",
    "ProviderSettings",
    "WhisperSettings",
]
