"""
Whisper STT Provider for sttbridge.

Talks to any OpenAI-Whisper-compatible ``/audio/transcriptions``
endpoint (OpenAI, Groq, whisper.cpp server, LocalAI, ...) with a
multipart upload.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from sttbridge.config.schemas import WhisperSettings

from .base import WAV_MIME_TYPE, AudioClip, BaseSTTProvider, FieldKind, SettingsField
from .errors import ApiError, ResponseShapeError

logger = logging.getLogger(__name__)

UPLOAD_FILENAME = "record.wav"

API_FAILED_TITLE = "STT Generation Failed (Whisper OpenAI Compatible)"
API_ERROR_TITLE = "STT API Error (Whisper OpenAI Compatible)"
REQUEST_ERROR_TITLE = "STT Request Error (Whisper OpenAI Compatible)"

NO_ERROR_DETAILS = "Could not retrieve error details."


def build_form(settings: WhisperSettings, clip: AudioClip) -> tuple[dict[str, Any], dict[str, str]]:
    """
    Build the multipart ``files`` and ``data`` arguments.

    ``language`` is only sent when configured.
    """
    files = {"file": (UPLOAD_FILENAME, clip.data, WAV_MIME_TYPE)}
    data = {"model": settings.model}
    if settings.language:
        data["language"] = settings.language
    return files, data


def read_error_body(response: httpx.Response) -> str:
    """Best-effort response text for error messages."""
    try:
        return response.text
    except (httpx.StreamError, UnicodeDecodeError, LookupError):
        logger.error("Whisper STT: failed to get text from error response", exc_info=True)
        return NO_ERROR_DETAILS


class WhisperSTTProvider(BaseSTTProvider):
    """
    OpenAI-Whisper-compatible Speech-to-Text provider.

    Sends one multipart POST per clip with fields ``file``, ``model``
    and, when set, ``language``; authenticates with a Bearer token.
    The transcript is the ``text`` field of the JSON response, returned
    as-is (an empty string is a valid transcript).
    """

    settings_class = WhisperSettings
    settings_fields = (
        SettingsField(
            id="stt_openai_compatible_api_key",
            label="API Key",
            setting="api_key",
            kind=FieldKind.PASSWORD,
        ),
        SettingsField(id="stt_openai_compatible_endpoint", label="Endpoint URL", setting="endpoint"),
        SettingsField(id="stt_openai_compatible_model", label="Model", setting="model"),
        SettingsField(
            id="stt_openai_compatible_language",
            label="Language (Optional)",
            setting="language",
            placeholder="e.g., en, ja, zh",
        ),
    )
    required_settings = (
        ("api_key", "API Key"),
        ("endpoint", "Endpoint URL"),
        ("model", "Model"),
    )
    missing_setting_template = "{label} is not set for Whisper (OpenAI Compatible)."
    error_title = REQUEST_ERROR_TITLE
    notification_options = {
        "timeout_ms": 10000,
        "extended_timeout_ms": 20000,
        "prevent_duplicates": True,
    }

    @property
    def name(self) -> str:
        return "whisper"

    @property
    def settings(self) -> WhisperSettings:
        return self._settings

    async def _transcribe(
        self,
        client: httpx.AsyncClient,
        settings: WhisperSettings,
        clip: AudioClip,
    ) -> str:
        files, data = build_form(settings, clip)

        logger.debug(
            f"Sending {len(clip)} bytes to {settings.endpoint} "
            f"(model={settings.model}, language={settings.language or 'auto'})"
        )
        # No Content-Type here: httpx sets the multipart boundary
        response = await client.post(
            settings.endpoint,
            headers={"Authorization": f"Bearer {settings.api_key.get_secret_value()}"},
            files=files,
            data=data,
        )

        if not response.is_success:
            details = read_error_body(response)
            status_text = response.reason_phrase or "Error"
            message = f"API request failed: {response.status_code} {status_text}. Details: {details}"
            logger.error(f"Whisper STT error: {message}")
            raise ApiError(message, self.name, status_code=response.status_code, title=API_FAILED_TITLE)

        result = response.json()
        if isinstance(result, dict) and "text" in result:
            text = result["text"]
            if isinstance(text, str):
                return text
            logger.warning(f"Whisper STT: non-string transcript in response: {result}")
            raise ResponseShapeError(
                "API Error: Transcription text is not a string.",
                self.name,
                status_code=response.status_code,
                title=API_ERROR_TITLE,
            )

        error = result.get("error") if isinstance(result, dict) else None
        if isinstance(error, dict) and error.get("message"):
            message = f"API Error: {error['message']}"
            error_cls = ApiError
        elif isinstance(result, str):
            message = f"API Error: {result}"
            error_cls = ApiError
        else:
            logger.warning(f"Whisper STT: unexpected API response structure: {result}")
            message = "API Error: Transcription text not found in response."
            error_cls = ResponseShapeError

        logger.error(f"Whisper STT API error: {message} Full response: {result}")
        raise error_cls(message, self.name, status_code=response.status_code, title=API_ERROR_TITLE)


__all__ = [
    "UPLOAD_FILENAME",
    "WhisperSTTProvider",
    "build_form",
    "read_error_body",
]
