"""
Gemini STT Provider for sttbridge.

Uses Google's Gemini ``generateContent`` REST endpoint with the audio
sent inline as base64, next to a transcription prompt.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any

import httpx

from sttbridge.config.schemas import GeminiSettings

from .base import WAV_MIME_TYPE, AudioClip, BaseSTTProvider, FieldKind, SettingsField
from .errors import ApiError, ResponseShapeError

logger = logging.getLogger(__name__)

GENERATE_CONTENT_PATH = "/v1beta/models/{model}:generateContent"

API_ERROR_TITLE = "STT Generation Failed (Gemini)"
ERROR_TITLE = "STT Error (Gemini)"

# Request bodies are logged truncated to this many characters
DEBUG_BODY_LIMIT = 500


def encode_audio(data: bytes) -> str:
    """
    Base64-encode audio for an ``inline_data`` part.

    Input that is already a ``data:<mime>;base64,<payload>`` URL is
    reduced to its payload.
    """
    if data.startswith(b"data:") and b"," in data:
        return data.split(b",", 1)[1].decode("ascii")
    return base64.b64encode(data).decode("ascii")


def build_request_body(prompt: str, audio_b64: str) -> dict[str, Any]:
    """One content entry: the prompt, then the inline audio."""
    return {
        "contents": [
            {
                "parts": [
                    {"text": prompt},
                    {
                        "inline_data": {
                            "mime_type": WAV_MIME_TYPE,
                            "data": audio_b64,
                        }
                    },
                ]
            }
        ],
    }


def extract_error_detail(body: str) -> str:
    """Return ``error.message`` from a JSON error body, else the body verbatim."""
    try:
        parsed = json.loads(body)
    except ValueError:
        return body
    if isinstance(parsed, dict):
        error = parsed.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
            return error["message"]
    return body


def extract_transcript(result: Any) -> str | None:
    """Return ``candidates[0].content.parts[0].text`` if present and a string."""
    try:
        text = result["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class GeminiSTTProvider(BaseSTTProvider):
    """
    Gemini-based Speech-to-Text provider.

    Sends a single ``generateContent`` request per clip:
    - prompt text part first, inline WAV audio part second
    - API key passed as the ``key`` query parameter
    - transcript read from the first candidate's first part, trimmed

    Usage:
        provider = GeminiSTTProvider(GeminiSettings(api_key="..."))
        text = await provider.transcribe(wav_bytes)
    """

    settings_class = GeminiSettings
    settings_fields = (
        SettingsField(id="stt_gemini_api_key", label="API Key", setting="api_key", kind=FieldKind.PASSWORD),
        SettingsField(id="stt_gemini_base_url", label="Base URL", setting="base_url"),
        SettingsField(id="stt_gemini_model_name", label="Model Name", setting="model_name"),
        SettingsField(
            id="stt_gemini_prompt",
            label="Prompt",
            setting="prompt",
            kind=FieldKind.TEXTAREA,
            rows=3,
        ),
    )
    required_settings = (
        ("api_key", "API Key"),
        ("base_url", "Base URL"),
        ("model_name", "Model Name"),
    )
    missing_setting_template = "{label} is not set for Gemini STT."
    error_title = ERROR_TITLE
    unknown_error_message = "An unknown error occurred with Gemini STT."

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def settings(self) -> GeminiSettings:
        return self._settings

    @staticmethod
    def build_url(settings: GeminiSettings) -> str:
        """Endpoint URL without the key query parameter."""
        base = settings.base_url.rstrip("/")
        return base + GENERATE_CONTENT_PATH.format(model=settings.model_name)

    async def _transcribe(
        self,
        client: httpx.AsyncClient,
        settings: GeminiSettings,
        clip: AudioClip,
    ) -> str:
        url = self.build_url(settings)
        body = build_request_body(settings.prompt, encode_audio(clip.data))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Sending {len(clip)} bytes to Gemini: {url} "
                f"{json.dumps(body)[:DEBUG_BODY_LIMIT]}..."
            )

        response = await client.post(
            url,
            params={"key": settings.api_key.get_secret_value()},
            headers={"Content-Type": "application/json"},
            content=json.dumps(body),
        )

        if not response.is_success:
            detail = extract_error_detail(response.text)
            raise ApiError(
                f"Gemini API Error: {response.status_code} {response.reason_phrase}. Details: {detail}",
                self.name,
                status_code=response.status_code,
                title=API_ERROR_TITLE,
            )

        result = response.json()
        logger.debug(f"Gemini API response: {result}")

        text = extract_transcript(result)
        if text is None:
            logger.error(f"Unexpected response structure from Gemini API: {result}")
            raise ResponseShapeError(
                "Failed to parse transcription from Gemini API response.",
                self.name,
                status_code=response.status_code,
                title=ERROR_TITLE,
            )
        return text.strip()


__all__ = [
    "GENERATE_CONTENT_PATH",
    "GeminiSTTProvider",
    "build_request_body",
    "encode_audio",
    "extract_error_detail",
    "extract_transcript",
]
