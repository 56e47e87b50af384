"""
STT (Speech-to-Text) Provider Protocol for sttbridge.

Defines the interface every speech transcription provider satisfies,
the settings-view description handed to the UI layer, and the shared
call flow (settings snapshot, HTTP client lifecycle, error reporting).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, ClassVar, Protocol, runtime_checkable

import httpx

from sttbridge.config.schemas import ProviderSettings
from sttbridge.notifications import ErrorNotifier, LoggingNotifier, Notification

from .errors import ConfigurationError, STTError, TransportError

logger = logging.getLogger(__name__)

WAV_MIME_TYPE = "audio/wav"

CONFIGURATION_ERROR_TITLE = "STT Configuration Error"


@dataclass(frozen=True)
class AudioClip:
    """
    Audio handed to a provider for one transcription call.

    Attributes:
        data: Encoded audio bytes (WAV unless stated otherwise)
        mime_type: MIME type of ``data``
    """

    data: bytes
    mime_type: str = WAV_MIME_TYPE

    @classmethod
    def coerce(cls, audio: AudioClip | bytes | bytearray) -> AudioClip:
        """Wrap raw bytes as a WAV clip; pass clips through."""
        if isinstance(audio, cls):
            return audio
        if isinstance(audio, (bytes, bytearray)):
            return cls(data=bytes(audio))
        raise TypeError(f"Expected AudioClip or bytes, got {type(audio).__name__}")

    def __len__(self) -> int:
        return len(self.data)


class FieldKind(str, Enum):
    """Input widget kind for a settings field."""

    TEXT = "text"
    PASSWORD = "password"
    TEXTAREA = "textarea"


@dataclass(frozen=True)
class SettingsField:
    """
    One editable field in a provider's settings form.

    Attributes:
        id: Stable widget identifier (e.g. "stt_gemini_api_key")
        label: Human-readable label
        setting: Settings attribute this field edits
        value: Current value shown in the widget
        kind: Widget kind
        placeholder: Hint shown when the field is empty
        rows: Visible rows for textarea fields
    """

    id: str
    label: str
    setting: str
    value: str = ""
    kind: FieldKind = FieldKind.TEXT
    placeholder: str = ""
    rows: int | None = None


@dataclass(frozen=True)
class SettingsView:
    """Declarative description of a provider's settings form."""

    provider: str
    fields: tuple[SettingsField, ...]

    def get(self, field_id: str) -> SettingsField:
        for f in self.fields:
            if f.id == field_id:
                return f
        raise KeyError(field_id)

    def values(self) -> dict[str, str]:
        """Current widget values keyed by field id."""
        return {f.id: f.value for f in self.fields}

    def with_value(self, field_id: str, value: str) -> SettingsView:
        """Return a copy with one field edited."""
        self.get(field_id)
        return replace(
            self,
            fields=tuple(replace(f, value=value) if f.id == field_id else f for f in self.fields),
        )

    def with_values(self, values: Mapping[str, str]) -> SettingsView:
        """Return a copy with several fields edited."""
        view = self
        for field_id, value in values.items():
            view = view.with_value(field_id, value)
        return view


@runtime_checkable
class STTProvider(Protocol):
    """
    Protocol for Speech-to-Text providers.

    Implementations must provide:
    - name: Provider identifier
    - get_settings_view(): Describe editable settings for the UI
    - apply_settings_from_view(): Install settings edited in the UI
    - load_settings(): Merge persisted settings over defaults
    - transcribe(): Convert audio to text

    Supported providers:
    - Gemini (generateContent with inline audio)
    - Whisper / OpenAI-compatible transcription endpoints
    """

    @property
    def name(self) -> str:
        """Provider name for logging and configuration."""
        ...

    def get_settings_view(self) -> SettingsView:
        ...

    def apply_settings_from_view(self, view: SettingsView) -> ProviderSettings:
        ...

    def load_settings(self, persisted: Mapping[str, Any] | None) -> SettingsView:
        ...

    async def transcribe(self, audio: AudioClip | bytes) -> str:
        """
        Transcribe audio to text.

        Args:
            audio: WAV audio, as an AudioClip or raw bytes

        Returns:
            Transcript text

        Raises:
            STTError: On any failure, after it has been reported to the user
        """
        ...


class BaseSTTProvider(ABC):
    """
    Base class for STT provider implementations.

    Subclasses declare their settings model, settings form and required
    settings, and implement ``_transcribe`` for their wire format.

    The settings value is immutable: UI edits and loads install a new
    value, and each ``transcribe`` call works on the value current when
    it started.
    """

    settings_class: ClassVar[type[ProviderSettings]]
    settings_fields: ClassVar[tuple[SettingsField, ...]] = ()
    # (attribute, label) pairs that must be non-empty before a request
    required_settings: ClassVar[tuple[tuple[str, str], ...]] = ()
    missing_setting_template: ClassVar[str] = "{label} is not set."
    error_title: ClassVar[str] = "STT Error"
    unknown_error_message: ClassVar[str] = "An unknown error occurred during STT processing."
    notification_options: ClassVar[dict[str, Any]] = {}

    def __init__(
        self,
        settings: ProviderSettings | None = None,
        *,
        notifier: ErrorNotifier | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize provider.

        Args:
            settings: Initial settings (defaults if omitted)
            notifier: Sink for user-visible errors (logs if omitted)
            http_client: Optional shared HTTP client (caller manages lifecycle).
                         If not provided, a fresh client is created per call.
            timeout: Timeout for per-call clients; None disables it
        """
        if settings is None:
            settings = self.settings_class()
        elif not isinstance(settings, self.settings_class):
            raise TypeError(
                f"{self.__class__.__name__} expects {self.settings_class.__name__}, "
                f"got {type(settings).__name__}"
            )
        self._settings = settings
        self._notifier = notifier or LoggingNotifier()
        self._shared_client = http_client
        self._timeout = timeout

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""

    @property
    def settings(self) -> ProviderSettings:
        return self._settings

    # ==================== Settings ====================

    def get_settings_view(self) -> SettingsView:
        """Describe the settings form, seeded with current values."""
        return SettingsView(
            provider=self.name,
            fields=tuple(
                replace(f, value=self._settings.secret(f.setting)) for f in self.settings_fields
            ),
        )

    def apply_settings_from_view(self, view: SettingsView) -> ProviderSettings:
        """
        Install the values edited in a settings view.

        Only in-memory settings change; persisting is up to the host
        (see ``export_settings``).
        """
        if view.provider != self.name:
            raise ValueError(f"Settings view for '{view.provider}' applied to '{self.name}'")
        known = self.settings_class.model_fields
        updates = {f.setting: f.value for f in view.fields if f.setting in known}
        self._settings = self.settings_class.model_validate({**self._settings.model_dump(), **updates})
        logger.debug(f"{self.name} settings changed: {self._settings!r}")
        return self._settings

    def load_settings(self, persisted: Mapping[str, Any] | None) -> SettingsView:
        """Merge persisted values over defaults and return the refreshed view."""
        if not persisted:
            logger.debug(f"Using default {self.name} STT settings")
        self._settings = self.settings_class.from_persisted(persisted)
        logger.debug(f"{self.name} STT settings loaded")
        return self.get_settings_view()

    def export_settings(self) -> dict[str, str]:
        """Current settings in the persisted mapping shape."""
        return self._settings.to_persisted()

    # ==================== Transcription ====================

    async def transcribe(self, audio: AudioClip | bytes) -> str:
        """
        Transcribe audio to text.

        Every failure is reported once to the notifier and raised as an
        STTError carrying the same message.
        """
        settings = self._settings
        try:
            clip = AudioClip.coerce(audio)
            self._check_settings(settings)
            async with self._http_client() as client:
                return await self._transcribe(client, settings, clip)
        except STTError as e:
            self._report(e)
            raise
        except Exception as e:
            logger.error(f"{self.name} transcription error: {e!r}", exc_info=True)
            error = TransportError(str(e) or self.unknown_error_message, self.name, title=self.error_title)
            self._report(error)
            raise error from e

    @abstractmethod
    async def _transcribe(
        self,
        client: httpx.AsyncClient,
        settings: ProviderSettings,
        clip: AudioClip,
    ) -> str:
        """Send one request and normalize the response."""

    def _check_settings(self, settings: ProviderSettings) -> None:
        for attr, label in self.required_settings:
            if not settings.secret(attr):
                raise ConfigurationError(
                    self.missing_setting_template.format(label=label),
                    self.name,
                    title=CONFIGURATION_ERROR_TITLE,
                )

    @asynccontextmanager
    async def _http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._shared_client is not None:
            # Caller-provided client, never closed here
            yield self._shared_client
            return
        # Per-call client follows 3xx redirects
        async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
            yield client

    def _report(self, error: STTError) -> None:
        notification = Notification(
            message=error.message,
            title=error.title or self.error_title,
            options=dict(self.notification_options),
        )
        try:
            self._notifier.notify_error(notification)
        except Exception:
            logger.warning(f"{self.name}: error notifier failed", exc_info=True)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


__all__ = [
    "AudioClip",
    "BaseSTTProvider",
    "CONFIGURATION_ERROR_TITLE",
    "FieldKind",
    "STTProvider",
    "SettingsField",
    "SettingsView",
    "WAV_MIME_TYPE",
]
