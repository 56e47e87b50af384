"""
STT (Speech-to-Text) Providers for sttbridge.

Provides interchangeable speech-to-text implementations:
- GeminiSTTProvider: Google Gemini generateContent with inline audio
- WhisperSTTProvider: any OpenAI-Whisper-compatible transcription endpoint
"""

from .base import (
    AudioClip,
    BaseSTTProvider,
    FieldKind,
    SettingsField,
    SettingsView,
    STTProvider,
)
from .errors import (
    ApiError,
    ConfigurationError,
    ErrorKind,
    ResponseShapeError,
    STTError,
    TransportError,
)
from .gemini import GeminiSTTProvider
from .whisper import WhisperSTTProvider

__all__ = [
    # Protocol and base
    "AudioClip",
    "BaseSTTProvider",
    "FieldKind",
    "STTProvider",
    "SettingsField",
    "SettingsView",
    # Errors
    "ApiError",
    "ConfigurationError",
    "ErrorKind",
    "ResponseShapeError",
    "STTError",
    "TransportError",
    # Implementations
    "GeminiSTTProvider",
    "WhisperSTTProvider",
]
