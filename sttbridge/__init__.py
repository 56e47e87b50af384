"""
sttbridge - Swappable speech-to-text providers for chat applications.

sttbridge wraps two hosted transcription APIs behind one provider
interface, so the host application can switch between them without
touching call sites:

- **Gemini**: ``generateContent`` with the audio sent inline
- **Whisper-compatible**: multipart upload to any OpenAI-style
  ``/audio/transcriptions`` endpoint

Each provider describes its settings form, loads persisted settings,
and transcribes a WAV clip. Failures are reported to a notification
sink and raised as a small set of typed errors.

Quick Start:
    >>> from sttbridge import GeminiSTTProvider, GeminiSettings
    >>>
    >>> provider = GeminiSTTProvider(GeminiSettings(api_key="..."))
    >>> text = await provider.transcribe(wav_bytes)
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Core exports for convenient imports
from sttbridge.config import AppSettings, GeminiSettings, WhisperSettings
from sttbridge.notifications import ErrorNotifier, LoggingNotifier, Notification
from sttbridge.providers import (
    AudioClip,
    GeminiSTTProvider,
    ProviderRegistry,
    STTError,
    STTProvider,
    WhisperSTTProvider,
    create_provider,
)

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Config
    "AppSettings",
    "GeminiSettings",
    "WhisperSettings",
    # Notifications
    "ErrorNotifier",
    "LoggingNotifier",
    "Notification",
    # Providers
    "AudioClip",
    "GeminiSTTProvider",
    "ProviderRegistry",
    "STTError",
    "STTProvider",
    "WhisperSTTProvider",
    "create_provider",
]
