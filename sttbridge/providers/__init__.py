"""
sttbridge Providers

Swappable speech-to-text providers.

Provider Types:
- STT: GeminiSTTProvider, WhisperSTTProvider

Features:
- ProviderRegistry for centralized management
- Provider validation on registration
"""

from .registry import (
    PROVIDER_CLASSES,
    ProviderRegistry,
    build_registry,
    create_provider,
    get_registry,
    reset_registry,
    set_registry,
)

# STT Providers
from .stt import (
    ApiError,
    AudioClip,
    BaseSTTProvider,
    ConfigurationError,
    ErrorKind,
    FieldKind,
    GeminiSTTProvider,
    ResponseShapeError,
    SettingsField,
    SettingsView,
    STTError,
    STTProvider,
    TransportError,
    WhisperSTTProvider,
)

__all__ = [
    # Registry
    "PROVIDER_CLASSES",
    "ProviderRegistry",
    "build_registry",
    "create_provider",
    "get_registry",
    "reset_registry",
    "set_registry",
    # STT - Protocol and Base
    "AudioClip",
    "BaseSTTProvider",
    "FieldKind",
    "STTProvider",
    "SettingsField",
    "SettingsView",
    # STT - Errors
    "ApiError",
    "ConfigurationError",
    "ErrorKind",
    "ResponseShapeError",
    "STTError",
    "TransportError",
    # STT - Implementations
    "GeminiSTTProvider",
    "WhisperSTTProvider",
]
