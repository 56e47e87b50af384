"""
Provider Registry for sttbridge.

Centralized registry for accessing and swapping STT providers.
Call sites ask the registry for "the" provider; which one that is
comes from configuration.
"""

from __future__ import annotations

import logging
from typing import Any

from sttbridge.config.schemas import AppSettings, GeminiSettings, ProviderSettings, WhisperSettings

from .stt.base import BaseSTTProvider, STTProvider
from .stt.gemini import GeminiSTTProvider
from .stt.whisper import WhisperSTTProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[str, type[BaseSTTProvider]] = {
    "gemini": GeminiSTTProvider,
    "whisper": WhisperSTTProvider,
}


def create_provider(
    kind: str,
    settings: ProviderSettings | None = None,
    **kwargs: Any,
) -> BaseSTTProvider:
    """
    Create an STT provider by kind.

    Args:
        kind: "gemini" or "whisper"
        settings: Initial provider settings (defaults if None)
        **kwargs: Passed to the provider (notifier, http_client, timeout)

    Raises:
        ValueError: If kind is unknown
    """
    try:
        provider_class = PROVIDER_CLASSES[kind.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown STT provider kind '{kind}'. Available: {', '.join(sorted(PROVIDER_CLASSES))}"
        ) from None
    return provider_class(settings, **kwargs)


class ProviderRegistry:
    """
    Registry for managing and accessing STT providers.

    Providers are registered by name and can be swapped via configuration.
    There is no fallback: a failing provider fails the call.

    Usage:
        registry = ProviderRegistry()
        registry.register("gemini", GeminiSTTProvider(...))
        registry.register("whisper", WhisperSTTProvider(...))
        registry.set_default("whisper")

        stt = registry.get()  # Returns default STT provider
        stt_explicit = registry.get("gemini")  # Returns specific provider
    """

    def __init__(self) -> None:
        self._providers: dict[str, STTProvider] = {}
        self._default: str | None = None

    def _validate(self, provider: STTProvider) -> None:
        """Validate provider has the required interface."""
        if not hasattr(provider, "name"):
            raise ValueError("STT provider must have 'name' property")
        for method in ("get_settings_view", "apply_settings_from_view", "load_settings", "transcribe"):
            if not callable(getattr(provider, method, None)):
                raise ValueError(f"STT provider must have '{method}' method")

    def register(self, name: str, provider: STTProvider) -> None:
        """
        Register an STT provider.

        The first registered provider becomes the default.
        """
        self._validate(provider)
        self._providers[name] = provider
        if self._default is None:
            self._default = name
        logger.debug(f"Registered STT provider: {name}")

    def unregister(self, name: str) -> None:
        """Unregister an STT provider."""
        if name in self._providers:
            del self._providers[name]
            if self._default == name:
                self._default = next(iter(self._providers.keys()), None)
            logger.debug(f"Unregistered STT provider: {name}")

    def set_default(self, name: str) -> None:
        """Set the default STT provider."""
        if name not in self._providers:
            raise ValueError(f"STT provider '{name}' not registered")
        self._default = name

    @property
    def default(self) -> str | None:
        return self._default

    @property
    def names(self) -> list[str]:
        return list(self._providers.keys())

    def get(self, name: str | None = None) -> STTProvider:
        """
        Get an STT provider by name or return default.

        Raises:
            ValueError: If provider not found
        """
        provider_name = name or self._default
        if provider_name is None:
            raise ValueError("No STT provider registered")
        if provider_name not in self._providers:
            raise ValueError(f"STT provider '{provider_name}' not registered")
        return self._providers[provider_name]

    def clear(self) -> None:
        """Clear all registered providers."""
        self._providers.clear()
        self._default = None

    def __contains__(self, name: str) -> bool:
        return name in self._providers

    def __repr__(self) -> str:
        return f"ProviderRegistry(stt=[{', '.join(self._providers.keys())}], default={self._default!r})"


def build_registry(settings: AppSettings, **kwargs: Any) -> ProviderRegistry:
    """
    Build a registry with both providers seeded from application settings.

    Args:
        settings: Application settings (credentials, default provider, timeout)
        **kwargs: Passed to every provider (notifier, http_client)
    """
    kwargs.setdefault("timeout", settings.http_timeout)
    registry = ProviderRegistry()
    registry.register(
        "gemini",
        GeminiSTTProvider(
            GeminiSettings(api_key=settings.gemini_api_key, base_url=settings.gemini_base_url),
            **kwargs,
        ),
    )
    registry.register(
        "whisper",
        WhisperSTTProvider(
            WhisperSettings(api_key=settings.whisper_api_key, endpoint=settings.whisper_endpoint),
            **kwargs,
        ),
    )
    registry.set_default(settings.default_stt_provider)
    logger.info(f"STT providers ready: {registry.names} (default={registry.default})")
    return registry


# Global registry instance (can be replaced in tests)
_global_registry: ProviderRegistry | None = None


def get_registry() -> ProviderRegistry:
    """Get the global provider registry."""
    global _global_registry
    if _global_registry is None:
        _global_registry = ProviderRegistry()
    return _global_registry


def set_registry(registry: ProviderRegistry) -> None:
    """Set the global provider registry (for testing)."""
    global _global_registry
    _global_registry = registry


def reset_registry() -> None:
    """Reset the global provider registry."""
    global _global_registry
    _global_registry = None


__all__ = [
    "PROVIDER_CLASSES",
    "ProviderRegistry",
    "build_registry",
    "create_provider",
    "get_registry",
    "reset_registry",
    "set_registry",
]
