"""
STT error taxonomy for sttbridge.

Every failed transcription raises exactly one STTError subclass. The
error's message is the same human-readable text shown to the user,
so callers can branch on the class (or ``kind``) instead of parsing
messages.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of STT failures."""

    CONFIGURATION = "configuration_error"
    TRANSPORT = "transport_error"
    API = "api_error"
    RESPONSE_SHAPE = "response_shape_error"


class STTError(Exception):
    """Base exception for speech-to-text provider errors."""

    kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        provider: str,
        *,
        status_code: int | None = None,
        title: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.title = title

    @property
    def message(self) -> str:
        return self.args[0]

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(provider={self.provider!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


class ConfigurationError(STTError):
    """A required setting is empty. Raised before any network activity."""

    kind = ErrorKind.CONFIGURATION


class TransportError(STTError):
    """Network failure, or a response body that could not be parsed at all."""

    kind = ErrorKind.TRANSPORT


class ApiError(STTError):
    """The service returned a non-success status or signaled an error in its body."""

    kind = ErrorKind.API


class ResponseShapeError(STTError):
    """A success response whose body does not match the expected schema."""

    kind = ErrorKind.RESPONSE_SHAPE


__all__ = [
    "ApiError",
    "ConfigurationError",
    "ErrorKind",
    "ResponseShapeError",
    "STTError",
    "TransportError",
]
