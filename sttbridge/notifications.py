"""
User-visible error notifications.

Providers report each failure once to an ErrorNotifier. The host UI
plugs in its own implementation (toasts, status bar, ...); the default
just logs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """
    A single user-facing error notification.

    Attributes:
        message: Human-readable error text
        title: Short heading (e.g. "STT Configuration Error")
        options: Display hints for the UI (timeouts, de-duplication)
    """

    message: str
    title: str = ""
    options: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class ErrorNotifier(Protocol):
    """Sink for user-visible error notifications."""

    def notify_error(self, notification: Notification) -> None:
        ...


class LoggingNotifier:
    """Notifier that writes notifications to the log."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def notify_error(self, notification: Notification) -> None:
        self._log.error(f"[{notification.title}] {notification.message}")


__all__ = [
    "ErrorNotifier",
    "LoggingNotifier",
    "Notification",
]
