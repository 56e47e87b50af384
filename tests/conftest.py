"""
Pytest configuration and fixtures for sttbridge tests.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Add the repository root to path for imports
# This allows `from sttbridge.providers import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def sample_audio_bytes():
    """Sample audio bytes for testing."""
    return b"RIFF\x24\x00\x00\x00WAVEfmt fake audio data for testing"


@pytest.fixture
def notifier():
    """Notifier that records calls."""
    return MagicMock()


@pytest.fixture
def mock_client():
    """
    Factory for a mocked httpx client.

    ``mock_client(response)`` returns an AsyncMock whose ``post`` resolves
    to ``response``; pass an exception instance to make ``post`` raise it.
    """

    def _make(response):
        client = AsyncMock(spec=httpx.AsyncClient)
        if isinstance(response, BaseException):
            client.post = AsyncMock(side_effect=response)
        else:
            client.post = AsyncMock(return_value=response)
        return client

    return _make


@pytest.fixture
def transport_client():
    """
    Factory for a real AsyncClient backed by httpx.MockTransport.

    Returns ``(client, captured)`` where ``captured`` collects every
    request the client sends.
    """

    def _make(response: httpx.Response):
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return response

        return httpx.AsyncClient(transport=httpx.MockTransport(handler)), captured

    return _make
