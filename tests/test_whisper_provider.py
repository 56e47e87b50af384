"""
Tests for the Whisper (OpenAI-compatible) STT provider.
"""

import re

import httpx
import pytest

from sttbridge.config.schemas import WhisperSettings
from sttbridge.providers.stt import (
    ApiError,
    ConfigurationError,
    ResponseShapeError,
    STTError,
    TransportError,
    WhisperSTTProvider,
)
from sttbridge.providers.stt.base import AudioClip
from sttbridge.providers.stt.whisper import NO_ERROR_DETAILS, build_form, read_error_body


def _settings(**overrides):
    values = {"api_key": "sk-test", "endpoint": "https://stt.example.com/v1/audio/transcriptions"}
    values.update(overrides)
    return WhisperSettings(**values)


class TestForm:
    """Tests for multipart form construction."""

    def test_form_without_language(self):
        files, data = build_form(_settings(), AudioClip(b"wav"))

        assert files == {"file": ("record.wav", b"wav", "audio/wav")}
        assert data == {"model": "whisper-1"}

    def test_form_with_language(self):
        _, data = build_form(_settings(language="ja"), AudioClip(b"wav"))

        assert data == {"model": "whisper-1", "language": "ja"}

    def test_read_error_body_placeholder_on_failure(self):
        class Unreadable:
            @property
            def text(self):
                raise httpx.ResponseNotRead()

        assert read_error_body(Unreadable()) == NO_ERROR_DETAILS


class TestConfiguration:
    """Missing settings fail before any network call."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field,message",
        [
            ("api_key", "API Key is not set for Whisper (OpenAI Compatible)."),
            ("endpoint", "Endpoint URL is not set for Whisper (OpenAI Compatible)."),
            ("model", "Model is not set for Whisper (OpenAI Compatible)."),
        ],
    )
    async def test_missing_setting_raises_before_request(
        self, field, message, mock_client, notifier, sample_audio_bytes
    ):
        client = mock_client(httpx.Response(200, json={"text": "hi"}))
        provider = WhisperSTTProvider(_settings(**{field: ""}), notifier=notifier, http_client=client)

        with pytest.raises(ConfigurationError, match=re.escape(message)):
            await provider.transcribe(sample_audio_bytes)

        assert client.post.await_count == 0
        notification = notifier.notify_error.call_args.args[0]
        assert notification.title == "STT Configuration Error"
        assert notification.options["prevent_duplicates"] is True

    @pytest.mark.asyncio
    async def test_language_is_optional(self, mock_client, sample_audio_bytes):
        client = mock_client(httpx.Response(200, json={"text": "hi"}))
        provider = WhisperSTTProvider(_settings(language=""), http_client=client)

        assert await provider.transcribe(sample_audio_bytes) == "hi"


class TestRequest:
    """Tests for the outgoing request."""

    @pytest.mark.asyncio
    async def test_request_wire_format(self, transport_client, sample_audio_bytes):
        client, captured = transport_client(httpx.Response(200, json={"text": "hello"}))
        provider = WhisperSTTProvider(_settings(model="large-v3"), http_client=client)

        await provider.transcribe(sample_audio_bytes)

        assert len(captured) == 1
        request = captured[0]
        assert request.method == "POST"
        assert str(request.url) == "https://stt.example.com/v1/audio/transcriptions"
        assert request.headers["authorization"] == "Bearer sk-test"
        assert request.headers["content-type"].startswith("multipart/form-data; boundary=")

        content = request.content
        assert b'name="file"; filename="record.wav"' in content
        assert sample_audio_bytes in content
        assert b'name="model"' in content
        assert b"large-v3" in content
        assert b'name="language"' not in content
        await client.aclose()

    @pytest.mark.asyncio
    async def test_language_field_sent_when_configured(self, transport_client, sample_audio_bytes):
        client, captured = transport_client(httpx.Response(200, json={"text": "hello"}))
        provider = WhisperSTTProvider(_settings(language="en"), http_client=client)

        await provider.transcribe(sample_audio_bytes)

        assert b'name="language"' in captured[0].content
        await client.aclose()

    @pytest.mark.asyncio
    async def test_per_call_client_follows_redirect(self, monkeypatch, sample_audio_bytes):
        """A 307 from the endpoint is followed with the same POST."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.path == "/old":
                return httpx.Response(307, headers={"Location": "https://stt.example.com/new"})
            return httpx.Response(200, json={"text": "hello"})

        real_client = httpx.AsyncClient
        monkeypatch.setattr(
            httpx,
            "AsyncClient",
            lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
        )
        provider = WhisperSTTProvider(_settings(endpoint="https://stt.example.com/old"))

        assert await provider.transcribe(sample_audio_bytes) == "hello"
        assert [r.url.path for r in requests] == ["/old", "/new"]
        assert requests[1].method == "POST"
        assert requests[1].headers["authorization"] == "Bearer sk-test"
        assert sample_audio_bytes in requests[1].content

    @pytest.mark.asyncio
    async def test_no_explicit_content_type(self, mock_client, sample_audio_bytes):
        client = mock_client(httpx.Response(200, json={"text": "hello"}))
        provider = WhisperSTTProvider(_settings(), http_client=client)

        await provider.transcribe(sample_audio_bytes)

        headers = client.post.call_args.kwargs["headers"]
        assert headers == {"Authorization": "Bearer sk-test"}


class TestResponse:
    """Tests for response handling."""

    @pytest.mark.asyncio
    async def test_text_returned_verbatim(self, mock_client, notifier, sample_audio_bytes):
        client = mock_client(httpx.Response(200, json={"text": "  spaced out  "}))
        provider = WhisperSTTProvider(_settings(), notifier=notifier, http_client=client)

        assert await provider.transcribe(sample_audio_bytes) == "  spaced out  "
        notifier.notify_error.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_text_is_success(self, mock_client, notifier, sample_audio_bytes):
        client = mock_client(httpx.Response(200, json={"text": ""}))
        provider = WhisperSTTProvider(_settings(), notifier=notifier, http_client=client)

        assert await provider.transcribe(sample_audio_bytes) == ""
        notifier.notify_error.assert_not_called()

    @pytest.mark.asyncio
    async def test_error_body_without_text(self, mock_client, notifier, sample_audio_bytes):
        client = mock_client(httpx.Response(200, json={"error": {"message": "bad audio"}}))
        provider = WhisperSTTProvider(_settings(), notifier=notifier, http_client=client)

        with pytest.raises(ApiError) as exc_info:
            await provider.transcribe(sample_audio_bytes)

        assert "bad audio" in str(exc_info.value)
        notification = notifier.notify_error.call_args.args[0]
        assert notification.title == "STT API Error (Whisper OpenAI Compatible)"
        assert notifier.notify_error.call_count == 1

    @pytest.mark.asyncio
    async def test_plain_string_body(self, mock_client, sample_audio_bytes):
        client = mock_client(httpx.Response(200, json="quota exceeded"))
        provider = WhisperSTTProvider(_settings(), http_client=client)

        with pytest.raises(ApiError, match="API Error: quota exceeded"):
            await provider.transcribe(sample_audio_bytes)

    @pytest.mark.asyncio
    async def test_unexpected_body_is_shape_error(self, mock_client, sample_audio_bytes):
        client = mock_client(httpx.Response(200, json={"segments": []}))
        provider = WhisperSTTProvider(_settings(), http_client=client)

        with pytest.raises(ResponseShapeError, match="Transcription text not found"):
            await provider.transcribe(sample_audio_bytes)

    @pytest.mark.asyncio
    async def test_non_string_text_is_shape_error(self, mock_client, sample_audio_bytes):
        client = mock_client(httpx.Response(200, json={"text": None}))
        provider = WhisperSTTProvider(_settings(), http_client=client)

        with pytest.raises(ResponseShapeError):
            await provider.transcribe(sample_audio_bytes)

    @pytest.mark.asyncio
    async def test_http_error_includes_status_and_body(self, mock_client, notifier, sample_audio_bytes):
        client = mock_client(httpx.Response(401, text='{"error": "invalid key"}'))
        provider = WhisperSTTProvider(_settings(), notifier=notifier, http_client=client)

        with pytest.raises(ApiError) as exc_info:
            await provider.transcribe(sample_audio_bytes)

        error = exc_info.value
        assert str(error) == 'API request failed: 401 Unauthorized. Details: {"error": "invalid key"}'
        assert error.status_code == 401
        notification = notifier.notify_error.call_args.args[0]
        assert notification.title == "STT Generation Failed (Whisper OpenAI Compatible)"
        assert notification.options == {
            "timeout_ms": 10000,
            "extended_timeout_ms": 20000,
            "prevent_duplicates": True,
        }

    @pytest.mark.asyncio
    async def test_network_error_is_normalized(self, mock_client, notifier, sample_audio_bytes):
        original = httpx.ConnectError("name resolution failed")
        provider = WhisperSTTProvider(_settings(), notifier=notifier, http_client=mock_client(original))

        with pytest.raises(STTError) as exc_info:
            await provider.transcribe(sample_audio_bytes)

        error = exc_info.value
        assert type(error) is TransportError
        assert str(error) == "name resolution failed"
        assert error.__cause__ is original
        notification = notifier.notify_error.call_args.args[0]
        assert notification.title == "STT Request Error (Whisper OpenAI Compatible)"

    @pytest.mark.asyncio
    async def test_invalid_json_is_transport_error(self, mock_client, sample_audio_bytes):
        client = mock_client(httpx.Response(200, content=b"plain text transcript"))
        provider = WhisperSTTProvider(_settings(), http_client=client)

        with pytest.raises(TransportError):
            await provider.transcribe(sample_audio_bytes)
