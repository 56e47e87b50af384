"""
Transcribe File Example

This example demonstrates the provider lifecycle a chat host goes through:
1. Build providers from environment settings
2. Load persisted settings and render the settings form
3. Apply an edit made in the form
4. Transcribe a WAV file with the selected provider

Run: python examples/01-transcribe-file/main.py recording.wav

Environment:
    STTBRIDGE_DEFAULT_STT_PROVIDER  gemini | whisper
    STTBRIDGE_GEMINI_API_KEY        Google AI API key
    STTBRIDGE_WHISPER_API_KEY       OpenAI (or compatible) API key
    STTBRIDGE_WHISPER_ENDPOINT      Transcription endpoint URL
"""

import asyncio
import sys
from pathlib import Path

from sttbridge import STTError
from sttbridge.config import configure_logging, get_settings
from sttbridge.providers import build_registry


async def main(path: str) -> int:
    settings = get_settings()
    configure_logging(settings)

    registry = build_registry(settings)
    provider = registry.get()
    print(f"Provider: {provider.name} (available: {', '.join(registry.names)})")

    # Settings store hands back whatever was saved last time
    view = provider.load_settings(provider.export_settings())
    for field in view.fields:
        shown = "********" if field.kind == "password" and field.value else field.value
        print(f"  {field.label}: {shown[:60]}")

    if provider.name == "whisper":
        provider.apply_settings_from_view(view.with_value("stt_openai_compatible_language", "en"))

    try:
        text = await provider.transcribe(Path(path).read_bytes())
    except STTError as e:
        print(f"Failed ({e.kind.value}): {e}")
        return 1

    print(f"Transcript: {text!r}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1])))
