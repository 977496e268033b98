"""Tests for the narration adapter and its on-disk audio cache."""

from pathlib import Path

import pytest

from storytime_providers import (
    FilesystemError,
    ProviderResponseError,
    RetryPolicy,
    SpeechProvider,
    SpeechRequest,
    SpeechResponse,
)

from services.orchestrator.app.cache import AudioCache
from services.orchestrator.app.narration import NarrationGenerator, language_code_from_voice


pytestmark = pytest.mark.anyio("asyncio")


async def _no_sleep(delay: float) -> None:
    return None


NO_WAIT = RetryPolicy(sleep=_no_sleep)


class _CountingSpeechProvider(SpeechProvider):
    name = "stub"

    def __init__(self, audio: bytes = b"ID3-audio") -> None:
        self.audio = audio
        self.requests: list[SpeechRequest] = []

    async def synthesize(self, request: SpeechRequest) -> SpeechResponse:
        self.requests.append(request)
        return SpeechResponse(audio_content=self.audio, raw={}, model="stub", characters=len(request.text))


def test_cache_key_and_paths(tmp_path: Path) -> None:
    cache = AudioCache(tmp_path)
    key = cache.key("Goodnight moon", "en-US-Standard-A")
    assert key == AudioCache.key("Goodnight moon", "en-US-Standard-A")
    assert key != AudioCache.key("Goodnight moon", "tr-TR-Standard-A")
    assert cache.path(key) == tmp_path / f"{key}.mp3"
    assert cache.public_path(key) == f"/audio/{key}.mp3"


def test_language_code_from_voice() -> None:
    assert language_code_from_voice("tr-TR-Standard-A") == "tr-TR"
    assert language_code_from_voice("en-US-Wavenet-D") == "en-US"


async def test_second_request_is_cache_hit(tmp_path: Path) -> None:
    provider = _CountingSpeechProvider()
    generator = NarrationGenerator(provider, AudioCache(tmp_path / "audio"), NO_WAIT)

    first = await generator.generate("The stars hum softly.", "en-US-Standard-A")
    second = await generator.generate("The stars hum softly.", "en-US-Standard-A")

    assert first == second
    assert first.startswith("/audio/") and first.endswith(".mp3")
    assert len(provider.requests) == 1
    assert provider.requests[0].language_code == "en-US"
    key = AudioCache.key("The stars hum softly.", "en-US-Standard-A")
    assert (tmp_path / "audio" / f"{key}.mp3").read_bytes() == b"ID3-audio"
    assert not (tmp_path / "audio" / ".test-write-permission").exists()


async def test_zero_byte_file_is_regenerated(tmp_path: Path) -> None:
    cache = AudioCache(tmp_path)
    key = cache.key("Sleep tight.", "tr-TR-Standard-A")
    cache.path(key).write_bytes(b"")
    provider = _CountingSpeechProvider()

    path = await NarrationGenerator(provider, cache, NO_WAIT).generate("Sleep tight.", "tr-TR-Standard-A")

    assert path == cache.public_path(key)
    assert len(provider.requests) == 1
    assert cache.path(key).stat().st_size > 0


async def test_missing_audio_raises_after_retries(tmp_path: Path) -> None:
    provider = _CountingSpeechProvider(audio=b"")
    generator = NarrationGenerator(provider, AudioCache(tmp_path), NO_WAIT)

    with pytest.raises(ProviderResponseError):
        await generator.generate("Hush now.", "en-US-Standard-A")
    assert len(provider.requests) == 3


async def test_unwritable_directory_raises_filesystem_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("occupied")
    provider = _CountingSpeechProvider()
    generator = NarrationGenerator(provider, AudioCache(blocker / "audio"), NO_WAIT)

    with pytest.raises(FilesystemError):
        await generator.generate("Hush now.", "en-US-Standard-A")
    assert provider.requests == []
