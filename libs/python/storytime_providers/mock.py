"""Deterministic mock providers for tests and offline development."""

from __future__ import annotations

import hashlib

from .base import (
    ImageProvider,
    ImageRequest,
    ImageResponse,
    LLMProvider,
    ProviderRequest,
    ProviderResponse,
    SpeechProvider,
    SpeechRequest,
    SpeechResponse,
)
from .config import ProviderConfig, ProviderSettings

DEFAULT_TEXT = (
    "Once upon a time a little dreamer found a quiet meadow under the silver moon. "
    "The stars hummed a gentle song, the grass swayed softly, and every friend in the "
    "meadow whispered goodnight before curling up to sleep."
)
MOCK_IMAGE_BASE_URL = "https://mock.storytime.local/images"
MOCK_AUDIO_HEADER = b"ID3MOCK"


def _mock_config(config: ProviderConfig | None) -> ProviderConfig:
    if config is not None:
        return config
    settings = ProviderSettings(temperature=0.1)
    return ProviderConfig(name="mock", api_key="mock", model="mock", settings=settings)


class MockProvider(LLMProvider):
    name = "mock"

    def __init__(self, config: ProviderConfig | None = None) -> None:
        self._config = _mock_config(config)

    async def generate(self, request: ProviderRequest) -> ProviderResponse:
        target = request.metadata.get("target_word_count")
        words = DEFAULT_TEXT.split()
        if isinstance(target, int) and target > 0:
            # Repeat the canned story until the requested length is reached.
            words = [words[index % len(words)] for index in range(target)]
        text = " ".join(words)
        return ProviderResponse(
            text=text,
            raw={"mock": True},
            model="mock",
            prompt_tokens=len(request.prompt.split()),
            completion_tokens=len(words),
            cost_usd=0.0,
            latency_ms=1.0,
        )


class MockImageProvider(ImageProvider):
    name = "mock"

    def __init__(self, config: ProviderConfig | None = None) -> None:
        self._config = _mock_config(config)

    async def generate_image(self, request: ImageRequest) -> ImageResponse:
        digest = hashlib.sha256(request.prompt.encode("utf-8")).hexdigest()[:16]
        return ImageResponse(
            url=f"{MOCK_IMAGE_BASE_URL}/{digest}.png",
            raw={"mock": True},
            model="mock",
            cost_usd=0.0,
            latency_ms=1.0,
        )


class MockSpeechProvider(SpeechProvider):
    name = "mock"

    def __init__(self, config: ProviderConfig | None = None) -> None:
        self._config = _mock_config(config)

    async def synthesize(self, request: SpeechRequest) -> SpeechResponse:
        payload = MOCK_AUDIO_HEADER + f"{request.voice_name}:{request.text}".encode("utf-8")
        return SpeechResponse(
            audio_content=payload,
            raw={"mock": True},
            model="mock",
            characters=len(request.text),
            cost_usd=0.0,
            latency_ms=1.0,
        )
