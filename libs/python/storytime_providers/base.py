"""Core interfaces and dataclasses for provider interactions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, MutableMapping


@dataclass(slots=True)
class ProviderRequest:
    """Normalized text-generation request passed to providers."""

    prompt: str
    system_prompt: str | None = None
    temperature: float | None = None
    max_output_tokens: int | None = None
    top_p: float | None = None
    top_k: int | None = None
    metadata: MutableMapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ProviderResponse:
    """Standard response returned by text providers."""

    text: str
    raw: Any
    model: str
    prompt_tokens: int
    completion_tokens: int
    cost_usd: float | None = None
    latency_ms: float | None = None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(slots=True)
class ImageRequest:
    """Single illustration request."""

    prompt: str
    size: str = "1024x1024"
    quality: str = "standard"
    style: str = "vivid"
    metadata: MutableMapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ImageResponse:
    url: str
    raw: Any
    model: str
    cost_usd: float | None = None
    latency_ms: float | None = None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(slots=True)
class SpeechRequest:
    """Narration request for a single block of text."""

    text: str
    voice_name: str
    language_code: str
    audio_encoding: str = "MP3"
    metadata: MutableMapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class SpeechResponse:
    audio_content: bytes
    raw: Any
    model: str
    characters: int = 0
    cost_usd: float | None = None
    latency_ms: float | None = None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class LLMProvider(ABC):
    """Abstract base class implemented by concrete text providers."""

    name: str

    @abstractmethod
    async def generate(self, request: ProviderRequest) -> ProviderResponse:
        """Generate story text for the provided prompt."""


class ImageProvider(ABC):
    """Abstract base class implemented by illustration providers."""

    name: str

    @abstractmethod
    async def generate_image(self, request: ImageRequest) -> ImageResponse:
        """Generate one image and return a reference to it."""


class SpeechProvider(ABC):
    """Abstract base class implemented by speech synthesis providers."""

    name: str

    @abstractmethod
    async def synthesize(self, request: SpeechRequest) -> SpeechResponse:
        """Synthesize narration audio for the request text."""
