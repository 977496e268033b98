"""Factory utilities for instantiating providers."""

from __future__ import annotations

from typing import Dict, Type

from .base import ImageProvider, LLMProvider, SpeechProvider
from .config import ProviderConfig, load_provider_config
from .exceptions import ProviderConfigError
from .gemini import GeminiProvider
from .google_tts import GoogleSpeechProvider
from .mock import MockImageProvider, MockProvider, MockSpeechProvider
from .openai import OpenAIImageProvider, OpenAIProvider

PROVIDER_MAP: Dict[str, Type[LLMProvider]] = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
    "mock": MockProvider,
}

IMAGE_PROVIDER_MAP: Dict[str, Type[ImageProvider]] = {
    "openai": OpenAIImageProvider,
    "mock": MockImageProvider,
}

SPEECH_PROVIDER_MAP: Dict[str, Type[SpeechProvider]] = {
    "google": GoogleSpeechProvider,
    "mock": MockSpeechProvider,
}


class ProviderFactory:
    """Factory for creating providers based on configuration."""

    @staticmethod
    def create(config: ProviderConfig | None = None) -> LLMProvider:
        if config is None:
            config = load_provider_config()
        provider_cls = PROVIDER_MAP.get(config.name.lower())
        if provider_cls is None:
            raise ProviderConfigError(f"Unknown text provider: {config.name}")
        return provider_cls(config)

    @staticmethod
    def create_image(config: ProviderConfig) -> ImageProvider:
        provider_cls = IMAGE_PROVIDER_MAP.get(config.name.lower())
        if provider_cls is None:
            raise ProviderConfigError(f"Unknown image provider: {config.name}")
        return provider_cls(config)

    @staticmethod
    def create_speech(config: ProviderConfig) -> SpeechProvider:
        provider_cls = SPEECH_PROVIDER_MAP.get(config.name.lower())
        if provider_cls is None:
            raise ProviderConfigError(f"Unknown speech provider: {config.name}")
        return provider_cls(config)
