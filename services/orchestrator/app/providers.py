"""Utilities for wiring provider configurations into the story pipeline."""

from __future__ import annotations

import os
from pathlib import Path

from storytime_providers import (
    DEFAULT_RETRY_POLICY,
    ProviderConfig,
    ProviderFactory,
    ProviderSettings,
    RetryPolicy,
    load_provider_config,
)
from storytime_providers.config import (
    IMAGE_PROVIDER_ENV_VAR,
    PROVIDER_ENV_VAR,
    SPEECH_PROVIDER_ENV_VAR,
)

from .cache import AudioCache
from .flows import StoryOrchestrator
from .illustration import IllustrationGenerator
from .narration import NarrationGenerator
from .storage import StoryStore
from .story import StoryTextGenerator

DEFAULT_AUDIO_DIR = "./storage/audio"
AUDIO_DIR_ENV_VAR = "STORYTIME_AUDIO_DIR"


def _mock_config() -> ProviderConfig:
    return ProviderConfig(name="mock", api_key="mock", model="mock", settings=ProviderSettings())


def _resolve(env_var: str, name: str | None) -> ProviderConfig:
    provider_name = name or os.getenv(env_var, "mock")
    if provider_name.lower() == "mock":
        return _mock_config()
    return load_provider_config(prefix=provider_name)


def resolve_text_config(name: str | None = None) -> ProviderConfig:
    return _resolve(PROVIDER_ENV_VAR, name)


def resolve_image_config(name: str | None = None) -> ProviderConfig:
    return _resolve(IMAGE_PROVIDER_ENV_VAR, name)


def resolve_speech_config(name: str | None = None) -> ProviderConfig:
    return _resolve(SPEECH_PROVIDER_ENV_VAR, name)


def resolve_audio_dir() -> Path:
    return Path(os.getenv(AUDIO_DIR_ENV_VAR, DEFAULT_AUDIO_DIR))


def build_orchestrator(
    store: StoryStore,
    audio_dir: str | Path | None = None,
    *,
    retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
) -> StoryOrchestrator:
    """Assemble the pipeline from environment-selected providers."""

    text_config = resolve_text_config()
    settings = text_config.settings
    text_generator = StoryTextGenerator(
        ProviderFactory.create(text_config),
        retry_policy,
        temperature=settings.temperature,
        top_p=settings.top_p if settings.top_p is not None else 0.95,
        top_k=settings.top_k if settings.top_k is not None else 40,
        max_output_tokens=settings.max_output_tokens or 2048,
    )
    illustration_generator = IllustrationGenerator(
        ProviderFactory.create_image(resolve_image_config()),
        retry_policy,
    )
    cache = AudioCache(audio_dir if audio_dir is not None else resolve_audio_dir())
    narration_generator = NarrationGenerator(
        ProviderFactory.create_speech(resolve_speech_config()),
        cache,
        retry_policy,
    )
    return StoryOrchestrator(store, text_generator, illustration_generator, narration_generator)


__all__ = [
    "build_orchestrator",
    "resolve_text_config",
    "resolve_image_config",
    "resolve_speech_config",
    "resolve_audio_dir",
    "DEFAULT_AUDIO_DIR",
]
