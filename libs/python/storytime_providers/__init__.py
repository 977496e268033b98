"""Unified provider abstraction for story text, illustration and narration services."""

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
from .config import ProviderConfig, ProviderSettings, load_provider_config
from .exceptions import (
    FilesystemError,
    ProviderConfigError,
    ProviderError,
    ProviderResponseError,
    UpstreamError,
)
from .factory import ProviderFactory
from .mock import MockImageProvider, MockProvider, MockSpeechProvider
from .retry import DEFAULT_RETRY_POLICY, RetryPolicy

__all__ = [
    "LLMProvider",
    "ImageProvider",
    "SpeechProvider",
    "ProviderRequest",
    "ProviderResponse",
    "ImageRequest",
    "ImageResponse",
    "SpeechRequest",
    "SpeechResponse",
    "ProviderConfig",
    "ProviderSettings",
    "load_provider_config",
    "ProviderFactory",
    "MockProvider",
    "MockImageProvider",
    "MockSpeechProvider",
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "ProviderError",
    "ProviderConfigError",
    "UpstreamError",
    "ProviderResponseError",
    "FilesystemError",
]
