"""Custom exceptions used by provider adapters."""

from __future__ import annotations


class ProviderError(RuntimeError):
    """Base error raised for provider failures."""


class ProviderConfigError(ProviderError):
    """Raised when configuration is missing or invalid."""


class UpstreamError(ProviderError):
    """Raised when an upstream generative service call fails."""


class ProviderResponseError(UpstreamError):
    """Raised when a provider returns an unusable response."""


class FilesystemError(ProviderError):
    """Raised when generated artifacts cannot be written to local storage."""
