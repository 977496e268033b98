"""Configuration models and helpers for provider selection."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ProviderConfigError

PROVIDER_ENV_VAR = "LLM_PROVIDER"
IMAGE_PROVIDER_ENV_VAR = "IMAGE_PROVIDER"
SPEECH_PROVIDER_ENV_VAR = "TTS_PROVIDER"
DEFAULT_PROVIDER = "gemini"

# Providers that authenticate through ambient credentials instead of an API key,
# with the model reported when none is configured.
_KEYLESS_PROVIDERS = {"google": "google-cloud-tts"}


class ProviderSettings(BaseModel):
    """Per-call default parameters."""

    temperature: float = Field(0.7, ge=0, le=2)
    max_output_tokens: int | None = Field(None, ge=16)
    top_p: float | None = Field(None, ge=0, le=1)
    top_k: int | None = Field(None, ge=1)
    credentials_path: str | None = Field(
        None, description="Service account file for providers using Google Cloud credentials"
    )


class ProviderConfig(BaseModel):
    """Configuration for a single provider instance."""

    model_config = ConfigDict(frozen=True)

    name: str
    api_key: str
    model: str
    settings: ProviderSettings = Field(default_factory=ProviderSettings)


def load_provider_config(
    prefix: str | None = None,
    *,
    env_var: str = PROVIDER_ENV_VAR,
    default_provider: str = DEFAULT_PROVIDER,
) -> ProviderConfig:
    """Load configuration from environment variables.

    Args:
        prefix: Optional prefix for environment variables (default uses provider name).
        env_var: Variable naming the provider when ``prefix`` is omitted.
        default_provider: Provider used when ``env_var`` is unset.

    Environment variables used (assuming prefix "OPENAI"):
        OPENAI_API_KEY
        OPENAI_MODEL
        OPENAI_TEMPERATURE (optional)
        OPENAI_MAX_OUTPUT_TOKENS (optional)
        OPENAI_TOP_P (optional)
        OPENAI_TOP_K (optional)

    Google Cloud speech ("GOOGLE" prefix) needs neither an API key nor a model
    and reads ``GOOGLE_APPLICATION_CREDENTIALS`` for the service account file.

    Returns:
        ProviderConfig object populated from environment variables.

    Raises:
        ProviderConfigError: If required variables are missing or invalid.
    """

    provider_name = (prefix or os.getenv(env_var, default_provider)).upper()
    env_prefix = provider_name

    def read_env(key: str, default: Any | None = None) -> Any:
        return os.getenv(f"{env_prefix}_{key}", default)

    provider_key = provider_name.lower()
    keyless = provider_key in _KEYLESS_PROVIDERS
    api_key = read_env("API_KEY") or ("" if keyless else None)
    model = read_env("MODEL") or _KEYLESS_PROVIDERS.get(provider_key)
    missing = [f"{env_prefix}_{key}" for key, value in (("API_KEY", api_key), ("MODEL", model)) if value is None]
    if missing:
        raise ProviderConfigError(f"Provider '{provider_key}' is not configured; set {', '.join(missing)}")

    temperature_raw = read_env("TEMPERATURE", 0.7)
    try:
        temperature = float(temperature_raw)
    except ValueError as exc:
        raise ProviderConfigError(f"{env_prefix}_TEMPERATURE must be a number, got {temperature_raw!r}") from exc
    max_output_tokens = _parse_positive_int(read_env("MAX_OUTPUT_TOKENS"))
    top_k = _parse_positive_int(read_env("TOP_K"))

    top_p_raw = read_env("TOP_P", "")
    try:
        top_p = float(top_p_raw) if str(top_p_raw).strip() else None
    except ValueError as exc:
        raise ProviderConfigError(f"{env_prefix}_TOP_P must be a float between 0 and 1") from exc

    credentials_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS") if keyless else None

    try:
        settings = ProviderSettings(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            top_p=top_p,
            top_k=top_k,
            credentials_path=credentials_path or None,
        )
    except ValidationError as exc:
        raise ProviderConfigError(f"Invalid sampling settings for provider '{provider_key}': {exc}") from exc

    return ProviderConfig(name=provider_key, api_key=api_key, model=model, settings=settings)


def _parse_positive_int(raw: Any) -> int | None:
    if raw in (None, ""):
        return None
    try:
        parsed = int(str(raw).strip())
    except (TypeError, ValueError) as exc:
        raise ProviderConfigError(f"Expected a positive integer, got {raw!r}") from exc
    return parsed if parsed > 0 else None
