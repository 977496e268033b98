"""Static pricing tables and helpers for estimating provider cost."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping


@dataclass(frozen=True)
class _TokenPricing:
    """Per-model pricing expressed as USD per one million tokens."""

    input_per_million: float
    output_per_million: float


_OPENAI_PRICING: Mapping[str, _TokenPricing] = {
    "gpt-4o": _TokenPricing(input_per_million=2.5, output_per_million=10.0),
    "gpt-4o-mini": _TokenPricing(input_per_million=0.15, output_per_million=0.6),
}

_GEMINI_PRICING: Mapping[str, _TokenPricing] = {
    "gemini-1.5-flash": _TokenPricing(input_per_million=0.075, output_per_million=0.3),
    "gemini-2.5-flash": _TokenPricing(input_per_million=0.30, output_per_million=2.5),
    "gemini-2.5-pro": _TokenPricing(input_per_million=1.25, output_per_million=10.0),
}

_PROVIDER_PRICING: Dict[str, Mapping[str, _TokenPricing]] = {
    "openai": _OPENAI_PRICING,
    "gemini": _GEMINI_PRICING,
}

# USD per generated image, keyed by (model, size, quality).
_IMAGE_PRICING: Mapping[tuple[str, str, str], float] = {
    ("dall-e-3", "1024x1024", "standard"): 0.04,
    ("dall-e-3", "1024x1024", "hd"): 0.08,
    ("dall-e-3", "1024x1792", "standard"): 0.08,
    ("dall-e-3", "1792x1024", "standard"): 0.08,
    ("dall-e-2", "1024x1024", "standard"): 0.02,
}

# USD per one million synthesised characters, keyed by voice family.
_SPEECH_PRICING: Mapping[str, float] = {
    "standard": 4.0,
    "wavenet": 16.0,
    "neural2": 16.0,
    "journey": 30.0,
}


def estimate_cost(
    provider: str,
    model: str,
    prompt_tokens: int | float | None,
    completion_tokens: int | float | None,
) -> float | None:
    """Approximate cost in USD for a text provider response.

    Args:
        provider: Provider identifier ("openai", "gemini", "mock", etc.).
        model: Concrete model name, used to select the right pricing row.
        prompt_tokens: Number of prompt/input tokens billed for the request.
        completion_tokens: Number of completion/output tokens billed.

    Returns:
        Estimated USD cost, or ``None`` when pricing is unknown.
    """

    provider_key = (provider or "").lower()
    if provider_key == "mock":
        return 0.0

    model_key = (model or "").lower()
    table = _PROVIDER_PRICING.get(provider_key)
    if not table:
        return None

    pricing = table.get(model_key)
    if pricing is None:
        return None

    prompt_value = max(float(prompt_tokens or 0.0), 0.0)
    completion_value = max(float(completion_tokens or 0.0), 0.0)

    cost = (
        (prompt_value * pricing.input_per_million)
        + (completion_value * pricing.output_per_million)
    ) / 1_000_000.0

    # Normalise to 6 decimal places to avoid noisy floating point representations.
    return round(cost, 6)


def estimate_image_cost(provider: str, model: str, size: str, quality: str) -> float | None:
    """Approximate cost in USD for one generated image."""

    if (provider or "").lower() == "mock":
        return 0.0
    return _IMAGE_PRICING.get(((model or "").lower(), size, quality))


def estimate_speech_cost(provider: str, voice_name: str, characters: int) -> float | None:
    """Approximate cost in USD for synthesising ``characters`` with the given voice.

    Voice names follow the ``<lang>-<REGION>-<Family>-<Variant>`` convention,
    e.g. ``en-US-Wavenet-A``; the family selects the pricing row.
    """

    if (provider or "").lower() == "mock":
        return 0.0
    segments = (voice_name or "").split("-")
    if len(segments) < 3:
        return None
    rate = _SPEECH_PRICING.get(segments[2].lower())
    if rate is None:
        return None
    return round(max(characters, 0) * rate / 1_000_000.0, 6)


__all__ = ["estimate_cost", "estimate_image_cost", "estimate_speech_cost"]
