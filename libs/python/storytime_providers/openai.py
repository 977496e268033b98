"""OpenAI providers: ChatGPT story text and DALL-E illustrations."""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

from openai import APIError, AsyncOpenAI

from .base import (
    ImageProvider,
    ImageRequest,
    ImageResponse,
    LLMProvider,
    ProviderRequest,
    ProviderResponse,
)
from .config import ProviderConfig
from .exceptions import ProviderResponseError, UpstreamError
from .pricing import estimate_cost, estimate_image_cost


class _OpenAIClientMixin:
    """Shared client construction and error translation."""

    api_label = "OpenAI"

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        self._client = AsyncOpenAI(api_key=config.api_key)

    async def _call(self, create, **params: Any) -> tuple[Any, float]:
        started = time.perf_counter()
        try:
            result = await create(**params)
        except APIError as err:
            raise UpstreamError(f"{self.api_label} API error: {err}") from err
        return result, (time.perf_counter() - started) * 1000


def _first(value: Optional[float], fallback: Optional[float]) -> Optional[float]:
    return value if value is not None else fallback


class OpenAIProvider(_OpenAIClientMixin, LLMProvider):
    name = "openai"

    def _chat_params(self, request: ProviderRequest) -> Dict[str, Any]:
        settings = self._config.settings
        messages = [{"role": "user", "content": request.prompt}]
        if request.system_prompt:
            messages.insert(0, {"role": "system", "content": request.system_prompt})

        params: Dict[str, Any] = {
            "model": self._config.model,
            "messages": messages,
            "temperature": _first(request.temperature, settings.temperature),
        }
        top_p = _first(request.top_p, settings.top_p)
        if top_p is not None:
            params["top_p"] = top_p
        # Chat completions has no top_k; it is dropped here.
        max_tokens = _first(request.max_output_tokens, settings.max_output_tokens)
        if max_tokens:
            params["max_tokens"] = max_tokens
        return params

    async def generate(self, request: ProviderRequest) -> ProviderResponse:
        completion, latency_ms = await self._call(
            self._client.chat.completions.create, **self._chat_params(request)
        )

        choices = getattr(completion, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        if message is None:
            raise ProviderResponseError("OpenAI response missing content")

        usage = getattr(completion, "usage", None)
        prompt_tokens = getattr(usage, "prompt_tokens", 0) or 0
        completion_tokens = getattr(usage, "completion_tokens", 0) or 0
        model = getattr(completion, "model", None) or self._config.model

        return ProviderResponse(
            text=message.content or "",
            raw=completion,
            model=model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            cost_usd=estimate_cost(
                provider=self._config.name,
                model=model,
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
            ),
            latency_ms=latency_ms,
        )


class OpenAIImageProvider(_OpenAIClientMixin, ImageProvider):
    """One DALL-E image per request, returned as a hosted URL."""

    name = "openai"
    api_label = "DALL-E"

    async def generate_image(self, request: ImageRequest) -> ImageResponse:
        result, latency_ms = await self._call(
            self._client.images.generate,
            model=self._config.model,
            prompt=request.prompt,
            n=1,
            size=request.size,
            quality=request.quality,
            style=request.style,
        )

        images = getattr(result, "data", None) or []
        url = getattr(images[0], "url", None) if images else None
        if not url:
            raise ProviderResponseError("Invalid response format from DALL-E API")

        return ImageResponse(
            url=url,
            raw=result,
            model=self._config.model,
            cost_usd=estimate_image_cost(self._config.name, self._config.model, request.size, request.quality),
            latency_ms=latency_ms,
        )
