"""Google Gemini provider implementation."""

from __future__ import annotations

import time
from typing import Any, Dict

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .base import LLMProvider, ProviderRequest, ProviderResponse
from .config import ProviderConfig
from .exceptions import ProviderResponseError, UpstreamError
from .pricing import estimate_cost

_SAFETY_CATEGORIES = (
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
)


class GeminiProvider(LLMProvider):
    name = "gemini"

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        self._client = genai.Client(api_key=config.api_key)

    async def generate(self, request: ProviderRequest) -> ProviderResponse:
        settings = self._config.settings
        temperature = request.temperature if request.temperature is not None else settings.temperature

        generation_config: Dict[str, Any] = {
            "temperature": temperature,
            "safety_settings": [
                types.SafetySetting(category=category, threshold=types.HarmBlockThreshold.BLOCK_ONLY_HIGH)
                for category in _SAFETY_CATEGORIES
            ],
        }

        if request.system_prompt:
            generation_config["system_instruction"] = request.system_prompt

        top_p = request.top_p if request.top_p is not None else settings.top_p
        if top_p is not None:
            generation_config["top_p"] = top_p

        top_k = request.top_k if request.top_k is not None else settings.top_k
        if top_k is not None:
            generation_config["top_k"] = top_k

        max_output = (
            request.max_output_tokens
            if request.max_output_tokens is not None
            else settings.max_output_tokens
        )
        if max_output:
            generation_config["max_output_tokens"] = max_output

        start = time.perf_counter()
        try:
            response = await self._client.aio.models.generate_content(
                model=self._config.model,
                contents=request.prompt,
                config=types.GenerateContentConfig(**generation_config),
            )
        except genai_errors.APIError as err:
            raise UpstreamError(f"Gemini API error ({err.code}): {err.message}") from err
        latency_ms = (time.perf_counter() - start) * 1000

        candidates = getattr(response, "candidates", None) or []
        content = getattr(candidates[0], "content", None) if candidates else None
        if content is None or not getattr(content, "parts", None):
            raise ProviderResponseError("Invalid response format from Gemini API")
        text = response.text or ""

        usage = getattr(response, "usage_metadata", None)
        prompt_tokens = (getattr(usage, "prompt_token_count", 0) or 0) if usage else 0
        completion_tokens = (getattr(usage, "candidates_token_count", 0) or 0) if usage else 0
        cost_usd = estimate_cost(
            provider=self._config.name,
            model=self._config.model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
        )

        return ProviderResponse(
            text=text,
            raw=response,
            model=self._config.model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            cost_usd=cost_usd,
            latency_ms=latency_ms,
        )
