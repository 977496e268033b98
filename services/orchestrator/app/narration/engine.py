"""Narration synthesis backed by the on-disk audio cache."""

from __future__ import annotations

import logging

from storytime_observability import observe_audio_cache, observe_provider_response
from storytime_providers import (
    DEFAULT_RETRY_POLICY,
    RetryPolicy,
    SpeechProvider,
    SpeechRequest,
)
from storytime_providers.exceptions import ProviderResponseError
from storytime_schemas import GenerationStage

from ..cache import AudioCache

logger = logging.getLogger(__name__)
SERVICE_NAME = "orchestrator"


def language_code_from_voice(voice_name: str) -> str:
    """``tr-TR-Standard-A`` -> ``tr-TR``."""

    return "-".join(voice_name.split("-")[:2])


class NarrationGenerator:
    """Turns page text into a cached MP3 and returns its public path.

    A cache hit never reaches the speech provider. Identical requests running
    at the same time are not deduplicated; both write the same file.
    """

    def __init__(
        self,
        provider: SpeechProvider,
        cache: AudioCache,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._retry = retry_policy

    @property
    def cache(self) -> AudioCache:
        return self._cache

    async def generate(self, text: str, voice_name: str) -> str:
        key = self._cache.key(text, voice_name)
        cached = self._cache.lookup(key)
        observe_audio_cache(cached is not None, service_name=SERVICE_NAME)
        if cached is not None:
            logger.debug("Narration cache hit", extra={"cache_key": key})
            return cached

        request = SpeechRequest(
            text=text,
            voice_name=voice_name,
            language_code=language_code_from_voice(voice_name),
            metadata={"stage": GenerationStage.AUDIO_POPULATING.value},
        )

        async def _call() -> str:
            self._cache.ensure_writable()
            response = await self._provider.synthesize(request)
            if not response.audio_content:
                raise ProviderResponseError("Speech provider returned no audio content")
            observe_provider_response(
                stage=GenerationStage.AUDIO_POPULATING.value,
                provider=self._provider.name,
                service_name=SERVICE_NAME,
                response=response,
            )
            return self._cache.store(key, response.audio_content)

        return await self._retry.run(_call, description="narration synthesis")
