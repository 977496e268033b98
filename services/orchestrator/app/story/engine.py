"""Story text generation on top of the text provider abstraction."""

from __future__ import annotations

import logging

from storytime_observability import observe_provider_response
from storytime_providers import (
    DEFAULT_RETRY_POLICY,
    LLMProvider,
    ProviderRequest,
    ProviderResponse,
    RetryPolicy,
)
from storytime_providers.exceptions import ProviderResponseError
from storytime_schemas import GenerationStage, StoryLanguage, UserProfile

from .prompts import STORY_PROMPT_EN, STORY_PROMPT_TR

logger = logging.getLogger(__name__)
SERVICE_NAME = "orchestrator"

# Generated stories historically run short of the requested length.
WORD_COUNT_SAFETY_FACTOR = 1.4

_PROMPTS = {
    StoryLanguage.EN: STORY_PROMPT_EN,
    StoryLanguage.TR: STORY_PROMPT_TR,
}


def adjusted_word_count(word_count: int) -> int:
    """Word target sent upstream after applying the safety factor."""

    return int(round(word_count * WORD_COUNT_SAFETY_FACTOR))


def build_story_prompt(
    profile: UserProfile,
    character: str,
    environment: str,
    theme: str,
    word_count: int,
    language: StoryLanguage,
) -> str:
    template = _PROMPTS[StoryLanguage(language)]
    return template.format(
        name=profile.name,
        age=profile.age,
        gender=profile.gender,
        gender_lower=profile.gender.lower(),
        hair_color=profile.hair_color,
        hair_type_lower=profile.hair_type.lower(),
        skin_tone=profile.skin_tone,
        character=character,
        environment=environment,
        theme=theme,
        word_count=word_count,
    )


class StoryTextGenerator:
    """Produces the full story prose for a generation request."""

    def __init__(
        self,
        provider: LLMProvider,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        *,
        temperature: float = 0.7,
        top_p: float = 0.95,
        top_k: int = 40,
        max_output_tokens: int = 2048,
    ) -> None:
        self._provider = provider
        self._retry = retry_policy
        self._temperature = temperature
        self._top_p = top_p
        self._top_k = top_k
        self._max_output_tokens = max_output_tokens

    async def generate(
        self,
        profile: UserProfile,
        character: str,
        environment: str,
        theme: str,
        word_count: int,
        language: StoryLanguage = StoryLanguage.ALTERNATE,
    ) -> str:
        target = adjusted_word_count(word_count)
        request = ProviderRequest(
            prompt=build_story_prompt(profile, character, environment, theme, target, language),
            temperature=self._temperature,
            top_p=self._top_p,
            top_k=self._top_k,
            max_output_tokens=self._max_output_tokens,
            metadata={
                "stage": GenerationStage.TEXT_GENERATED.value,
                "target_word_count": target,
                "language": StoryLanguage(language).value,
            },
        )
        logger.info(
            "Requesting story text",
            extra={"requested_words": word_count, "target_words": target, "language": StoryLanguage(language).value},
        )

        async def _call() -> ProviderResponse:
            response = await self._provider.generate(request)
            if not response.text or not response.text.strip():
                raise ProviderResponseError("Text provider returned an empty story")
            return response

        response = await self._retry.run(_call, description="story text generation")
        observe_provider_response(
            stage=GenerationStage.TEXT_GENERATED.value,
            provider=self._provider.name,
            service_name=SERVICE_NAME,
            response=response,
        )
        return response.text.strip()
