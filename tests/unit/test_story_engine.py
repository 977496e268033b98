"""Tests for story text generation."""

import pytest

from storytime_providers import (
    LLMProvider,
    MockProvider,
    ProviderRequest,
    ProviderResponse,
    ProviderResponseError,
    RetryPolicy,
)
from storytime_schemas import StoryLanguage, UserProfile

from services.orchestrator.app.story import StoryTextGenerator, adjusted_word_count, build_story_prompt


pytestmark = pytest.mark.anyio("asyncio")


async def _no_sleep(delay: float) -> None:
    return None


PROFILE = UserProfile(
    id=1,
    name="Ada",
    gender="Girl",
    age=6,
    hair_color="Brown",
    hair_type="Curly",
    skin_tone="Medium",
)


class _RecordingProvider(LLMProvider):
    name = "stub"

    def __init__(self, texts: list[str]) -> None:
        self._texts = list(texts)
        self.requests: list[ProviderRequest] = []

    async def generate(self, request: ProviderRequest) -> ProviderResponse:
        self.requests.append(request)
        return ProviderResponse(
            text=self._texts.pop(0),
            raw={},
            model="stub",
            prompt_tokens=10,
            completion_tokens=20,
        )


def test_adjusted_word_count() -> None:
    assert adjusted_word_count(100) == 140
    assert adjusted_word_count(250) == 350
    assert adjusted_word_count(500) == 700


def test_prompt_mentions_child_and_target() -> None:
    prompt = build_story_prompt(PROFILE, "dragon", "forest", "kindness", 280, StoryLanguage.EN)
    assert "Ada" in prompt
    assert "280 words" in prompt
    assert "curly hair" in prompt


def test_turkish_prompt() -> None:
    prompt = build_story_prompt(PROFILE, "ejderha", "orman", "nezaket", 140, StoryLanguage.TR)
    assert "uyku masalı" in prompt
    assert "140 kelime" in prompt


async def test_generate_sends_inflated_target_and_sampling() -> None:
    provider = _RecordingProvider(["  Once upon a time.  "])
    generator = StoryTextGenerator(provider, RetryPolicy(sleep=_no_sleep))

    text = await generator.generate(PROFILE, "dragon", "forest", "kindness", 200)

    assert text == "Once upon a time."
    request = provider.requests[0]
    assert request.metadata["target_word_count"] == 280
    assert request.temperature == 0.7
    assert request.top_p == 0.95
    assert request.max_output_tokens == 2048


async def test_empty_text_is_retried_then_raised() -> None:
    provider = _RecordingProvider(["", "   ", ""])
    generator = StoryTextGenerator(provider, RetryPolicy(sleep=_no_sleep))

    with pytest.raises(ProviderResponseError):
        await generator.generate(PROFILE, "dragon", "forest", "kindness", 100)
    assert len(provider.requests) == 3


async def test_mock_provider_produces_requested_length() -> None:
    generator = StoryTextGenerator(MockProvider())
    text = await generator.generate(PROFILE, "owl", "barn", "sharing", 100, StoryLanguage.TR)
    assert len(text.split()) == 140
