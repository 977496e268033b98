"""Per-page illustration generation."""

from __future__ import annotations

import logging

from storytime_observability import observe_provider_response
from storytime_providers import (
    DEFAULT_RETRY_POLICY,
    ImageProvider,
    ImageRequest,
    ImageResponse,
    RetryPolicy,
)
from storytime_providers.exceptions import ProviderResponseError
from storytime_schemas import GenerationStage, UserProfile

from .prompts import ILLUSTRATION_PROMPT

logger = logging.getLogger(__name__)
SERVICE_NAME = "orchestrator"


def build_illustration_prompt(
    profile: UserProfile,
    page_text: str,
    character: str,
    environment: str,
    theme: str,
    page_number: int,
) -> str:
    return ILLUSTRATION_PROMPT.format(
        page_text=page_text,
        age=profile.age,
        gender=profile.gender.lower(),
        name=profile.name,
        hair_color=profile.hair_color.lower(),
        hair_type=profile.hair_type.lower(),
        skin_tone=profile.skin_tone.lower(),
        character=character,
        environment=environment,
        theme=theme,
        page_number=page_number,
    )


class IllustrationGenerator:
    """Requests one illustration per story page."""

    def __init__(
        self,
        provider: ImageProvider,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        *,
        size: str = "1024x1024",
        quality: str = "standard",
        style: str = "vivid",
    ) -> None:
        self._provider = provider
        self._retry = retry_policy
        self._size = size
        self._quality = quality
        self._style = style

    async def generate(
        self,
        profile: UserProfile,
        page_text: str,
        character: str,
        environment: str,
        theme: str,
        page_number: int,
    ) -> str:
        request = ImageRequest(
            prompt=build_illustration_prompt(profile, page_text, character, environment, theme, page_number),
            size=self._size,
            quality=self._quality,
            style=self._style,
            metadata={"stage": GenerationStage.IMAGES_POPULATING.value, "page_number": page_number},
        )

        async def _call() -> ImageResponse:
            response = await self._provider.generate_image(request)
            if not response.url:
                raise ProviderResponseError("Image provider returned no image URL")
            return response

        response = await self._retry.run(_call, description=f"illustration for page {page_number}")
        observe_provider_response(
            stage=GenerationStage.IMAGES_POPULATING.value,
            provider=self._provider.name,
            service_name=SERVICE_NAME,
            response=response,
        )
        logger.info("Illustration ready", extra={"page_number": page_number})
        return response.url
