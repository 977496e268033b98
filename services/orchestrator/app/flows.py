"""Story generation pipeline and the Prefect flow that runs it."""

from __future__ import annotations

import logging
from typing import Optional

from prefect import flow

from storytime_observability import log_context, observe_story_outcome
from storytime_schemas import (
    CompleteStory,
    GenerationStage,
    Story,
    StoryCreate,
    StoryGenerationRequest,
    StoryPage,
    StoryPageCreate,
    StoryStatus,
    UserProfile,
)

from .concurrency import AUDIO_CONCURRENCY, IMAGE_CONCURRENCY, run_bounded
from .errors import InternalInconsistencyError, NotFoundError
from .illustration import IllustrationGenerator
from .narration import NarrationGenerator
from .pagination import paginate
from .stages import GenerationTracker
from .storage import StoryStore
from .story import StoryTextGenerator

logger = logging.getLogger(__name__)
SERVICE_NAME = "orchestrator"


class StoryOrchestrator:
    """Runs one generation request from prose to narrated, illustrated pages.

    Records are written as soon as they exist, so a reader can watch pages and
    their assets appear while the run is in progress. On failure nothing is
    rolled back: the story is marked ``failed`` and keeps whatever pages and
    assets were produced.
    """

    def __init__(
        self,
        store: StoryStore,
        text_generator: StoryTextGenerator,
        illustration_generator: IllustrationGenerator,
        narration_generator: NarrationGenerator,
        *,
        image_concurrency: int = IMAGE_CONCURRENCY,
        audio_concurrency: int = AUDIO_CONCURRENCY,
    ) -> None:
        self._store = store
        self._text = text_generator
        self._illustrations = illustration_generator
        self._narration = narration_generator
        self._image_concurrency = image_concurrency
        self._audio_concurrency = audio_concurrency

    @property
    def store(self) -> StoryStore:
        return self._store

    async def generate(
        self,
        request: StoryGenerationRequest,
        tracker: Optional[GenerationTracker] = None,
    ) -> CompleteStory:
        tracker = tracker or GenerationTracker()
        story: Optional[Story] = None

        with log_context(profile_id=request.user_profile_id):
            try:
                profile = await self._store.get_profile(request.user_profile_id)
                if profile is None:
                    raise NotFoundError("User profile", request.user_profile_id)

                full_text = await self._text.generate(
                    profile,
                    request.character,
                    request.environment,
                    request.theme,
                    request.word_count,
                    request.language,
                )
                story = await self._store.create_story(
                    StoryCreate(
                        full_text=full_text,
                        user_profile_id=profile.id,
                        character=request.character,
                        environment=request.environment,
                        theme=request.theme,
                        requested_word_count=request.word_count,
                    )
                )
                tracker.advance(GenerationStage.TEXT_GENERATED)

                with log_context(story_id=story.id):
                    pages = await self._create_placeholders(story, full_text)
                    tracker.advance(GenerationStage.PAGES_PLACEHOLDERED)

                    tracker.advance(GenerationStage.IMAGES_POPULATING)
                    await run_bounded(
                        [self._image_task(profile, request, page) for page in pages],
                        self._image_concurrency,
                    )

                    tracker.advance(GenerationStage.AUDIO_POPULATING)
                    await run_bounded(
                        [self._audio_task(request, page) for page in pages],
                        self._audio_concurrency,
                    )

                    await self._store.update_story_status(story.id, StoryStatus.COMPLETE)
                    complete = await self._store.get_complete_story(story.id)
                    if complete is None or len(complete.pages) != len(pages):
                        raise InternalInconsistencyError(f"Story {story.id} could not be assembled")
                    tracker.advance(GenerationStage.COMPLETE)
                    observe_story_outcome(StoryStatus.COMPLETE.value, len(pages), service_name=SERVICE_NAME)
                    logger.info("Story generated", extra={"page_count": len(pages)})
                    return complete
            except Exception as exc:
                tracker.fail(exc)
                if story is not None:
                    await self._store.update_story_status(story.id, StoryStatus.FAILED)
                    observe_story_outcome(StoryStatus.FAILED.value, 0, service_name=SERVICE_NAME)
                raise

    async def _create_placeholders(self, story: Story, full_text: str) -> list[StoryPage]:
        pages: list[StoryPage] = []
        for number, chunk in enumerate(paginate(full_text), start=1):
            pages.append(
                await self._store.create_page(
                    StoryPageCreate(story_id=story.id, page_number=number, text=chunk)
                )
            )
        logger.info("Created placeholder pages", extra={"page_count": len(pages)})
        return pages

    def _image_task(self, profile: UserProfile, request: StoryGenerationRequest, page: StoryPage):
        async def _run() -> str:
            with log_context(page_number=page.page_number):
                url = await self._illustrations.generate(
                    profile,
                    page.text,
                    request.character,
                    request.environment,
                    request.theme,
                    page.page_number,
                )
                await self._store.update_page(page.id, image_url=url)
                return url

        return _run

    def _audio_task(self, request: StoryGenerationRequest, page: StoryPage):
        async def _run() -> str:
            with log_context(page_number=page.page_number):
                path = await self._narration.generate(page.text, request.tts_voice)
                await self._store.update_page(page.id, audio_url=path)
                return path

        return _run


@flow(name="storytime-generation-flow", version="0.1.0", validate_parameters=False)
async def run_story_flow(
    payload: StoryGenerationRequest,
    orchestrator: StoryOrchestrator,
) -> CompleteStory:
    return await orchestrator.generate(payload)


__all__ = ["StoryOrchestrator", "run_story_flow"]
