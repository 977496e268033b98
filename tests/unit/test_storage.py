"""Tests for the in-memory story store."""

from datetime import timedelta

import pytest

from storytime_schemas import (
    FavoriteStoryCreate,
    StoryCreate,
    StoryPageCreate,
    StoryStatus,
    UserProfileCreate,
)

from services.orchestrator.app.errors import NotFoundError
from services.orchestrator.app.storage import InMemoryStoryStore


pytestmark = pytest.mark.anyio("asyncio")


def _profile(name: str = "Ada") -> UserProfileCreate:
    return UserProfileCreate(
        name=name, gender="Girl", age=7, hair_color="Red", hair_type="Wavy", skin_tone="Fair"
    )


def _story(profile_id: int) -> StoryCreate:
    return StoryCreate(
        full_text="Once upon a time.",
        user_profile_id=profile_id,
        character="fox",
        environment="snowy hill",
        theme="patience",
        requested_word_count=150,
    )


async def test_ids_are_monotonic_per_entity() -> None:
    store = InMemoryStoryStore()
    first = await store.create_profile(_profile())
    second = await store.create_profile(_profile("Bo"))
    story = await store.create_story(_story(first.id))
    assert (first.id, second.id, story.id) == (1, 2, 1)
    assert await store.delete_profile(first.id)
    third = await store.create_profile(_profile("Cy"))
    assert third.id == 3


async def test_complete_story_sorts_pages_and_requires_profile() -> None:
    store = InMemoryStoryStore()
    profile = await store.create_profile(_profile())
    story = await store.create_story(_story(profile.id))
    await store.create_page(StoryPageCreate(story_id=story.id, page_number=2, text="two"))
    await store.create_page(StoryPageCreate(story_id=story.id, page_number=1, text="one"))

    complete = await store.get_complete_story(story.id)
    assert complete is not None
    assert [page.page_number for page in complete.pages] == [1, 2]
    assert complete.user_profile.name == "Ada"
    assert complete.status is StoryStatus.GENERATING

    await store.delete_profile(profile.id)
    assert await store.get_complete_story(story.id) is None
    assert await store.get_complete_story(999) is None


async def test_update_page_changes_only_given_fields() -> None:
    store = InMemoryStoryStore()
    page = await store.create_page(StoryPageCreate(story_id=1, page_number=1, text="one"))
    await store.update_page(page.id, image_url="https://img/1.png")
    updated = await store.update_page(page.id, audio_url="/audio/a.mp3")
    assert updated.image_url == "https://img/1.png"
    assert updated.audio_url == "/audio/a.mp3"
    assert updated.text == "one"

    with pytest.raises(NotFoundError):
        await store.update_page(42, image_url="x")


async def test_favorites_filter_and_compose() -> None:
    store = InMemoryStoryStore()
    ada = await store.create_profile(_profile())
    bo = await store.create_profile(_profile("Bo"))
    story = await store.create_story(_story(ada.id))
    await store.create_favorite(
        FavoriteStoryCreate(
            story_id=story.id, user_profile_id=ada.id, character="fox", environment="hill", theme="patience"
        ),
        first_page_thumbnail="https://img/1.png",
    )

    assert len(await store.list_favorites(ada.id)) == 1
    assert await store.list_favorites(bo.id) == []
    complete = await store.list_complete_favorites(ada.id)
    assert complete[0].story.id == story.id
    assert complete[0].first_page_thumbnail == "https://img/1.png"


async def test_story_status_updates() -> None:
    store = InMemoryStoryStore()
    story = await store.create_story(_story(1))
    updated = await store.update_story_status(story.id, StoryStatus.FAILED)
    assert updated.status is StoryStatus.FAILED
    with pytest.raises(NotFoundError):
        await store.update_story_status(77, StoryStatus.COMPLETE)


async def test_timestamps_are_timezone_aware() -> None:
    store = InMemoryStoryStore()
    profile = await store.create_profile(_profile())
    story = await store.create_story(_story(profile.id))
    favorite = await store.create_favorite(
        FavoriteStoryCreate(
            story_id=story.id, user_profile_id=profile.id, character="fox", environment="hill", theme="patience"
        )
    )

    assert profile.creation_date.utcoffset() == timedelta(0)
    assert story.creation_date.utcoffset() == timedelta(0)
    assert favorite.timestamp.utcoffset() == timedelta(0)


async def test_get_and_delete_favorite() -> None:
    store = InMemoryStoryStore()
    profile = await store.create_profile(_profile())
    story = await store.create_story(_story(profile.id))
    favorite = await store.create_favorite(
        FavoriteStoryCreate(
            story_id=story.id, user_profile_id=profile.id, character="fox", environment="hill", theme="patience"
        )
    )

    assert (await store.get_favorite(favorite.id)).story_id == story.id
    assert await store.delete_favorite(favorite.id) is True
    assert await store.get_favorite(favorite.id) is None
    assert await store.delete_favorite(favorite.id) is False
