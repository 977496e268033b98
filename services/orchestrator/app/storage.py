"""Storage interface for profiles, stories, pages and favorites.

The pipeline only talks to :class:`StoryStore`; :class:`InMemoryStoryStore`
keeps everything in dictionaries keyed by integer ids with one monotonic
counter per entity type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, Optional

from storytime_schemas import (
    CompleteFavorite,
    CompleteStory,
    FavoriteStory,
    FavoriteStoryCreate,
    Story,
    StoryCreate,
    StoryPage,
    StoryPageCreate,
    StoryStatus,
    UserProfile,
    UserProfileCreate,
)

from .errors import NotFoundError

_UNSET = object()


class StoryStore(ABC):
    """CRUD operations used by the orchestrator and the HTTP API."""

    # Profiles
    @abstractmethod
    async def list_profiles(self) -> list[UserProfile]: ...

    @abstractmethod
    async def get_profile(self, profile_id: int) -> Optional[UserProfile]: ...

    @abstractmethod
    async def create_profile(self, profile: UserProfileCreate) -> UserProfile: ...

    @abstractmethod
    async def delete_profile(self, profile_id: int) -> bool: ...

    # Stories
    @abstractmethod
    async def list_stories(self, user_profile_id: Optional[int] = None) -> list[Story]: ...

    @abstractmethod
    async def get_story(self, story_id: int) -> Optional[Story]: ...

    @abstractmethod
    async def create_story(self, story: StoryCreate) -> Story: ...

    @abstractmethod
    async def update_story_status(self, story_id: int, status: StoryStatus) -> Story: ...

    # Pages
    @abstractmethod
    async def list_pages(self, story_id: int) -> list[StoryPage]: ...

    @abstractmethod
    async def create_page(self, page: StoryPageCreate) -> StoryPage: ...

    @abstractmethod
    async def update_page(
        self,
        page_id: int,
        *,
        image_url: Optional[str] | object = _UNSET,
        audio_url: Optional[str] | object = _UNSET,
    ) -> StoryPage: ...

    # Favorites
    @abstractmethod
    async def list_favorites(self, user_profile_id: Optional[int] = None) -> list[FavoriteStory]: ...

    @abstractmethod
    async def get_favorite(self, favorite_id: int) -> Optional[FavoriteStory]: ...

    @abstractmethod
    async def create_favorite(
        self, favorite: FavoriteStoryCreate, first_page_thumbnail: Optional[str] = None
    ) -> FavoriteStory: ...

    @abstractmethod
    async def delete_favorite(self, favorite_id: int) -> bool: ...

    # Composed views
    async def get_complete_story(self, story_id: int) -> Optional[CompleteStory]:
        """Story with pages sorted by number and its profile, or ``None`` if either is missing."""

        story = await self.get_story(story_id)
        if story is None:
            return None
        profile = await self.get_profile(story.user_profile_id)
        if profile is None:
            return None
        pages = sorted(await self.list_pages(story_id), key=lambda page: page.page_number)
        return CompleteStory(**story.model_dump(), pages=pages, user_profile=profile)

    async def list_complete_favorites(
        self, user_profile_id: Optional[int] = None
    ) -> list[CompleteFavorite]:
        complete: list[CompleteFavorite] = []
        for favorite in await self.list_favorites(user_profile_id):
            story = await self.get_complete_story(favorite.story_id)
            if story is not None:
                complete.append(CompleteFavorite(**favorite.model_dump(), story=story))
        return complete


class InMemoryStoryStore(StoryStore):
    """Process-local store; state is lost on restart."""

    def __init__(self) -> None:
        self._profiles: Dict[int, UserProfile] = {}
        self._stories: Dict[int, Story] = {}
        self._pages: Dict[int, StoryPage] = {}
        self._favorites: Dict[int, FavoriteStory] = {}
        self._next_ids: Dict[str, int] = {"profile": 1, "story": 1, "page": 1, "favorite": 1}

    def _allocate_id(self, entity: str) -> int:
        value = self._next_ids[entity]
        self._next_ids[entity] = value + 1
        return value

    async def list_profiles(self) -> list[UserProfile]:
        return list(self._profiles.values())

    async def get_profile(self, profile_id: int) -> Optional[UserProfile]:
        return self._profiles.get(profile_id)

    async def create_profile(self, profile: UserProfileCreate) -> UserProfile:
        record = UserProfile(
            **profile.model_dump(),
            id=self._allocate_id("profile"),
            creation_date=datetime.now(timezone.utc),
        )
        self._profiles[record.id] = record
        return record

    async def delete_profile(self, profile_id: int) -> bool:
        return self._profiles.pop(profile_id, None) is not None

    async def list_stories(self, user_profile_id: Optional[int] = None) -> list[Story]:
        stories = list(self._stories.values())
        if user_profile_id is not None:
            stories = [story for story in stories if story.user_profile_id == user_profile_id]
        return stories

    async def get_story(self, story_id: int) -> Optional[Story]:
        return self._stories.get(story_id)

    async def create_story(self, story: StoryCreate) -> Story:
        record = Story(
            **story.model_dump(),
            id=self._allocate_id("story"),
            creation_date=datetime.now(timezone.utc),
            status=StoryStatus.GENERATING,
        )
        self._stories[record.id] = record
        return record

    async def update_story_status(self, story_id: int, status: StoryStatus) -> Story:
        existing = self._stories.get(story_id)
        if existing is None:
            raise NotFoundError("Story", story_id)
        updated = existing.model_copy(update={"status": status})
        self._stories[story_id] = updated
        return updated

    async def list_pages(self, story_id: int) -> list[StoryPage]:
        return [page for page in self._pages.values() if page.story_id == story_id]

    async def create_page(self, page: StoryPageCreate) -> StoryPage:
        record = StoryPage(**page.model_dump(), id=self._allocate_id("page"))
        self._pages[record.id] = record
        return record

    async def update_page(
        self,
        page_id: int,
        *,
        image_url: Optional[str] | object = _UNSET,
        audio_url: Optional[str] | object = _UNSET,
    ) -> StoryPage:
        existing = self._pages.get(page_id)
        if existing is None:
            raise NotFoundError("Story page", page_id)
        updates: dict[str, Optional[str]] = {}
        if image_url is not _UNSET:
            updates["image_url"] = image_url  # type: ignore[assignment]
        if audio_url is not _UNSET:
            updates["audio_url"] = audio_url  # type: ignore[assignment]
        updated = existing.model_copy(update=updates)
        self._pages[page_id] = updated
        return updated

    async def list_favorites(self, user_profile_id: Optional[int] = None) -> list[FavoriteStory]:
        favorites = list(self._favorites.values())
        if user_profile_id is not None:
            favorites = [fav for fav in favorites if fav.user_profile_id == user_profile_id]
        return favorites

    async def get_favorite(self, favorite_id: int) -> Optional[FavoriteStory]:
        return self._favorites.get(favorite_id)

    async def create_favorite(
        self, favorite: FavoriteStoryCreate, first_page_thumbnail: Optional[str] = None
    ) -> FavoriteStory:
        record = FavoriteStory(
            **favorite.model_dump(),
            id=self._allocate_id("favorite"),
            timestamp=datetime.now(timezone.utc),
            first_page_thumbnail=first_page_thumbnail,
        )
        self._favorites[record.id] = record
        return record

    async def delete_favorite(self, favorite_id: int) -> bool:
        return self._favorites.pop(favorite_id, None) is not None
