"""Story, page and favorite models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from ..enums import StoryLanguage, StoryStatus
from ..utils.validators import ensure_not_blank
from .base import CamelModel
from .profile import UserProfile

MIN_WORD_COUNT = 100
MAX_WORD_COUNT = 500


class StoryGenerationRequest(CamelModel):
    """Caregiver request for a new story. Immutable once submitted."""

    model_config = ConfigDict(frozen=True)

    user_profile_id: int
    character: str
    environment: str
    theme: str
    word_count: int = Field(..., ge=MIN_WORD_COUNT, le=MAX_WORD_COUNT)
    tts_voice: str = Field(..., min_length=1, description="Voice id such as en-US-Standard-A")
    language: StoryLanguage = StoryLanguage.ALTERNATE

    @field_validator("tts_voice")
    @classmethod
    def validate_voice(cls, value: str) -> str:
        return ensure_not_blank(value, field_name="ttsVoice")


class StoryCreate(CamelModel):
    full_text: str
    user_profile_id: int
    character: str
    environment: str
    theme: str
    requested_word_count: int


class Story(StoryCreate):
    id: int
    creation_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: StoryStatus = StoryStatus.GENERATING


class StoryPageCreate(CamelModel):
    story_id: int
    page_number: int = Field(..., ge=1)
    text: str
    image_url: Optional[str] = None
    audio_url: Optional[str] = None


class StoryPage(StoryPageCreate):
    """A reader page; only the asset URLs change after creation."""

    id: int


class CompleteStory(Story):
    """Story joined with its ordered pages and owning profile."""

    pages: list[StoryPage] = Field(default_factory=list)
    user_profile: UserProfile


class FavoriteStoryCreate(CamelModel):
    story_id: int
    user_profile_id: int
    character: str
    environment: str
    theme: str


class FavoriteStory(FavoriteStoryCreate):
    id: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    first_page_thumbnail: Optional[str] = None


class CompleteFavorite(FavoriteStory):
    story: CompleteStory
