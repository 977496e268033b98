"""Shared domain schemas for profiles, stories and favorites."""

from .enums import GenerationStage, StoryLanguage, StoryStatus
from .models import (
    MAX_CHILD_AGE,
    MAX_WORD_COUNT,
    MIN_CHILD_AGE,
    MIN_WORD_COUNT,
    CompleteFavorite,
    CompleteStory,
    FavoriteStory,
    FavoriteStoryCreate,
    Story,
    StoryCreate,
    StoryGenerationRequest,
    StoryPage,
    StoryPageCreate,
    UserProfile,
    UserProfileCreate,
)

__all__ = [
    "GenerationStage",
    "StoryLanguage",
    "StoryStatus",
    "MIN_CHILD_AGE",
    "MAX_CHILD_AGE",
    "MIN_WORD_COUNT",
    "MAX_WORD_COUNT",
    "UserProfile",
    "UserProfileCreate",
    "StoryGenerationRequest",
    "StoryCreate",
    "Story",
    "StoryPageCreate",
    "StoryPage",
    "CompleteStory",
    "FavoriteStoryCreate",
    "FavoriteStory",
    "CompleteFavorite",
]
