from .base import CamelModel
from .profile import MAX_CHILD_AGE, MIN_CHILD_AGE, UserProfile, UserProfileCreate
from .story import (
    MAX_WORD_COUNT,
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
)

__all__ = [
    "CamelModel",
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
