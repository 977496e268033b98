from .engine import WORD_COUNT_SAFETY_FACTOR, StoryTextGenerator, adjusted_word_count, build_story_prompt

__all__ = ["StoryTextGenerator", "WORD_COUNT_SAFETY_FACTOR", "adjusted_word_count", "build_story_prompt"]
