"""Enum definitions shared across workflows."""

from __future__ import annotations

from enum import Enum


class StoryLanguage(str, Enum):
    """Story language tags: Turkish is the native language, English the alternate."""

    TR = "tr"
    EN = "en"

    NATIVE = TR
    ALTERNATE = EN


class StoryStatus(str, Enum):
    GENERATING = "generating"
    COMPLETE = "complete"
    FAILED = "failed"


class GenerationStage(str, Enum):
    REQUESTED = "REQUESTED"
    TEXT_GENERATED = "TEXT_GENERATED"
    PAGES_PLACEHOLDERED = "PAGES_PLACEHOLDERED"
    IMAGES_POPULATING = "IMAGES_POPULATING"
    AUDIO_POPULATING = "AUDIO_POPULATING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"
