"""Shared observability helpers used across Storytime services."""

from .logging import current_log_context, log_context, setup_logging
from .metrics import (
    observe_audio_cache,
    observe_provider_response,
    observe_stage_duration,
    observe_story_outcome,
    setup_fastapi_metrics,
)

__all__ = [
    "setup_logging",
    "log_context",
    "current_log_context",
    "setup_fastapi_metrics",
    "observe_audio_cache",
    "observe_provider_response",
    "observe_stage_duration",
    "observe_story_outcome",
]
