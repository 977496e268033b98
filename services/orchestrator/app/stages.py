"""Generation stage state machine and its bookkeeping."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Callable, Dict, FrozenSet, List, Optional

from storytime_observability import observe_stage_duration
from storytime_schemas import GenerationStage

from .errors import StorytimeError

logger = logging.getLogger(__name__)
SERVICE_NAME = "orchestrator"

_FORWARD: Dict[GenerationStage, GenerationStage] = {
    GenerationStage.REQUESTED: GenerationStage.TEXT_GENERATED,
    GenerationStage.TEXT_GENERATED: GenerationStage.PAGES_PLACEHOLDERED,
    GenerationStage.PAGES_PLACEHOLDERED: GenerationStage.IMAGES_POPULATING,
    GenerationStage.IMAGES_POPULATING: GenerationStage.AUDIO_POPULATING,
    GenerationStage.AUDIO_POPULATING: GenerationStage.COMPLETE,
}

TERMINAL_STAGES: FrozenSet[GenerationStage] = frozenset({GenerationStage.COMPLETE, GenerationStage.FAILED})


def build_stage_sequence() -> list[GenerationStage]:
    """Happy-path stage order, starting at ``REQUESTED``."""

    sequence = [GenerationStage.REQUESTED]
    while sequence[-1] in _FORWARD:
        sequence.append(_FORWARD[sequence[-1]])
    return sequence


class IllegalTransitionError(StorytimeError):
    """Raised when a tracker is asked to skip, repeat or leave a terminal stage."""


class GenerationTracker:
    """Tracks one pipeline run through its stages.

    Only the next stage in the sequence, or ``FAILED`` from any non-terminal
    stage, is accepted. Time spent in each stage is recorded when it is left.
    """

    def __init__(self, *, clock: Callable[[], float] = perf_counter) -> None:
        self._clock = clock
        self._stage = GenerationStage.REQUESTED
        self._entered_at = clock()
        self._history: List[GenerationStage] = [GenerationStage.REQUESTED]

    @property
    def stage(self) -> GenerationStage:
        return self._stage

    @property
    def history(self) -> list[GenerationStage]:
        return list(self._history)

    @property
    def finished(self) -> bool:
        return self._stage in TERMINAL_STAGES

    def can_advance(self, target: GenerationStage) -> bool:
        if self.finished:
            return False
        if target == GenerationStage.FAILED:
            return True
        return _FORWARD.get(self._stage) == target

    def advance(self, target: GenerationStage) -> None:
        if not self.can_advance(target):
            raise IllegalTransitionError(f"Cannot move from {self._stage.value} to {target.value}")
        self._leave(status="success")
        self._enter(target)

    def fail(self, error: Optional[BaseException] = None) -> None:
        """Move to ``FAILED``; a no-op once the run has already finished."""

        if self.finished:
            return
        failed_stage = self._stage
        self._leave(status="failed")
        self._enter(GenerationStage.FAILED)
        logger.warning(
            "Generation failed during %s",
            failed_stage.value,
            extra={"stage": failed_stage.value, "error_type": type(error).__name__ if error else None},
        )

    def _leave(self, *, status: str) -> None:
        observe_stage_duration(
            self._stage.value,
            self._clock() - self._entered_at,
            service_name=SERVICE_NAME,
            status=status,
        )

    def _enter(self, target: GenerationStage) -> None:
        logger.info("Stage transition %s -> %s", self._stage.value, target.value, extra={"stage": target.value})
        self._stage = target
        self._entered_at = self._clock()
        self._history.append(target)


__all__ = ["GenerationTracker", "IllegalTransitionError", "TERMINAL_STAGES", "build_stage_sequence"]
