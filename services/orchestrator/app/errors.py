"""Service-level errors raised by the story pipeline and storage layer.

Provider failures (``UpstreamError``, ``FilesystemError``) are defined in
:mod:`storytime_providers.exceptions` and propagate through the pipeline
unchanged.
"""

from __future__ import annotations


class StorytimeError(RuntimeError):
    """Base error for the story service."""


class NotFoundError(StorytimeError):
    """Raised when a referenced profile, story, page or favorite does not exist."""

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class LimitExceededError(StorytimeError):
    """Raised when a per-store or per-profile cap would be exceeded."""


class InternalInconsistencyError(StorytimeError):
    """Raised when persisted data cannot be assembled after a pipeline run."""
