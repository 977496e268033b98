"""Exponential backoff retry policy shared by all provider adapters."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Tuple, Type, TypeVar

from .exceptions import ProviderConfigError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_SECONDS = 1.0


@dataclass(frozen=True)
class RetryPolicy:
    """Retry a single upstream call with exponential backoff.

    The first attempt runs immediately; every retry doubles the previous wait,
    so the default policy sleeps 0s, 1s and 2s before its three attempts. All
    failures are retried except the ``non_retryable`` types, and the last
    error is re-raised unchanged once attempts run out.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay_seconds: float = DEFAULT_BASE_DELAY_SECONDS
    non_retryable: Tuple[Type[BaseException], ...] = (ProviderConfigError,)
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay_seconds < 0:
            raise ValueError("base_delay_seconds cannot be negative")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before ``attempt`` (0-based)."""

        if attempt <= 0:
            return 0.0
        return (2 ** (attempt - 1)) * self.base_delay_seconds

    async def run(self, operation: Callable[[], Awaitable[T]], *, description: str = "upstream call") -> T:
        last_error: BaseException | None = None
        for attempt in range(self.max_attempts):
            delay = self.delay_for(attempt)
            if delay:
                logger.info(
                    "Retrying %s after backoff",
                    description,
                    extra={"attempt": attempt + 1, "max_attempts": self.max_attempts, "delay_seconds": delay},
                )
                await self.sleep(delay)
            try:
                return await operation()
            except self.non_retryable:
                raise
            except Exception as exc:
                last_error = exc
                logger.warning(
                    "%s failed: %s",
                    description,
                    exc,
                    extra={"attempt": attempt + 1, "max_attempts": self.max_attempts},
                )
        assert last_error is not None
        raise last_error


DEFAULT_RETRY_POLICY = RetryPolicy()


__all__ = ["RetryPolicy", "DEFAULT_RETRY_POLICY", "DEFAULT_MAX_ATTEMPTS", "DEFAULT_BASE_DELAY_SECONDS"]
