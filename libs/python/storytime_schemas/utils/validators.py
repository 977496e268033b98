"""Reusable validation helpers."""

from __future__ import annotations


class BlankValueError(ValueError):
    """Raised when a required text field contains only whitespace."""


def ensure_not_blank(value: str, *, field_name: str) -> str:
    """Return ``value`` stripped of surrounding whitespace.

    Args:
        value: Input text to evaluate.
        field_name: Name used in the raised error message.

    Returns:
        The stripped string when validation succeeds.

    Raises:
        BlankValueError: If nothing but whitespace remains.
    """

    cleaned = value.strip()
    if not cleaned:
        raise BlankValueError(f"{field_name} cannot be empty")
    return cleaned


def split_words(value: str) -> list[str]:
    """Whitespace-delimited tokens of ``value``; empty input yields no words."""

    return value.split()


def count_words(value: str) -> int:
    return len(split_words(value))
