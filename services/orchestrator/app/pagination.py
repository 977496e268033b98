"""Deterministic splitting of story prose into reader pages."""

from __future__ import annotations

import math

from storytime_schemas.utils.validators import split_words

MIN_WORDS_PER_PAGE = 50
MAX_WORDS_PER_PAGE = 60


def paginate(
    text: str,
    min_words: int = MIN_WORDS_PER_PAGE,
    max_words: int = MAX_WORDS_PER_PAGE,
) -> list[str]:
    """Split ``text`` into ordered pages of roughly ``min_words``-``max_words`` words.

    The page count is estimated from the midpoint of the range and the words are
    spread evenly across it. When the final page falls short of ``min_words`` the
    text is re-sliced over one page fewer if that still fits ``max_words``;
    otherwise the last two pages are merged, so only the final page may exceed
    ``max_words``. Words keep their original order and are re-joined with single
    spaces. Texts that fit on a single page are returned whole.
    """

    if min_words < 1 or max_words < min_words:
        raise ValueError("Page bounds must satisfy 1 <= min_words <= max_words")

    words = split_words(text)
    total = len(words)

    estimated_pages = math.ceil(total / ((min_words + max_words) / 2))
    if estimated_pages <= 1:
        return [text.strip()]

    words_per_page = min(max(math.ceil(total / estimated_pages), min_words), max_words)
    pages = _slice(words, words_per_page)

    if len(pages) > 1 and len(pages[-1]) < min_words:
        rebalanced_size = math.ceil(total / (len(pages) - 1))
        if rebalanced_size <= max_words:
            pages = _slice(words, rebalanced_size)
        else:
            last = pages.pop()
            pages[-1] = pages[-1] + last

    return [" ".join(page) for page in pages]


def _slice(words: list[str], size: int) -> list[list[str]]:
    return [words[start:start + size] for start in range(0, len(words), size)]


__all__ = ["paginate", "MIN_WORDS_PER_PAGE", "MAX_WORDS_PER_PAGE"]
