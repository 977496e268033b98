"""Tests for the pagination engine."""

import pytest

from services.orchestrator.app.pagination import paginate


def _words(count: int) -> str:
    return " ".join(f"w{index}" for index in range(count))


def test_short_text_is_single_page() -> None:
    assert paginate("  A tiny tale about a sleepy cat.  ") == ["A tiny tale about a sleepy cat."]


def test_empty_text_is_single_empty_page() -> None:
    assert paginate("") == [""]


def test_hundred_ten_words_make_two_even_pages() -> None:
    pages = paginate(_words(110))
    assert [len(page.split()) for page in pages] == [55, 55]


def test_short_tail_is_rebalanced_when_it_fits() -> None:
    pages = paginate(_words(120))
    assert [len(page.split()) for page in pages] == [60, 60]


def test_short_tail_is_merged_when_rebalance_overflows() -> None:
    # 50/50/30 would need 65 words a page over two pages, so the tail is merged.
    pages = paginate(_words(130))
    assert [len(page.split()) for page in pages] == [50, 80]


def test_merge_keeps_every_word_in_order() -> None:
    text = _words(257)
    pages = paginate(text)
    assert " ".join(pages) == text
    for page in pages[:-1]:
        assert 50 <= len(page.split()) <= 60


@pytest.mark.parametrize("total", [56, 100, 165, 330, 700])
def test_pages_within_bounds_except_last(total: int) -> None:
    pages = paginate(_words(total))
    counts = [len(page.split()) for page in pages]
    assert sum(counts) == total
    for count in counts[:-1]:
        assert 50 <= count <= 60
    assert counts[-1] >= 50


def test_whitespace_is_normalised() -> None:
    text = "\n".join(_words(120).split())
    pages = paginate(text)
    assert "\n" not in pages[0]


def test_deterministic() -> None:
    text = _words(333)
    assert paginate(text) == paginate(text)


def test_invalid_bounds() -> None:
    with pytest.raises(ValueError):
        paginate("text", min_words=60, max_words=50)
