from .validators import BlankValueError, count_words, ensure_not_blank, split_words

__all__ = ["BlankValueError", "count_words", "ensure_not_blank", "split_words"]
