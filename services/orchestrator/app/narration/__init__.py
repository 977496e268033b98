from .engine import NarrationGenerator, language_code_from_voice

__all__ = ["NarrationGenerator", "language_code_from_voice"]
