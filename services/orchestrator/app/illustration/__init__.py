from .engine import IllustrationGenerator, build_illustration_prompt

__all__ = ["IllustrationGenerator", "build_illustration_prompt"]
