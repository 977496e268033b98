"""Shared pytest configuration for the Storytime project."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
EXTRA_PATHS = [ROOT, ROOT / "libs/python"]
for extra in EXTRA_PATHS:
    sys.path.insert(0, str(extra))


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
