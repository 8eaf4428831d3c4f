"""Pytest configuration for ncerrors tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`).
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ncerrors.logging import StructuredLogger  # noqa: E402
from ncerrors.sessions import InMemorySessionRegistry, RecordingSink, Session  # noqa: E402
from ncerrors.translator import ErrorTranslator  # noqa: E402


@pytest.fixture
def registry() -> InMemorySessionRegistry:
    return InMemorySessionRegistry(
        [Session(numeric_id=7, protocol_id=42), Session(numeric_id=9, protocol_id=1009)]
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def translator(registry: InMemorySessionRegistry) -> ErrorTranslator:
    logger = StructuredLogger(name="ncerrors.test", level="DEBUG")
    return ErrorTranslator(registry, source=registry, logger=logger)
