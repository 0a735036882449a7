from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest


def pytest_configure() -> None:
    root = Path(__file__).resolve().parents[1]
    if (root / "gassight_build").exists():
        sys.path.insert(0, str(root))


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    # The CLI reconfigures root logging; keep that from leaking across tests.
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
