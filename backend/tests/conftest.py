# ruff: noqa: INP001
"""Pytest configuration shared across backend tests."""

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time; keep the default data directory out of the
# source tree and the log output predictable regardless of shell env.
os.environ["DATA_DIR"] = tempfile.mkdtemp(prefix="taskboard-tests-")
os.environ["LOG_FORMAT"] = "text"
os.environ["EVENT_LOG_CAP"] = "1000"

from taskboard.services.store import DocumentStore  # noqa: E402


@pytest.fixture
def store(tmp_path: Path) -> DocumentStore:
    board_store = DocumentStore(tmp_path / "data")
    board_store.initialize()
    return board_store
