"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add tests directory to path so helpers can be imported
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from maxbot.logging import clear_context  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_log_context():
    """Keep bound logging context from leaking between tests."""
    clear_context()
    yield
    clear_context()
