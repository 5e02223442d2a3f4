"""Shared test fixtures for yt-tui test suite."""

import pytest

from yttui.history import WatchHistory
from yttui.view import ViewEngine


@pytest.fixture
def history():
    """An empty in-memory watch history."""
    return WatchHistory()


@pytest.fixture
def engine(history):
    """A ViewEngine on the primary tab with default settings."""
    return ViewEngine(history)
