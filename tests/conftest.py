"""Shared pytest fixtures for the bingo board tests."""

import os
import tempfile
from datetime import date

import pytest

# Keep the app module's default store and images out of the working tree
_TMP_DIR = tempfile.mkdtemp(prefix="goal-bingo-tests-")
os.environ.setdefault("STORAGE_PATH", os.path.join(_TMP_DIR, "bingo.db"))
os.environ.setdefault("IMAGE_DIR", os.path.join(_TMP_DIR, "images"))

from goal_bingo.board import flow  # noqa: E402
from goal_bingo.board.models import AppState  # noqa: E402

TODAY = date(2024, 1, 1)


@pytest.fixture
def make_active_state():
    """Factory for an active board with every cell titled."""

    def _make(size: int = 3, target: int = 1, user_name: str = "Mina") -> AppState:
        state = flow.start_filling(AppState(), user_name, size, target, today=TODAY)
        for i in range(size * size):
            state = flow.edit_goal(state, i, title=f"Goal {i}")
        return flow.activate(state)

    return _make
