"""Tests for the board image renderer."""

from datetime import date
from pathlib import Path

from PIL import Image

from goal_bingo.board import flow, goals
from goal_bingo.dashboard.renderer import BoardRenderer


def test_render_active_board(tmp_path, make_active_state):
    state = make_active_state(size=4)
    for i in (0, 1, 2, 3):
        state = flow.record_progress(state, i, goals.apply_manual_toggle)

    renderer = BoardRenderer(str(tmp_path / "images"))
    filename, file_path = renderer.render(state.board, today=date(2024, 5, 1))

    assert filename.startswith("board-")
    assert Path(file_path).exists()

    with Image.open(file_path) as image:
        assert image.size == (800, 480)
        assert image.mode == "1"


def test_progress_text_by_goal_type(tmp_path):
    renderer = BoardRenderer(str(tmp_path))
    today = date(2024, 5, 20)

    counted = goals.change_goal_type(goals.new_goal(0), "count")
    counted = goals.apply_count_delta(goals.set_target_count(counted, 4), 3)
    assert renderer._progress_text(counted, today) == "3/4"

    habit = goals.change_goal_type(goals.new_goal(1), "habit")
    habit = goals.apply_habit_toggle(habit, "2024-05-03")
    assert renderer._progress_text(habit, today) == "1 days in May"

    assert renderer._progress_text(goals.new_goal(2), today) is None
