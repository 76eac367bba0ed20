"""Board lifecycle: setup, filling in goals, and playing the board."""

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from .errors import IncompleteBoard, InvalidTransition, ValidationError
from . import goals
from .goals import DEFAULT_GOAL_DURATION_DAYS, new_goal
from .lines import count_completed_lines, max_lines
from .models import GRID_SIZES, AppStage, AppState, Board, Goal, GoalType

logger = logging.getLogger(__name__)


def start_filling(
    state: AppState,
    user_name: str,
    size: int,
    target_bingo_lines: int,
    today: Optional[date] = None,
    duration_days: int = DEFAULT_GOAL_DURATION_DAYS,
) -> AppState:
    """
    Leave setup with a fresh board of blank goals.

    Args:
        state: Current state, must be in setup
        user_name: Whose board this is (required)
        size: 3 or 4
        target_bingo_lines: Lines needed to win, 1 to 2 * size + 2
        today: Start date for the new goals (defaults to today)
        duration_days: Length of the default goal period

    Returns:
        New state in the filling stage
    """
    require_stage(state, AppStage.SETUP)

    user_name = user_name.strip()
    if not user_name:
        raise ValidationError("Please enter your name")

    if size not in GRID_SIZES:
        raise ValidationError(f"Grid size must be one of {GRID_SIZES}, got {size}")

    if target_bingo_lines < 1:
        raise ValidationError("Target bingo lines must be at least 1")

    if target_bingo_lines > max_lines(size):
        raise ValidationError(
            f"A {size}x{size} board only has {max_lines(size)} lines"
        )

    cells = tuple(
        new_goal(i, today=today, duration_days=duration_days)
        for i in range(size * size)
    )
    board = Board(
        user_name=user_name,
        size=size,
        target_bingo_lines=target_bingo_lines,
        goals=cells,
    )

    logger.info(
        f"Board created for {user_name}: {size}x{size}, "
        f"target {target_bingo_lines} lines"
    )
    return AppState(stage=AppStage.FILLING, board=board)


def update_goal(state: AppState, index: int, goal: Goal) -> AppState:
    """Replace one cell's goal and recount the lines."""
    goal_at(state, index)  # raises if there is no such cell

    board = state.board
    cells = board.goals[:index] + (goal,) + board.goals[index + 1 :]
    board = recompute_lines(replace(board, goals=cells))

    win_acknowledged = state.win_acknowledged and has_reached_target(board)
    if board.completed_lines != state.board.completed_lines:
        logger.info(
            f"Completed lines: {state.board.completed_lines} -> "
            f"{board.completed_lines} (target {board.target_bingo_lines})"
        )

    return replace(state, board=board, win_acknowledged=win_acknowledged)


def edit_goal(
    state: AppState,
    index: int,
    title: Optional[str] = None,
    goal_type: Optional[GoalType] = None,
    target_count: Optional[int] = None,
    notes: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> AppState:
    """
    Apply form edits to one goal.

    Title, type and counter target can only change while filling in the
    board. Notes and the goal period stay editable on the active board.
    Fields left as None are unchanged.
    """
    definition_changed = any(v is not None for v in (title, goal_type, target_count))
    if definition_changed:
        require_stage(state, AppStage.FILLING)

    goal = goal_at(state, index)

    if goal_type is not None:
        goal = goals.change_goal_type(goal, goal_type)
    if title is not None:
        goal = goals.set_title(goal, title)
    if target_count is not None:
        goal = goals.set_target_count(goal, target_count)
    if notes is not None:
        goal = goals.set_notes(goal, notes)
    if start_date is not None or end_date is not None:
        goal = goals.set_date_range(
            goal,
            goal.start_date if start_date is None else start_date,
            goal.end_date if end_date is None else end_date,
        )

    return update_goal(state, index, goal)


def record_progress(state: AppState, index: int, action, *args) -> AppState:
    """
    Apply a completion action to a goal on the active board.

    Example:
        record_progress(state, 4, goals.apply_count_delta, 1)
    """
    require_stage(state, AppStage.ACTIVE)
    return update_goal(state, index, action(goal_at(state, index), *args))


def goal_at(state: AppState, index: int) -> Goal:
    """Look up a cell's goal."""
    if state.board is None:
        raise InvalidTransition("There is no board yet")
    if not 0 <= index < len(state.board.goals):
        raise ValidationError(
            f"No cell {index} on a {state.board.size}x{state.board.size} board"
        )
    return state.board.goals[index]


def finish_filling(board: Board):
    """Check every cell has a title before the board can start."""
    blank_cells = [i for i, goal in enumerate(board.goals) if not goal.title.strip()]
    if blank_cells:
        raise IncompleteBoard(blank_cells)


def activate(state: AppState) -> AppState:
    """Move from filling to the active board."""
    require_stage(state, AppStage.FILLING)
    finish_filling(state.board)

    logger.info("All cells filled, board is active")
    return replace(state, stage=AppStage.ACTIVE, board=recompute_lines(state.board))


def recompute_lines(board: Board) -> Board:
    """Return the board with completed_lines recounted from its goals."""
    flags = [goal.is_completed for goal in board.goals]
    return replace(board, completed_lines=count_completed_lines(board.size, flags))


def has_reached_target(board: Board) -> bool:
    return board.completed_lines >= board.target_bingo_lines


def should_celebrate(state: AppState) -> bool:
    """
    Whether to show the win celebration.

    Shown on the active board once the target is reached, until the user
    dismisses it. Dropping below the target re-arms it.
    """
    return (
        state.stage == AppStage.ACTIVE
        and state.board is not None
        and has_reached_target(state.board)
        and not state.win_acknowledged
    )


def acknowledge_win(state: AppState) -> AppState:
    """Dismiss the celebration and keep playing."""
    if not should_celebrate(state):
        return state
    return replace(state, win_acknowledged=True)


def reset() -> AppState:
    """Throw the board away and go back to setup."""
    logger.info("Board reset, back to setup")
    return AppState()


def require_stage(state: AppState, stage: AppStage):
    if state.stage != stage:
        raise InvalidTransition(
            f"Expected stage {stage.value}, board is in {state.stage.value}"
        )
