"""Data models for bingo goals and boards."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Union

GRID_SIZES = (3, 4)


class GoalType(str, Enum):
    """How a goal gets completed."""

    GENERAL = "general"
    COUNT = "count"
    HABIT = "habit"


class AppStage(str, Enum):
    """Where the user is in the board lifecycle."""

    SETUP = "setup"
    FILLING = "filling"
    ACTIVE = "active"


@dataclass(frozen=True)
class GeneralGoal:
    """A goal marked done by hand."""

    type: ClassVar[GoalType] = GoalType.GENERAL

    id: str
    title: str = ""
    start_date: str = ""
    end_date: str = ""
    notes: str = ""
    is_completed: bool = False


@dataclass(frozen=True)
class CountGoal(GeneralGoal):
    """A goal completed once the counter reaches its target."""

    type: ClassVar[GoalType] = GoalType.COUNT

    target_count: int = 1
    current_count: int = 0


@dataclass(frozen=True)
class HabitGoal(GeneralGoal):
    """A goal with a calendar of days it was done on."""

    type: ClassVar[GoalType] = GoalType.HABIT

    habit_dates: frozenset[str] = field(default_factory=frozenset)


Goal = Union[GeneralGoal, CountGoal, HabitGoal]

GOAL_CLASSES: dict[GoalType, type] = {
    GoalType.GENERAL: GeneralGoal,
    GoalType.COUNT: CountGoal,
    GoalType.HABIT: HabitGoal,
}


@dataclass(frozen=True)
class Board:
    """A size x size grid of goals, stored row by row."""

    user_name: str
    size: int
    target_bingo_lines: int
    goals: tuple[Goal, ...] = ()
    completed_lines: int = 0

    def cell(self, index: int) -> tuple[int, int]:
        """Return (row, column) for a goal index."""
        return divmod(index, self.size)


@dataclass(frozen=True)
class AppState:
    """Everything the presentation layer holds between actions."""

    stage: AppStage = AppStage.SETUP
    board: Optional[Board] = None

    # User dismissed the celebration for the current winning run
    win_acknowledged: bool = False
