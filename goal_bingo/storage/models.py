"""Snapshot wire models.

The saved JSON uses the same camelCase keys the board front-end works with.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from goal_bingo.board.lines import max_lines
from goal_bingo.board.models import (
    GOAL_CLASSES,
    AppStage,
    AppState,
    Board,
    Goal,
    GoalType,
)


class GoalRecord(BaseModel):
    """One goal as stored."""

    id: str
    title: str = ""
    type: GoalType = GoalType.GENERAL
    target_count: Optional[int] = Field(None, alias="targetCount", ge=1)
    current_count: Optional[int] = Field(None, alias="currentCount", ge=0)
    habit_dates: Optional[list[str]] = Field(None, alias="habitDates")
    start_date: str = Field("", alias="startDate")
    end_date: str = Field("", alias="endDate")
    notes: str = ""
    is_completed: bool = Field(False, alias="isCompleted")

    class Config:
        """Pydantic config."""

        populate_by_name = True

    @classmethod
    def from_goal(cls, goal: Goal) -> "GoalRecord":
        record = cls(
            id=goal.id,
            title=goal.title,
            type=goal.type,
            start_date=goal.start_date,
            end_date=goal.end_date,
            notes=goal.notes,
            is_completed=goal.is_completed,
        )

        if goal.type == GoalType.COUNT:
            record.target_count = goal.target_count
            record.current_count = goal.current_count
        elif goal.type == GoalType.HABIT:
            record.habit_dates = sorted(goal.habit_dates)

        return record

    def to_goal(self) -> Goal:
        fields = {
            "id": self.id,
            "title": self.title,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "notes": self.notes,
            "is_completed": self.is_completed,
        }

        if self.type == GoalType.COUNT:
            fields["target_count"] = self.target_count or 1
            fields["current_count"] = self.current_count or 0
        elif self.type == GoalType.HABIT:
            fields["habit_dates"] = frozenset(self.habit_dates or ())

        return GOAL_CLASSES[self.type](**fields)


class BoardRecord(BaseModel):
    """Board as stored."""

    user_name: str = Field(..., alias="userName")
    size: int = Field(..., ge=3, le=4)
    target_bingo_lines: int = Field(..., alias="targetBingoLines", ge=1)
    completed_lines: int = Field(0, alias="completedLines", ge=0)
    goals: list[GoalRecord]

    class Config:
        """Pydantic config."""

        populate_by_name = True

    @model_validator(mode="after")
    def check_goal_count(self) -> "BoardRecord":
        if len(self.goals) != self.size * self.size:
            raise ValueError(
                f"{self.size}x{self.size} board needs {self.size * self.size} goals, "
                f"got {len(self.goals)}"
            )
        limit = max_lines(self.size)
        if self.target_bingo_lines > limit:
            raise ValueError(
                f"Target of {self.target_bingo_lines} lines is more than the {limit} "
                f"a {self.size}x{self.size} board has"
            )
        if self.completed_lines > limit:
            raise ValueError(
                f"{self.completed_lines} completed lines is more than the {limit} "
                f"a {self.size}x{self.size} board has"
            )
        return self

    @classmethod
    def from_board(cls, board: Board) -> "BoardRecord":
        return cls(
            user_name=board.user_name,
            size=board.size,
            target_bingo_lines=board.target_bingo_lines,
            completed_lines=board.completed_lines,
            goals=[GoalRecord.from_goal(goal) for goal in board.goals],
        )

    def to_board(self) -> Board:
        return Board(
            user_name=self.user_name,
            size=self.size,
            target_bingo_lines=self.target_bingo_lines,
            completed_lines=self.completed_lines,
            goals=tuple(record.to_goal() for record in self.goals),
        )


class Snapshot(BaseModel):
    """The single saved record: board plus stage."""

    board: Optional[BoardRecord] = None
    stage: AppStage = AppStage.SETUP

    @model_validator(mode="after")
    def check_board_present(self) -> "Snapshot":
        if self.stage != AppStage.SETUP and self.board is None:
            raise ValueError(f"Stage {self.stage.value} needs a board")
        return self

    @classmethod
    def from_state(cls, state: AppState) -> "Snapshot":
        board = BoardRecord.from_board(state.board) if state.board else None
        return cls(board=board, stage=state.stage)

    def to_state(self) -> AppState:
        if self.stage == AppStage.SETUP:
            return AppState()
        return AppState(stage=self.stage, board=self.board.to_board())

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
