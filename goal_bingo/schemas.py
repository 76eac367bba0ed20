"""Request and response bodies for the board API."""

from typing import Optional

from pydantic import BaseModel, Field

from .board.models import AppStage, GoalType
from .storage.models import BoardRecord


class SetupRequest(BaseModel):
    """Body for /api/setup."""

    user_name: str = Field(..., alias="userName")
    size: int = 3
    target_bingo_lines: int = Field(1, alias="targetBingoLines")

    class Config:
        """Pydantic config."""

        populate_by_name = True


class GoalUpdate(BaseModel):
    """Body for PUT /api/goals/{index}. Missing fields stay unchanged."""

    title: Optional[str] = None
    type: Optional[GoalType] = None
    target_count: Optional[int] = Field(None, alias="targetCount")
    notes: Optional[str] = None
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")

    class Config:
        """Pydantic config."""

        populate_by_name = True


class CountDelta(BaseModel):
    """Body for /api/goals/{index}/count."""

    delta: int = 1


class HabitDay(BaseModel):
    """Body for /api/goals/{index}/habit."""

    date: str


class StateResponse(BaseModel):
    """Current board state as seen by the front-end."""

    stage: AppStage
    board: Optional[BoardRecord] = None
    reached_target: bool = Field(False, alias="reachedTarget")
    celebrate: bool = False
    max_lines: Optional[int] = Field(None, alias="maxLines")

    class Config:
        """Pydantic config."""

        populate_by_name = True
