"""Main FastAPI application."""

import logging
from datetime import MAXYEAR, MINYEAR, datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from .board import flow, goals
from .board.errors import ValidationError
from .board.lines import max_lines
from .board.models import AppState
from .config import settings
from .dashboard.renderer import BoardRenderer
from .schemas import CountDelta, GoalUpdate, HabitDay, SetupRequest, StateResponse
from .storage.database import SnapshotStore
from .storage.models import BoardRecord

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Goal Bingo",
    description="Personal goal tracking on a bingo board",
    version="1.0.0",
)


class BoardSession:
    """Holds the current board state and saves it after every change."""

    def __init__(self, store: SnapshotStore):
        """Load the last saved state, or start at setup."""
        self.store = store
        self.state: AppState = store.load() or AppState()

    def commit(self, state: AppState) -> AppState:
        """Replace the current state and persist it."""
        self.state = state
        self.store.save(state)
        return state


# Initialize components
session = BoardSession(SnapshotStore(settings.storage_path))
renderer = BoardRenderer(settings.image_dir)

# Mount rendered images
app.mount("/images", StaticFiles(directory=settings.image_dir), name="images")


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Report rejected actions back to the user."""
    logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=400,
        content={"status": "error", "error": type(exc).__name__, "message": str(exc)},
    )


def state_response(state: AppState) -> StateResponse:
    """Build the state payload the front-end renders from."""
    board = state.board
    return StateResponse(
        stage=state.stage,
        board=BoardRecord.from_board(board) if board else None,
        reached_target=flow.has_reached_target(board) if board else False,
        celebrate=flow.should_celebrate(state),
        max_lines=max_lines(board.size) if board else None,
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Goal Bingo",
        "version": "1.0.0",
        "endpoints": {
            "state": "/api/state",
            "setup": "/api/setup",
            "goals": "/api/goals/{index}",
            "start": "/api/start",
            "reset": "/api/reset",
            "image": "/api/board.png",
            "status": "/status",
        },
    }


@app.get("/status")
async def status():
    """Server status endpoint."""
    return {
        "status": "running",
        "version": "1.0.0",
        "timestamp": datetime.utcnow().isoformat(),
        "stage": session.state.stage.value,
        "storage_path": settings.storage_path,
    }


_STATE_OPTIONS = dict(
    response_model=StateResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)


@app.get("/api/state", **_STATE_OPTIONS)
async def get_state():
    """Current stage, board and win status."""
    return state_response(session.state)


@app.post("/api/setup", **_STATE_OPTIONS)
async def setup_endpoint(body: SetupRequest):
    """
    Create a board and move on to filling in goals.

    Rejects a blank name, an unknown grid size or an unreachable target.
    """
    logger.info(f"Setup request from {body.user_name}: {body.size}x{body.size}")

    state = flow.start_filling(
        session.state,
        body.user_name,
        body.size,
        body.target_bingo_lines,
        duration_days=settings.default_goal_duration_days,
    )
    return state_response(session.commit(state))


@app.put("/api/goals/{index}", **_STATE_OPTIONS)
async def edit_goal_endpoint(index: int, body: GoalUpdate):
    """Edit a goal's definition, notes or period."""
    state = flow.edit_goal(
        session.state,
        index,
        title=body.title,
        goal_type=body.type,
        target_count=body.target_count,
        notes=body.notes,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    return state_response(session.commit(state))


@app.post("/api/start", **_STATE_OPTIONS)
async def start_endpoint():
    """Finish filling in goals and start the board."""
    state = flow.activate(session.state)
    return state_response(session.commit(state))


@app.post("/api/goals/{index}/toggle", **_STATE_OPTIONS)
async def toggle_endpoint(index: int):
    """Mark a goal as done, or undo it."""
    state = flow.record_progress(session.state, index, goals.apply_manual_toggle)
    return state_response(session.commit(state))


@app.post("/api/goals/{index}/count", **_STATE_OPTIONS)
async def count_endpoint(index: int, body: CountDelta):
    """Move a counter goal up or down."""
    state = flow.record_progress(session.state, index, goals.apply_count_delta, body.delta)
    return state_response(session.commit(state))


@app.post("/api/goals/{index}/habit", **_STATE_OPTIONS)
async def habit_endpoint(index: int, body: HabitDay):
    """Check or uncheck a habit day."""
    state = flow.record_progress(session.state, index, goals.apply_habit_toggle, body.date)
    return state_response(session.commit(state))


@app.get("/api/goals/{index}/calendar")
async def calendar_endpoint(index: int, year: Optional[int] = None, month: Optional[int] = None):
    """Month grid for a habit goal with the checked days marked."""
    goal = flow.goal_at(session.state, index)

    today = datetime.now()
    year = today.year if year is None else year
    month = today.month if month is None else month
    if not MINYEAR <= year <= MAXYEAR or not 1 <= month <= 12:
        raise ValidationError(f"No such month: {year}-{month}")

    checked = getattr(goal, "habit_dates", frozenset())
    return {
        "year": year,
        "month": month,
        "days": [
            {"date": key, "checked": key in checked} if key else None
            for key in goals.month_calendar(year, month)
        ],
        "checkedDays": goals.habit_days_in_month(goal, year, month),
    }


@app.post("/api/celebration/ack", **_STATE_OPTIONS)
async def acknowledge_endpoint():
    """Dismiss the win celebration and keep going."""
    state = flow.acknowledge_win(session.state)
    return state_response(session.commit(state))


@app.post("/api/reset", **_STATE_OPTIONS)
async def reset_endpoint():
    """Discard the board and go back to setup."""
    return state_response(session.commit(flow.reset()))


@app.get("/api/board.png")
async def board_image_endpoint():
    """Render the current board as a PNG."""
    if session.state.board is None:
        raise ValidationError("There is no board yet")

    filename, file_path = renderer.render(session.state.board)
    logger.info(f"Serving board image: {filename}")
    return FileResponse(file_path, media_type="image/png")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
