"""Goal completion rules.

Every function here takes a goal and returns a new one. Goals are frozen, so
the caller can compare old and new values to see what changed.
"""

import calendar
import logging
from dataclasses import asdict, replace
from datetime import date, timedelta
from typing import Optional

from .errors import GoalTypeMismatch, InvalidDate, InvalidRange, ValidationError
from .models import GOAL_CLASSES, Goal, GoalType

logger = logging.getLogger(__name__)

DEFAULT_GOAL_DURATION_DAYS = 365

# Fields every goal variant carries
COMMON_FIELDS = ("id", "title", "start_date", "end_date", "notes", "is_completed")


def new_goal(
    index: int,
    today: Optional[date] = None,
    duration_days: int = DEFAULT_GOAL_DURATION_DAYS,
) -> Goal:
    """Create the blank goal for cell `index`."""
    today = today or date.today()
    return GOAL_CLASSES[GoalType.GENERAL](
        id=f"goal-{index}",
        start_date=today.isoformat(),
        end_date=(today + timedelta(days=duration_days)).isoformat(),
    )


def apply_manual_toggle(goal: Goal) -> Goal:
    """Flip the completed flag. Works for any goal type."""
    return replace(goal, is_completed=not goal.is_completed)


def apply_count_delta(goal: Goal, delta: int) -> Goal:
    """
    Move a counter goal up or down.

    The counter never drops below zero, and the goal is completed exactly
    when the counter is at or above the target. Decrementing under the
    target clears a completion, including one set by hand.
    """
    _require_type(goal, GoalType.COUNT)

    current_count = max(0, goal.current_count + delta)
    return replace(
        goal,
        current_count=current_count,
        is_completed=current_count >= goal.target_count,
    )


def apply_habit_toggle(goal: Goal, date_key: str) -> Goal:
    """
    Mark or unmark a habit day.

    Does not touch `is_completed`; finishing a habit goal is a separate
    manual action.
    """
    _require_type(goal, GoalType.HABIT)
    date_key = parse_date_key(date_key)

    if date_key in goal.habit_dates:
        habit_dates = goal.habit_dates - {date_key}
    else:
        habit_dates = goal.habit_dates | {date_key}

    return replace(goal, habit_dates=habit_dates)


def set_date_range(goal: Goal, start: str, end: str, validate: bool = True) -> Goal:
    """
    Set the goal period.

    Dates are ISO strings. Blank dates are allowed. With `validate`, each
    non-blank date must parse and is stored in canonical form, and a start
    after the end raises InvalidRange.
    """
    if validate:
        start = parse_date_key(start) if start.strip() else ""
        end = parse_date_key(end) if end.strip() else ""
        if start and end and start > end:
            raise InvalidRange(f"Start date {start} is after end date {end}")

    return replace(goal, start_date=start, end_date=end)


def set_title(goal: Goal, title: str) -> Goal:
    return replace(goal, title=title.strip())


def set_notes(goal: Goal, notes: str) -> Goal:
    return replace(goal, notes=notes)


def set_target_count(goal: Goal, target_count: int) -> Goal:
    """Change a counter's target and re-derive completion."""
    _require_type(goal, GoalType.COUNT)

    if target_count < 1:
        raise ValidationError(f"Target count must be at least 1, got {target_count}")

    return replace(
        goal,
        target_count=target_count,
        is_completed=goal.current_count >= target_count,
    )


def change_goal_type(goal: Goal, goal_type: GoalType) -> Goal:
    """
    Convert a goal to another completion mode.

    Title, dates and notes carry over. Type specific progress starts fresh
    and the goal is no longer completed.
    """
    goal_type = GoalType(goal_type)
    if goal.type == goal_type:
        return goal

    common = {name: value for name, value in asdict(goal).items() if name in COMMON_FIELDS}
    common["is_completed"] = False

    logger.debug(f"Goal {goal.id}: {goal.type.value} -> {goal_type.value}")
    return GOAL_CLASSES[goal_type](**common)


def parse_date_key(value: str) -> str:
    """Validate an ISO date key and return it in canonical form."""
    try:
        return date.fromisoformat(value.strip()).isoformat()
    except (ValueError, AttributeError) as e:
        raise InvalidDate(f"Not an ISO date (YYYY-MM-DD): {value!r}") from e


def month_calendar(year: int, month: int) -> list[Optional[str]]:
    """
    Build a month grid for the habit calendar.

    Weeks start on Sunday. Leading blanks before the first day are None,
    every other entry is the ISO key of that day.

    Example:
        month_calendar(2024, 9) starts with "2024-09-01" (a Sunday)
    """
    first_weekday, days_in_month = calendar.monthrange(year, month)

    # Python weekday: Monday=0, Sunday=6
    # Convert to: Sunday=0, Saturday=6
    padding = (first_weekday + 1) % 7

    days: list[Optional[str]] = [None] * padding
    days.extend(date(year, month, d).isoformat() for d in range(1, days_in_month + 1))
    return days


def habit_days_in_month(goal: Goal, year: int, month: int) -> int:
    """Count the recorded habit days that fall in the given month."""
    if goal.type != GoalType.HABIT:
        return 0

    prefix = f"{year:04d}-{month:02d}-"
    return sum(1 for key in goal.habit_dates if key.startswith(prefix))


def _require_type(goal: Goal, goal_type: GoalType):
    if goal.type != goal_type:
        raise GoalTypeMismatch(
            f"Goal {goal.id} is a {goal.type.value} goal, not a {goal_type.value} goal"
        )
