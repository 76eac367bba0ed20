"""Tests for goal completion rules."""

from datetime import date

import pytest

from goal_bingo.board import goals
from goal_bingo.board.errors import (
    GoalTypeMismatch,
    InvalidDate,
    InvalidRange,
    ValidationError,
)
from goal_bingo.board.models import CountGoal, GeneralGoal, GoalType, HabitGoal


class TestCountGoals:
    def test_completes_exactly_on_reaching_target(self):
        goal = CountGoal(id="goal-0", title="Read books", target_count=3)

        results = []
        for _ in range(3):
            goal = goals.apply_count_delta(goal, 1)
            results.append(goal.is_completed)

        assert results == [False, False, True]
        assert goal.current_count == 3

    def test_never_goes_negative(self):
        goal = CountGoal(id="goal-0", target_count=3, current_count=2)

        goal = goals.apply_count_delta(goal, -10)
        assert goal.current_count == 0

        goal = goals.apply_count_delta(goal, -1)
        assert goal.current_count == 0
        assert not goal.is_completed

    def test_decrement_below_target_clears_completion(self):
        goal = CountGoal(id="goal-0", target_count=3, current_count=3, is_completed=True)

        goal = goals.apply_count_delta(goal, -1)
        assert goal.current_count == 2
        assert not goal.is_completed

    def test_decrement_above_target_stays_completed(self):
        goal = CountGoal(id="goal-0", target_count=2, current_count=4, is_completed=True)

        assert goals.apply_count_delta(goal, -1).is_completed

    def test_input_goal_is_not_modified(self):
        goal = CountGoal(id="goal-0", target_count=1)
        updated = goals.apply_count_delta(goal, 1)

        assert goal.current_count == 0
        assert not goal.is_completed
        assert updated is not goal

    def test_rejects_other_goal_types(self):
        with pytest.raises(GoalTypeMismatch):
            goals.apply_count_delta(GeneralGoal(id="goal-0"), 1)

    def test_target_change_rederives_completion(self):
        goal = CountGoal(id="goal-0", target_count=5, current_count=3)

        assert goals.set_target_count(goal, 3).is_completed
        assert not goals.set_target_count(goal, 4).is_completed

        with pytest.raises(ValidationError):
            goals.set_target_count(goal, 0)


class TestHabitGoals:
    def test_toggle_is_its_own_inverse(self):
        goal = HabitGoal(id="goal-0", habit_dates=frozenset({"2024-05-02"}))

        once = goals.apply_habit_toggle(goal, "2024-05-01")
        assert once.habit_dates == {"2024-05-01", "2024-05-02"}

        twice = goals.apply_habit_toggle(once, "2024-05-01")
        assert twice.habit_dates == goal.habit_dates

    def test_toggle_does_not_complete_goal(self):
        goal = HabitGoal(id="goal-0")
        for day in range(1, 32):
            goal = goals.apply_habit_toggle(goal, f"2024-05-{day:02d}")

        assert len(goal.habit_dates) == 31
        assert not goal.is_completed

    def test_toggle_keeps_manual_completion(self):
        goal = goals.apply_manual_toggle(HabitGoal(id="goal-0"))
        goal = goals.apply_habit_toggle(goal, "2024-05-01")

        assert goal.is_completed

    def test_rejects_bad_date_keys(self):
        with pytest.raises(InvalidDate):
            goals.apply_habit_toggle(HabitGoal(id="goal-0"), "May 1st")

    def test_rejects_other_goal_types(self):
        with pytest.raises(GoalTypeMismatch):
            goals.apply_habit_toggle(CountGoal(id="goal-0"), "2024-05-01")

    def test_days_in_month(self):
        goal = HabitGoal(
            id="goal-0",
            habit_dates=frozenset({"2024-05-01", "2024-05-31", "2024-06-01"}),
        )

        assert goals.habit_days_in_month(goal, 2024, 5) == 2
        assert goals.habit_days_in_month(goal, 2024, 6) == 1
        assert goals.habit_days_in_month(goal, 2023, 5) == 0
        assert goals.habit_days_in_month(GeneralGoal(id="goal-1"), 2024, 5) == 0


class TestMonthCalendar:
    def test_month_starting_on_sunday_has_no_padding(self):
        days = goals.month_calendar(2024, 9)

        assert days[0] == "2024-09-01"
        assert len(days) == 30

    def test_leading_days_are_padded(self):
        # 1 February 2024 was a Thursday
        days = goals.month_calendar(2024, 2)

        assert days[:4] == [None, None, None, None]
        assert days[4] == "2024-02-01"
        assert days[-1] == "2024-02-29"


def test_manual_toggle_flips_any_goal():
    for goal in (GeneralGoal(id="a"), CountGoal(id="b"), HabitGoal(id="c")):
        toggled = goals.apply_manual_toggle(goal)
        assert toggled.is_completed
        assert goals.apply_manual_toggle(toggled) == goal


class TestDateRange:
    def test_sets_both_dates(self):
        goal = goals.set_date_range(GeneralGoal(id="a"), "2024-01-01", "2024-06-30")

        assert (goal.start_date, goal.end_date) == ("2024-01-01", "2024-06-30")

    def test_start_after_end_is_rejected(self):
        with pytest.raises(InvalidRange):
            goals.set_date_range(GeneralGoal(id="a"), "2024-07-01", "2024-06-30")

    def test_validation_can_be_skipped(self):
        goal = goals.set_date_range(
            GeneralGoal(id="a"), "2024-07-01", "2024-06-30", validate=False
        )
        assert goal.start_date == "2024-07-01"

    def test_blank_dates_are_allowed(self):
        goal = goals.set_date_range(GeneralGoal(id="a"), "", "2024-06-30")
        assert goal.start_date == ""

    @pytest.mark.parametrize(
        "start, end",
        [("garbage", ""), ("", "garbage"), ("2024-02-30", "2024-06-30")],
    )
    def test_single_bad_date_is_rejected(self, start, end):
        with pytest.raises(InvalidDate):
            goals.set_date_range(GeneralGoal(id="a"), start, end)

    def test_dates_are_stored_canonically(self):
        goal = goals.set_date_range(GeneralGoal(id="a"), " 2024-01-01 ", "   ")

        assert (goal.start_date, goal.end_date) == ("2024-01-01", "")

    def test_unvalidated_dates_are_stored_as_given(self):
        goal = goals.set_date_range(GeneralGoal(id="a"), "garbage", "", validate=False)
        assert goal.start_date == "garbage"


class TestChangeGoalType:
    def test_keeps_common_fields(self):
        goal = GeneralGoal(
            id="goal-3",
            title="Run",
            start_date="2024-01-01",
            end_date="2024-12-31",
            notes="5k",
            is_completed=True,
        )

        counted = goals.change_goal_type(goal, GoalType.COUNT)

        assert isinstance(counted, CountGoal)
        assert (counted.id, counted.title, counted.notes) == ("goal-3", "Run", "5k")
        assert counted.end_date == "2024-12-31"
        assert (counted.current_count, counted.target_count) == (0, 1)
        assert not counted.is_completed

    def test_to_habit_starts_empty(self):
        habit = goals.change_goal_type(CountGoal(id="a", current_count=4), "habit")

        assert isinstance(habit, HabitGoal)
        assert habit.habit_dates == frozenset()

    def test_same_type_is_unchanged(self):
        goal = CountGoal(id="a", current_count=2, is_completed=True)
        assert goals.change_goal_type(goal, GoalType.COUNT) is goal


def test_new_goal_defaults():
    goal = goals.new_goal(4, today=date(2024, 1, 1))

    assert goal.id == "goal-4"
    assert goal.title == ""
    assert goal.type == GoalType.GENERAL
    assert goal.start_date == "2024-01-01"
    assert goal.end_date == "2024-12-31"
    assert not goal.is_completed


def test_set_title_strips_whitespace():
    assert goals.set_title(GeneralGoal(id="a"), "  Learn piano ").title == "Learn piano"
