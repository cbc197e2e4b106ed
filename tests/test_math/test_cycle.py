"""Tests for the cycle state machine (math/cycle.py)."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from strength_engine.math.cycle import (
    analyze_break,
    circular_day_distance,
    cycle_week,
    day_targets,
    default_day_plan,
    find_planned_day,
    raw_adjustment,
    resolve_day_plan,
    set_count,
    upcoming_workouts,
)
from strength_engine.models.cycle import DayPlan, TrainingCycle, WeekPlan
from strength_engine.models.enums import BreakSeverity, DayType, Phase, PlanSource, SlotRole

from conftest import CYCLE_START


class TestCycleWeek:
    def test_week_boundaries(self, default_cycle) -> None:
        assert cycle_week(default_cycle, CYCLE_START) == 1
        assert cycle_week(default_cycle, CYCLE_START + timedelta(days=6)) == 1
        assert cycle_week(default_cycle, CYCLE_START + timedelta(days=7)) == 2
        assert cycle_week(default_cycle, CYCLE_START + timedelta(days=27)) == 4

    def test_past_last_week_has_ended(self, default_cycle) -> None:
        assert cycle_week(default_cycle, CYCLE_START + timedelta(days=28)) is None

    def test_before_start(self, default_cycle) -> None:
        assert cycle_week(default_cycle, CYCLE_START - timedelta(days=1)) is None

    def test_no_cycle(self) -> None:
        assert cycle_week(None, CYCLE_START) is None


class TestPlannedDay:
    def test_circular_distance(self) -> None:
        assert circular_day_distance(1, 7) == 1
        assert circular_day_distance(1, 5) == 3
        assert circular_day_distance(3, 3) == 0

    def test_exact_match(self, default_cycle) -> None:
        plan, exact = find_planned_day(default_cycle, 1, 3)
        assert exact
        assert plan is not None and plan.day_type is DayType.VOLUME

    @pytest.mark.parametrize(
        "weekday, expected_day",
        [(2, 1), (4, 3), (6, 5), (7, 1)],
    )
    def test_nearest_with_lower_weekday_tie_break(self, default_cycle, weekday: int, expected_day: int) -> None:
        plan, exact = find_planned_day(default_cycle, 1, weekday)
        assert not exact
        assert plan is not None and plan.day_of_week == expected_day

    def test_week_without_plan(self) -> None:
        bare = TrainingCycle("bare", CYCLE_START, week_definitions=())
        assert find_planned_day(bare, 1, 1) == (None, False)


class TestDayPlanResolution:
    def test_exact(self, default_cycle) -> None:
        resolution = resolve_day_plan(default_cycle, 1, 1, DayType.HEAVY, default_cycle.week_definition(1))
        assert resolution.source is PlanSource.EXACT
        assert resolution.plan.day_of_week == 1

    def test_nearest(self, default_cycle) -> None:
        resolution = resolve_day_plan(default_cycle, 1, 2, DayType.HEAVY, default_cycle.week_definition(1))
        assert resolution.source is PlanSource.NEAREST
        assert resolution.plan.day_of_week == 1

    def test_changed_day_type_keeps_planned_day(self, default_cycle) -> None:
        resolution = resolve_day_plan(default_cycle, 1, 1, DayType.VOLUME, default_cycle.week_definition(1))
        assert resolution.source is PlanSource.EXACT
        assert resolution.plan is default_cycle.week_plan(1).days[0]

    def test_planned_day_without_slots_generates_plan(self) -> None:
        cycle = TrainingCycle(
            "empty-day",
            CYCLE_START,
            week_definitions=(),
            week_plans=(WeekPlan(week=1, days=(DayPlan(DayType.HEAVY, day_of_week=1),)),),
        )
        resolution = resolve_day_plan(cycle, 1, 1, DayType.VOLUME, None)
        assert resolution.source is PlanSource.GENERATED
        assert resolution.plan.day_type is DayType.VOLUME
        assert resolution.plan.day_of_week is None

    def test_no_planned_week(self) -> None:
        bare = TrainingCycle("bare", CYCLE_START, week_definitions=())
        resolution = resolve_day_plan(bare, 1, 1, DayType.HEAVY, None)
        assert resolution.source is PlanSource.GENERATED
        assert resolution.plan.primary_slot is not None


class TestDefaultDayPlan:
    def test_heavy_day_uses_week_targets(self, default_cycle) -> None:
        plan = default_day_plan(DayType.HEAVY, default_cycle.week_definition(3))
        primary = plan.primary_slot
        assert primary is not None
        assert (primary.sets, primary.reps, primary.target_effort) == (3, 2, 1)
        assert sum(1 for s in plan.slots if s.role is SlotRole.ACCESSORY) == 3

    def test_rest_day_has_no_slots(self) -> None:
        plan = default_day_plan(DayType.REST, None)
        assert plan.slots == ()
        assert plan.primary_slot is None


class TestTargetsAndCoefficients:
    def test_day_targets(self, default_cycle) -> None:
        week3 = default_cycle.week_definition(3)
        assert day_targets(DayType.HEAVY, week3) == (2, 1)
        assert day_targets(DayType.VOLUME, week3) == (5, 3)
        assert day_targets(DayType.SPEED, week3) == (2, 4)
        assert day_targets(DayType.REST, week3) == (None, None)
        assert day_targets(DayType.HEAVY, None) == (3, 2)

    def test_set_count(self) -> None:
        assert set_count(DayType.HEAVY) == 3
        assert set_count(DayType.VOLUME) == 4
        assert set_count(DayType.REST) == 0

    def test_raw_adjustment_scales_by_day_type(self, default_cycle) -> None:
        week2 = default_cycle.week_definition(2)
        assert raw_adjustment(week2, DayType.HEAVY) == pytest.approx(0.025)
        assert raw_adjustment(week2, DayType.VOLUME) == pytest.approx(0.015)
        assert raw_adjustment(week2, DayType.SPEED) == pytest.approx(0.01)
        assert raw_adjustment(default_cycle.week_definition(4), DayType.HEAVY) == pytest.approx(-0.25)
        assert raw_adjustment(None, DayType.HEAVY) == 0.0


class TestBreakAnalysis:
    today = date(2024, 4, 1)

    def test_no_history(self) -> None:
        info = analyze_break(None, self.today)
        assert info.days is None
        assert info.modifier == 0.0
        assert not info.reset_cycle

    def test_under_a_week(self) -> None:
        info = analyze_break(self.today - timedelta(days=6), self.today)
        assert info.severity is BreakSeverity.NONE
        assert info.modifier == 0.0

    def test_one_week(self) -> None:
        info = analyze_break(self.today - timedelta(days=7), self.today)
        assert info.severity is BreakSeverity.SHORT
        assert info.modifier == pytest.approx(-0.05)
        assert info.forced_day_type is None
        assert not info.reset_cycle

    def test_two_weeks_forces_volume_and_reset(self) -> None:
        info = analyze_break(self.today - timedelta(days=14), self.today)
        assert info.severity is BreakSeverity.EXTENDED
        assert info.modifier == pytest.approx(-0.10)
        assert info.forced_day_type is DayType.VOLUME
        assert info.skipped_weeks == 2
        assert info.reset_cycle

    def test_four_weeks(self) -> None:
        info = analyze_break(self.today - timedelta(days=30), self.today)
        assert info.severity is BreakSeverity.LONG
        assert info.modifier == pytest.approx(-0.15)
        assert info.message is not None


class TestUpcomingWorkouts:
    def test_two_weeks_of_planned_days(self, default_cycle) -> None:
        workouts = upcoming_workouts(default_cycle, CYCLE_START, days_ahead=14)
        assert [w.on.isoweekday() for w in workouts] == [3, 5, 1, 3, 5, 1]
        assert workouts[2].week == 2
        assert workouts[2].phase is Phase.LOADING
        assert workouts[2].base_adjustment == pytest.approx(0.025)

    def test_stops_at_cycle_end(self, default_cycle) -> None:
        last_friday = CYCLE_START + timedelta(days=25)
        assert upcoming_workouts(default_cycle, last_friday, days_ahead=14) == []

    def test_no_cycle(self) -> None:
        assert upcoming_workouts(None, CYCLE_START) == []
