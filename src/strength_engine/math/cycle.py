"""Cycle state machine: date → week/day, break handling, day-plan resolution.

The cycle is a fixed 4-week block. A date past the last week means the
cycle has ended (there is no week 5); the engine then starts a new cycle
anchored at that date. A break of two or more full weeks discards the
cycle entirely instead of resuming mid-cycle.

References:
    Mujika & Padilla (2000). Detraining: loss of training-induced
    physiological and performance adaptations. Sports Med 30(2):79-87.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from strength_engine.models.cycle import (
    PRIMARY_CATEGORY,
    PRIMARY_MOVEMENT_NAME,
    BreakInfo,
    DayPlan,
    Slot,
    TrainingCycle,
    WeekDefinition,
)
from strength_engine.models.enums import (
    BREAK_THRESHOLDS,
    DAY_TYPE_MULTIPLIERS,
    DAY_TYPE_SET_COUNTS,
    DAYS_PER_WEEK,
    FALLBACK_TARGETS,
    SPEED_TARGETS,
    VOLUME_TARGETS,
    BreakSeverity,
    DayType,
    Phase,
    PlanSource,
    SlotRole,
)


# Primary-slot sets in synthesized day plans
_DEFAULT_PRIMARY_SETS = {
    DayType.HEAVY: 3,
    DayType.VOLUME: 5,
    DayType.SPEED: 4,
    DayType.ACCESSORY: 3,
}


def cycle_week(cycle: TrainingCycle | None, on: date) -> int | None:
    """1-indexed week of ``cycle`` containing ``on``.

    None when there is no cycle, the date precedes its start, or the cycle
    has ended.
    """
    if cycle is None:
        return None
    days = (on - cycle.start_date).days
    if days < 0:
        return None
    week = days // DAYS_PER_WEEK + 1
    if week > cycle.week_count:
        return None
    return week


def circular_day_distance(a: int, b: int) -> int:
    """Distance between two ISO weekdays going either way round the week."""
    diff = abs(a - b)
    return min(diff, DAYS_PER_WEEK - diff)


def find_planned_day(
    cycle: TrainingCycle, week: int, day_of_week: int
) -> tuple[DayPlan | None, bool]:
    """First two stages of day-plan resolution.

    1. exact weekday match;
    2. nearest planned day by circular weekday distance, ties broken by
       the lower weekday number.

    Returns ``(plan, exact)``; ``(None, False)`` when the week has no
    planned days.
    """
    week_plan = cycle.week_plan(week)
    if week_plan is None or not week_plan.days:
        return None, False
    for day in week_plan.days:
        if day.day_of_week == day_of_week:
            return day, True
    candidates = [d for d in week_plan.days if d.day_of_week is not None]
    if not candidates:
        return week_plan.days[0], False
    nearest = min(
        candidates,
        key=lambda d: (circular_day_distance(d.day_of_week, day_of_week), d.day_of_week),  # type: ignore[arg-type]
    )
    return nearest, False


def default_day_plan(day_type: DayType, week_definition: WeekDefinition | None) -> DayPlan:
    """Synthesize a day plan when the cycle has none for the week.

    Third stage of day-plan resolution; always succeeds, so a prescription
    can always be produced.
    """
    primary_reps, primary_effort = day_targets(day_type, week_definition)
    if day_type is DayType.REST:
        return DayPlan(day_type=day_type)
    primary_sets = _DEFAULT_PRIMARY_SETS[day_type]

    slots = [
        Slot(
            SlotRole.PRIMARY,
            PRIMARY_CATEGORY,
            PRIMARY_MOVEMENT_NAME,
            primary_sets,
            primary_reps or 0,
            primary_effort,
        )
    ]
    if day_type is DayType.HEAVY:
        slots += [
            Slot(SlotRole.ACCESSORY, "horizontal_push", "Bench press", 4, 6, 3),
            Slot(SlotRole.ACCESSORY, "horizontal_pull", "Chest-supported row", 3, 8, 3),
            Slot(SlotRole.ACCESSORY, "elbow_flexion", "Barbell curl", 3, 10, None),
        ]
    elif day_type is DayType.VOLUME:
        slots += [
            Slot(SlotRole.ACCESSORY, "vertical_push", "Overhead press", 4, 8, 3),
            Slot(SlotRole.ACCESSORY, "vertical_pull", "Lat pulldown", 3, 10, 3),
            Slot(SlotRole.ACCESSORY, "elbow_extension", "Tricep pushdown", 3, 12, None),
        ]
    elif day_type is DayType.SPEED:
        slots += [
            Slot(SlotRole.ACCESSORY, "horizontal_pull", "Seated cable row", 3, 10, 4),
            Slot(SlotRole.ACCESSORY, "elbow_flexion", "Hammer curl", 2, 10, None),
        ]
    return DayPlan(day_type=day_type, slots=tuple(slots))


def day_targets(
    day_type: DayType, week_definition: WeekDefinition | None
) -> tuple[int | None, int | None]:
    """(reps, effort distance) for the primary movement on ``day_type``."""
    if day_type is DayType.REST:
        return None, None
    if week_definition is None:
        return FALLBACK_TARGETS
    if day_type is DayType.HEAVY:
        return week_definition.heavy_reps, week_definition.heavy_effort
    if day_type is DayType.VOLUME:
        return VOLUME_TARGETS
    return SPEED_TARGETS


def set_count(day_type: DayType) -> int:
    """Primary-movement working sets for ``day_type``."""
    return DAY_TYPE_SET_COUNTS[day_type]


def raw_adjustment(week_definition: WeekDefinition | None, day_type: DayType) -> float:
    """Phase coefficient scaled by the day-type multiplier."""
    if week_definition is None:
        return 0.0
    return week_definition.base_adjustment * DAY_TYPE_MULTIPLIERS[day_type]


_BREAK_MESSAGES = {
    BreakSeverity.SHORT: "One-week break: starting slightly lighter.",
    BreakSeverity.EXTENDED: "Two-week break: volume day first.",
    BreakSeverity.LONG: "Long break: starting conservatively, back to normal over 1-2 weeks.",
}

_SEVERITY_BY_DAYS = {
    28: BreakSeverity.LONG,
    14: BreakSeverity.EXTENDED,
    7: BreakSeverity.SHORT,
}


def analyze_break(last_session: date | None, today: date) -> BreakInfo:
    """Load modifier and forced day type after time away from training.

    <7 days: none; 7-13: -5 %; 14-27: -10 % and a volume day; 28+: -15 %
    and a volume day.
    """
    if last_session is None:
        return BreakInfo(days=None)
    days = (today - last_session).days
    for min_days, modifier, forced in BREAK_THRESHOLDS:
        if days >= min_days:
            severity = _SEVERITY_BY_DAYS[min_days]
            return BreakInfo(
                days=days,
                modifier=modifier,
                forced_day_type=forced,
                severity=severity,
                message=_BREAK_MESSAGES[severity],
            )
    return BreakInfo(days=days)


@dataclass(frozen=True)
class UpcomingWorkout:
    """Planned (not prescribed) workout on a future date."""

    on: date
    day_of_week: int
    week: int
    phase: Phase | None
    base_adjustment: float
    day_plan: DayPlan


def upcoming_workouts(
    cycle: TrainingCycle | None, today: date, days_ahead: int = 14
) -> list[UpcomingWorkout]:
    """Exact-match planned days in the current cycle over the next ``days_ahead`` days.

    Dates past the cycle's end, and weekdays without a planned day, are
    skipped.
    """
    if cycle is None:
        return []
    workouts: list[UpcomingWorkout] = []
    for offset in range(1, days_ahead + 1):
        on = today + timedelta(days=offset)
        week = cycle_week(cycle, on)
        if week is None:
            continue
        week_plan = cycle.week_plan(week)
        if week_plan is None:
            continue
        weekday = on.isoweekday()
        day = next((d for d in week_plan.days if d.day_of_week == weekday), None)
        if day is None:
            continue
        definition = cycle.week_definition(week)
        workouts.append(
            UpcomingWorkout(
                on=on,
                day_of_week=weekday,
                week=week,
                phase=definition.phase if definition else None,
                base_adjustment=definition.base_adjustment if definition else 0.0,
                day_plan=day,
            )
        )
    return workouts


@dataclass(frozen=True)
class DayPlanResolution:
    plan: DayPlan
    source: PlanSource


def resolve_day_plan(
    cycle: TrainingCycle,
    week: int,
    day_of_week: int,
    day_type: DayType,
    week_definition: WeekDefinition | None,
) -> DayPlanResolution:
    """Three-stage day-plan resolver: exact weekday, nearest day, synthesized default.

    A planned day with slots is kept as-is even when a break or RED
    readiness changed the prescribed day type; ``day_type`` only shapes the
    synthesized default for a week with no usable plan.
    """
    planned, exact = find_planned_day(cycle, week, day_of_week)
    if planned is not None and planned.slots:
        return DayPlanResolution(planned, PlanSource.EXACT if exact else PlanSource.NEAREST)
    return DayPlanResolution(default_day_plan(day_type, week_definition), PlanSource.GENERATED)
