"""Training cycle — 4 week definitions plus a week → day → slot plan.

A cycle is an immutable value. The engine never patches one; it replaces
it wholesale (new cycle, rollover, or reset after a long break).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date

from strength_engine.models.enums import (
    BREAK_RESET_WEEKS,
    CYCLE_WEEKS,
    DAYS_PER_WEEK,
    BreakSeverity,
    DayType,
    Phase,
    SlotRole,
)


@dataclass(frozen=True)
class WeekDefinition:
    """Phase label, base load coefficient and heavy-day targets for one week."""

    week: int
    phase: Phase
    base_adjustment: float
    heavy_reps: int
    heavy_effort: int


@dataclass(frozen=True)
class Slot:
    """One exercise slot in a day plan."""

    role: SlotRole
    category: str
    movement_name: str
    sets: int
    reps: int
    target_effort: int | None = None


@dataclass(frozen=True)
class DayPlan:
    """Planned slots for one weekday (1=Monday, 7=Sunday).

    ``day_of_week`` is None for synthesized plans.
    """

    day_type: DayType
    slots: tuple[Slot, ...] = field(default_factory=tuple)
    day_of_week: int | None = None

    @property
    def primary_slot(self) -> Slot | None:
        for slot in self.slots:
            if slot.role is SlotRole.PRIMARY:
                return slot
        return None


@dataclass(frozen=True)
class WeekPlan:
    week: int
    days: tuple[DayPlan, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TrainingCycle:
    """The single active training cycle."""

    cycle_id: str
    start_date: date
    week_definitions: tuple[WeekDefinition, ...]
    week_plans: tuple[WeekPlan, ...] = field(default_factory=tuple)
    week_count: int = CYCLE_WEEKS

    def week_definition(self, week: int) -> WeekDefinition | None:
        for definition in self.week_definitions:
            if definition.week == week:
                return definition
        return None

    def week_plan(self, week: int) -> WeekPlan | None:
        for plan in self.week_plans:
            if plan.week == week:
                return plan
        return None


@dataclass(frozen=True)
class BreakInfo:
    """Outcome of the return-from-break analysis."""

    days: int | None
    modifier: float = 0.0
    forced_day_type: DayType | None = None
    severity: BreakSeverity = BreakSeverity.NONE
    message: str | None = None

    @property
    def skipped_weeks(self) -> int:
        return (self.days or 0) // DAYS_PER_WEEK

    @property
    def reset_cycle(self) -> bool:
        """True when two or more full weeks were skipped."""
        return self.skipped_weeks >= BREAK_RESET_WEEKS


# ---------------------------------------------------------------------------
# Default cycle
# ---------------------------------------------------------------------------

_DEFAULT_WEEK_DEFINITIONS = (
    WeekDefinition(week=1, phase=Phase.ADAPTATION, base_adjustment=0.0, heavy_reps=3, heavy_effort=2),
    WeekDefinition(week=2, phase=Phase.LOADING, base_adjustment=0.025, heavy_reps=3, heavy_effort=2),
    WeekDefinition(week=3, phase=Phase.OVERREACH, base_adjustment=0.05, heavy_reps=2, heavy_effort=1),
    WeekDefinition(week=4, phase=Phase.DELOAD, base_adjustment=-0.25, heavy_reps=3, heavy_effort=4),
)

PRIMARY_CATEGORY = "vertical_pull"
PRIMARY_MOVEMENT_NAME = "Weighted pull-up"


def _primary(sets: int, reps: int, effort: int) -> Slot:
    return Slot(SlotRole.PRIMARY, PRIMARY_CATEGORY, PRIMARY_MOVEMENT_NAME, sets, reps, effort)


def _accessory(category: str, name: str, sets: int, reps: int, effort: int | None) -> Slot:
    return Slot(SlotRole.ACCESSORY, category, name, sets, reps, effort)


def _loading_week(week: int, overreach: bool) -> WeekPlan:
    """Weeks 1-3: heavy Monday, volume Wednesday, heavy Friday."""
    heavy_reps, heavy_effort = (2, 1) if overreach else (3, 2)
    accessory_effort = 2 if overreach else 3
    volume_primary = _primary(4, 4, 2) if overreach else _primary(5, 5, 3)
    return WeekPlan(
        week=week,
        days=(
            DayPlan(
                day_of_week=1,
                day_type=DayType.HEAVY,
                slots=(
                    _primary(3, heavy_reps, heavy_effort),
                    _accessory("horizontal_push", "Bench press", 4, 6, accessory_effort),
                    _accessory("horizontal_pull", "Chest-supported row", 3, 8, accessory_effort),
                    _accessory("elbow_flexion", "Barbell curl", 3, 10, None),
                ),
            ),
            DayPlan(
                day_of_week=3,
                day_type=DayType.VOLUME,
                slots=(
                    volume_primary,
                    _accessory("vertical_push", "Overhead press", 4, 8, 3),
                    _accessory("vertical_pull", "Lat pulldown", 3, 10, 3),
                    _accessory("elbow_extension", "Tricep pushdown", 3, 12, None),
                ),
            ),
            DayPlan(
                day_of_week=5,
                day_type=DayType.HEAVY,
                slots=(
                    _primary(3, heavy_reps, heavy_effort),
                    _accessory("horizontal_push", "Chest press", 4, 8, accessory_effort),
                    _accessory("horizontal_pull", "Seated cable row", 3, 10, accessory_effort),
                    _accessory("elbow_flexion", "Hammer curl", 3, 10, None),
                ),
            ),
        ),
    )


def _deload_week(week: int) -> WeekPlan:
    return WeekPlan(
        week=week,
        days=(
            DayPlan(
                day_of_week=1,
                day_type=DayType.HEAVY,
                slots=(
                    _primary(3, 3, 4),
                    _accessory("horizontal_push", "Bench press", 3, 6, 4),
                    _accessory("horizontal_pull", "Chest-supported row", 3, 8, 4),
                ),
            ),
            DayPlan(
                day_of_week=3,
                day_type=DayType.VOLUME,
                slots=(
                    _primary(3, 5, 4),
                    _accessory("vertical_push", "Overhead press", 3, 8, 4),
                    _accessory("vertical_pull", "Lat pulldown", 3, 10, 4),
                ),
            ),
            DayPlan(day_of_week=5, day_type=DayType.SPEED, slots=(_primary(4, 2, 4),)),
        ),
    )


def create_default_cycle(start_date: date, cycle_id: str | None = None) -> TrainingCycle:
    """Build the standard 4-week cycle anchored at ``start_date``."""
    return TrainingCycle(
        cycle_id=cycle_id or uuid.uuid4().hex,
        start_date=start_date,
        week_definitions=_DEFAULT_WEEK_DEFINITIONS,
        week_plans=(
            _loading_week(1, overreach=False),
            _loading_week(2, overreach=False),
            _loading_week(3, overreach=True),
            _deload_week(4),
        ),
    )
