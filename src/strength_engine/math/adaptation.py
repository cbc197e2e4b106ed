"""Adaptive slot volume: learn set counts from what the lifter actually did.

A session is compared slot by slot with its day plan. Doing two or more
sets beyond the plan suggests one more set next time; stopping short
suggests one fewer. Movements with no matching slot are reported as
candidates for the plan. Suggestions only reach the cycle once the same
pattern has shown up in at least two sessions, and the cycle is rebuilt
rather than patched.
"""

from __future__ import annotations

import dataclasses
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence

from strength_engine.models.cycle import DayPlan, TrainingCycle
from strength_engine.models.enums import (
    ADAPTATION_EXTRA_SETS,
    ADAPTATION_MAX_SETS,
    ADAPTATION_MIN_OCCURRENCES,
    ADAPTATION_MIN_SETS,
    AdaptationType,
    SetRole,
    SlotRole,
)
from strength_engine.models.history import Movement, SetRecord

_UNKNOWN_CATEGORY = "other"


@dataclass(frozen=True)
class SlotAdaptation:
    """One suggested change to a slot (or a movement the plan lacks)."""

    category: str
    role: SlotRole
    movement_name: str
    adaptation_type: AdaptationType
    suggested_sets: int
    reason: str
    delta: int | None = None


@dataclass(frozen=True)
class AdaptationResult:
    cycle: TrainingCycle
    changes: tuple[str, ...] = ()

    @property
    def applied(self) -> bool:
        return bool(self.changes)


def _completed_sets(
    session_sets: Iterable[SetRecord], catalogue: dict[str, Movement]
) -> dict[str, tuple[str, SlotRole, str, int]]:
    """movement_id → (category, slot role, name, completed sets); warm-ups excluded."""
    counts = Counter(s.movement_id for s in session_sets if s.role is not SetRole.WARMUP)
    performed = {}
    for movement_id, count in counts.items():
        movement = catalogue.get(movement_id)
        if movement is None:
            performed[movement_id] = (_UNKNOWN_CATEGORY, SlotRole.ACCESSORY, movement_id, count)
        else:
            role = SlotRole.PRIMARY if movement.is_primary else SlotRole.ACCESSORY
            performed[movement_id] = (movement.category, role, movement.name, count)
    return performed


def analyze_session(
    session_sets: Iterable[SetRecord],
    day_plan: DayPlan,
    movements: Sequence[Movement],
) -> list[SlotAdaptation]:
    """Compare one session's sets with the day plan it was performed from.

    Each performed movement is matched to slots by category and role.
    ``completed − planned >= 2`` gives VOLUME_UP (planned + 1, at most 6);
    fewer than planned but more than zero gives VOLUME_DOWN (planned − 1,
    at least 2). Movements in a category the plan does not contain give
    NEW_EXERCISE with the completed set count.
    """
    performed = _completed_sets(session_sets, {m.movement_id: m for m in movements})
    adaptations: list[SlotAdaptation] = []

    for slot in day_plan.slots:
        for category, role, name, completed in performed.values():
            if category != slot.category or role is not slot.role:
                continue
            delta = completed - slot.sets
            if delta >= ADAPTATION_EXTRA_SETS:
                adaptations.append(
                    SlotAdaptation(
                        category=slot.category,
                        role=slot.role,
                        movement_name=name,
                        adaptation_type=AdaptationType.VOLUME_UP,
                        suggested_sets=min(slot.sets + 1, ADAPTATION_MAX_SETS),
                        reason=f"{name}: {completed} sets done ({slot.sets} planned), +1 set.",
                        delta=delta,
                    )
                )
            elif delta < 0:
                adaptations.append(
                    SlotAdaptation(
                        category=slot.category,
                        role=slot.role,
                        movement_name=name,
                        adaptation_type=AdaptationType.VOLUME_DOWN,
                        suggested_sets=max(slot.sets - 1, ADAPTATION_MIN_SETS),
                        reason=f"{name}: {completed} sets done ({slot.sets} planned), -1 set.",
                        delta=delta,
                    )
                )

    planned_categories = {slot.category for slot in day_plan.slots}
    for category, _, name, completed in performed.values():
        if category in planned_categories:
            continue
        adaptations.append(
            SlotAdaptation(
                category=category,
                role=SlotRole.ACCESSORY,
                movement_name=name,
                adaptation_type=AdaptationType.NEW_EXERCISE,
                suggested_sets=completed,
                reason=f"{name}: added by hand, consider adding it to the plan.",
            )
        )
    return adaptations


def apply_adaptations(cycle: TrainingCycle, history: Sequence[SlotAdaptation]) -> AdaptationResult:
    """Fold repeated adaptations into every matching slot of the cycle.

    Adaptations are grouped by (category, type); a group needs at least
    two occurrences, and its first entry supplies the role, name and
    suggested sets. VOLUME_UP only ever raises a slot and VOLUME_DOWN only
    lowers one. NEW_EXERCISE groups are reported but change nothing.
    Returns the original cycle when nothing changed.
    """
    if len(history) < ADAPTATION_MIN_OCCURRENCES:
        return AdaptationResult(cycle)

    occurrences = Counter((a.category, a.adaptation_type) for a in history)
    first: dict[tuple[str, AdaptationType], SlotAdaptation] = {}
    for adaptation in history:
        first.setdefault((adaptation.category, adaptation.adaptation_type), adaptation)

    changes: list[str] = []
    for key, entry in first.items():
        if occurrences[key] < ADAPTATION_MIN_OCCURRENCES:
            continue
        if entry.adaptation_type is AdaptationType.NEW_EXERCISE:
            changes.append(f"{entry.movement_name}: consider adding to the plan.")
            continue
        cycle = _resize_slots(cycle, entry, changes)

    return AdaptationResult(cycle, tuple(changes))


def _resize_slots(cycle: TrainingCycle, entry: SlotAdaptation, changes: list[str]) -> TrainingCycle:
    raise_only = entry.adaptation_type is AdaptationType.VOLUME_UP
    week_plans = []
    changed = False
    for week_plan in cycle.week_plans:
        days = []
        for day in week_plan.days:
            slots = []
            for slot in day.slots:
                if (
                    slot.category == entry.category
                    and slot.role is entry.role
                    and (entry.suggested_sets > slot.sets if raise_only else entry.suggested_sets < slot.sets)
                ):
                    changes.append(f"{entry.movement_name}: {slot.sets} → {entry.suggested_sets} sets")
                    slot = dataclasses.replace(slot, sets=entry.suggested_sets)
                    changed = True
                slots.append(slot)
            days.append(dataclasses.replace(day, slots=tuple(slots)))
        week_plans.append(dataclasses.replace(week_plan, days=tuple(days)))
    if not changed:
        return cycle
    return dataclasses.replace(cycle, week_plans=tuple(week_plans))
