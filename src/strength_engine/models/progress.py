"""Per-movement progression state for accessory movements."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from strength_engine.models.enums import ProgressAction


@dataclass(frozen=True)
class MaxPoint:
    """Estimated max recorded after one session."""

    recorded_on: date
    estimated_max: float


@dataclass(frozen=True)
class MovementProgress:
    """Progression record for one accessory movement.

    Replaced (never mutated) by the progression tracker after each completed
    session for the movement.
    """

    movement_id: str
    last_load: float | None = None
    last_reps: int | None = None
    current_max: float | None = None
    max_history: tuple[MaxPoint, ...] = field(default_factory=tuple)
    consecutive_target_met: int = 0
    stagnation_weeks: int = 0
    stagnation_flagged: bool = False
    suggested_action: ProgressAction = ProgressAction.HOLD
    suggested_load: float | None = None
