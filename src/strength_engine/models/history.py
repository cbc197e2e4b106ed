"""Recorded history — sessions, sets, measurement samples and movements.

These records are produced by the surrounding application and are read-only
inside the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from strength_engine.models.enums import Channel, MovementClass, SetRole


@dataclass(frozen=True)
class MeasurementSample:
    """A single daily scalar reading on one readiness channel."""

    measured_on: date
    channel: Channel
    value: float


@dataclass(frozen=True)
class SessionRecord:
    session_id: str
    performed_on: date


@dataclass(frozen=True)
class SetRecord:
    """One performed set.

    ``actual_effort`` / ``target_effort`` are effort-distance values on the
    0-5 scale (estimated reps left before failure).
    """

    movement_id: str
    performed_on: date
    external_load: float
    reps: int | None = None
    target_reps: int | None = None
    actual_effort: int | None = None
    target_effort: int | None = None
    role: SetRole = SetRole.OTHER
    sequence: int = 0  # position within the day, for stable ordering
    session_id: str | None = None

    @property
    def has_effort_pair(self) -> bool:
        """True when both target and actual effort distance were recorded."""
        return self.actual_effort is not None and self.target_effort is not None

    @property
    def overshoot(self) -> float | None:
        """Target minus actual effort distance, or None without both values."""
        if not self.has_effort_pair:
            return None
        return float(self.target_effort - self.actual_effort)  # type: ignore[operator]

    @property
    def sort_key(self) -> tuple[date, int]:
        return (self.performed_on, self.sequence)


@dataclass(frozen=True)
class Movement:
    """Catalogue entry for an exercise."""

    movement_id: str
    name: str
    category: str
    is_primary: bool = False
    counts_as_pull_volume: bool = False
    movement_class: MovementClass = MovementClass.UPPER
