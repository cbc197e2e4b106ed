"""Frozen recommendation inputs — immutable snapshot for a single engine call."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from strength_engine.models.cycle import TrainingCycle
from strength_engine.models.history import SessionRecord, SetRecord
from strength_engine.models.readiness import ReadinessSnapshot


@dataclass(frozen=True)
class RecommendationInputs:
    """Everything RecommendationEngine.recommend() reads.

    Loaded once from the store (or built by a caller) at the start of a
    run. Freezing keeps rules from mutating shared state mid-computation.
    """

    today: date
    bodyweight: float
    cycle: TrainingCycle | None = None
    sessions: tuple[SessionRecord, ...] = field(default_factory=tuple)
    sets: tuple[SetRecord, ...] = field(default_factory=tuple)
    readiness: ReadinessSnapshot = field(default_factory=ReadinessSnapshot)
    primary_movement_id: str | None = None

    @property
    def last_session_date(self) -> date | None:
        """Most recent session on or before today; later dates are ignored."""
        past = [s.performed_on for s in self.sessions if s.performed_on <= self.today]
        return max(past) if past else None
