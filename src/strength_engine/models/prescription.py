"""Prescription — the final output of the recommendation engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from strength_engine.models.cycle import BreakInfo, DayPlan, TrainingCycle
from strength_engine.models.decision_trace import DecisionTrace
from strength_engine.models.enums import DayType, FeedbackType, Phase
from strength_engine.models.readiness import ReadinessSnapshot


@dataclass(frozen=True)
class EffortFeedback:
    """Session-level hint that the primary load is off."""

    feedback_type: FeedbackType
    suggestion: str


@dataclass(frozen=True)
class Prescription:
    """Today's primary-movement prescription plus the resolved day plan.

    ``target_load`` is external load (added to bodyweight). It is None when
    no estimated max is available: reps, effort and day type still apply and
    the lifter picks the load.
    """

    prescription_id: str
    prescribed_on: date
    cycle_id: str
    week: int
    phase: Phase | None
    day_type: DayType
    target_load: float | None
    target_reps: int | None
    target_effort: int | None
    set_count: int
    adjustment_pct: float
    cap_level: int
    readiness: ReadinessSnapshot
    estimated_max: float | None  # system (bodyweight + external)
    estimated_max_external: float | None
    bodyweight: float
    accessory_cap_active: bool
    day_plan: DayPlan
    break_info: BreakInfo | None = None
    effort_feedback: EffortFeedback | None = None

    @property
    def has_load_suggestion(self) -> bool:
        return self.target_load is not None


@dataclass(frozen=True)
class Recommendation:
    """Output of RecommendationEngine.recommend().

    ``cycle`` is the cycle in force after this run; it is what gets written
    back to the store when the run is not a trial run.
    """

    prescription: Prescription
    trace: DecisionTrace
    cycle: TrainingCycle
    cycle_replaced: bool = False
    trial_run: bool = False
