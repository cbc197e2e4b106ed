"""State threaded through the load-adjustment rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strength_engine.models.cycle import BreakInfo, WeekDefinition
from strength_engine.models.decision_trace import TraceEntry
from strength_engine.models.enums import DayType
from strength_engine.models.history import SetRecord
from strength_engine.models.readiness import ReadinessSnapshot

if TYPE_CHECKING:
    from strength_engine.config import EngineConfig


@dataclass(frozen=True)
class AdjustmentState:
    """Load adjustment (fraction, 0.025 = +2.5 %) and day type so far."""

    adjustment: float
    day_type: DayType


@dataclass(frozen=True)
class AdjustmentContext:
    """Read-only inputs every adjustment rule may consult."""

    config: EngineConfig
    week_definition: WeekDefinition | None
    readiness: ReadinessSnapshot
    break_info: BreakInfo
    recent_top_sets: tuple[SetRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RuleOutcome:
    """New state plus the trace entries explaining the change."""

    state: AdjustmentState
    entries: tuple[TraceEntry, ...]
