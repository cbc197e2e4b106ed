"""Data models for the strength engine."""

from strength_engine.models.cycle import (
    BreakInfo,
    DayPlan,
    Slot,
    TrainingCycle,
    WeekDefinition,
    WeekPlan,
    create_default_cycle,
)
from strength_engine.models.decision_trace import DecisionTrace, TraceEntry
from strength_engine.models.enums import (
    Channel,
    DayType,
    MovementClass,
    Phase,
    ProgressAction,
    ReadinessClass,
    RuleId,
    SetRole,
    SlotRole,
)
from strength_engine.models.history import (
    MeasurementSample,
    Movement,
    SessionRecord,
    SetRecord,
)
from strength_engine.models.inputs import RecommendationInputs
from strength_engine.models.prescription import EffortFeedback, Prescription, Recommendation
from strength_engine.models.progress import MaxPoint, MovementProgress
from strength_engine.models.readiness import Baseline, ChannelReading, ReadinessSnapshot

__all__ = [
    "Baseline",
    "BreakInfo",
    "Channel",
    "ChannelReading",
    "DayPlan",
    "DayType",
    "DecisionTrace",
    "EffortFeedback",
    "MaxPoint",
    "MeasurementSample",
    "Movement",
    "MovementClass",
    "MovementProgress",
    "Phase",
    "Prescription",
    "ProgressAction",
    "ReadinessClass",
    "ReadinessSnapshot",
    "Recommendation",
    "RecommendationInputs",
    "RuleId",
    "SessionRecord",
    "SetRecord",
    "SetRole",
    "Slot",
    "SlotRole",
    "TraceEntry",
    "TrainingCycle",
    "WeekDefinition",
    "WeekPlan",
    "create_default_cycle",
]
