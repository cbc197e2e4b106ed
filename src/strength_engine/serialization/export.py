"""Convert engine values to JSON-compatible dicts.

All functions are pure (no I/O). Dates become ISO strings, enums their
values, tuples lists.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date
from enum import Enum
from typing import Any, Mapping

from strength_engine.models.cycle import TrainingCycle
from strength_engine.models.decision_trace import DecisionTrace, TraceEntry
from strength_engine.models.prescription import Prescription, Recommendation
from strength_engine.models.progress import MovementProgress


def to_plain(value: Any) -> Any:
    """Recursively convert dataclasses, enums, dates and mappings to JSON types."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {str(k.value if isinstance(k, Enum) else k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def trace_entry_to_dict(entry: TraceEntry) -> dict:
    return {
        "rule_id": entry.rule_id.value,
        "before": to_plain(entry.before),
        "after": to_plain(entry.after),
        "rationale": entry.rationale,
    }


def trace_to_dict(trace: DecisionTrace) -> dict:
    return {
        "prescription_id": trace.prescription_id,
        "entries": [trace_entry_to_dict(e) for e in trace.entries],
    }


def prescription_to_dict(prescription: Prescription) -> dict:
    result = to_plain(prescription)
    result["readiness"]["cap_level"] = prescription.readiness.cap_level
    return result


def cycle_to_dict(cycle: TrainingCycle) -> dict:
    return to_plain(cycle)


def progress_to_dict(progress: MovementProgress) -> dict:
    return to_plain(progress)


def recommendation_to_dict(recommendation: Recommendation) -> dict:
    """Prescription plus trace, as printed by the command line."""
    return {
        "prescription": prescription_to_dict(recommendation.prescription),
        "trace": trace_to_dict(recommendation.trace),
        "cycle_id": recommendation.cycle.cycle_id,
        "cycle_replaced": recommendation.cycle_replaced,
        "trial_run": recommendation.trial_run,
    }


def to_json_string(value: Any, indent: int = 2) -> str:
    return json.dumps(to_plain(value), indent=indent)
