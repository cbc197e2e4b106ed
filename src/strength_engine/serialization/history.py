"""History documents: JSON files that populate and persist an InMemoryStore.

The document format belongs to the command-line surface. The engine itself
only sees the store contract.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date
from pathlib import Path
from typing import Any, Mapping

from strength_engine.config import EngineConfig, parse_value
from strength_engine.exceptions import StoreError
from strength_engine.models.cycle import DayPlan, Slot, TrainingCycle, WeekDefinition, WeekPlan
from strength_engine.models.enums import (
    CYCLE_WEEKS,
    Channel,
    DayType,
    MovementClass,
    Phase,
    ProgressAction,
    SetRole,
    SlotRole,
)
from strength_engine.models.history import MeasurementSample, Movement, SessionRecord, SetRecord
from strength_engine.models.progress import MaxPoint, MovementProgress
from strength_engine.serialization.export import (
    cycle_to_dict,
    prescription_to_dict,
    progress_to_dict,
    to_plain,
    trace_entry_to_dict,
)
from strength_engine.store import InMemoryStore


def read_document(path: str | Path) -> dict:
    """Read a history document. A missing file raises FileNotFoundError."""
    with open(path) as f:
        return json.load(f)


def write_document(path: str | Path, document: Mapping[str, Any]) -> None:
    with open(path, "w") as f:
        json.dump(document, f, indent=2)


def load_store(document: Mapping[str, Any]) -> InMemoryStore:
    """Build an InMemoryStore from a history document.

    Raises:
        StoreError: when a record is missing a required field or holds an
            unknown enum value.
    """
    try:
        cycle_doc = document.get("cycle")
        return InMemoryStore(
            sessions=[_session(d) for d in document.get("sessions", [])],
            sets=[_set(d) for d in document.get("sets", [])],
            movements=[_movement(d) for d in document.get("movements", [])],
            measurements=[_measurement(d) for d in document.get("measurements", [])],
            cycle=cycle_from_dict(cycle_doc) if cycle_doc else None,
            progress={p.movement_id: p for p in (_progress(d) for d in document.get("progress", []))},
            config=_config(document["config"]) if document.get("config") else None,
        )
    except (KeyError, ValueError, TypeError) as exc:
        raise StoreError(f"Malformed history document: {exc!r}") from exc


def dump_store(store: InMemoryStore) -> dict:
    """Inverse of load_store, plus the prescriptions and traces written to the store."""
    config = store.get_config()
    cycle = store.get_active_cycle()
    return {
        "config": to_plain(config) if config is not None else None,
        "movements": [to_plain(m) for m in store.list_movements()],
        "sessions": [to_plain(s) for s in store.list_sessions()],
        "sets": [to_plain(s) for s in store.list_sets()],
        "measurements": [
            to_plain(m) for channel in Channel for m in store.list_measurements(channel)
        ],
        "cycle": cycle_to_dict(cycle) if cycle is not None else None,
        "progress": [progress_to_dict(p) for p in store.all_progress],
        "prescriptions": [
            {
                **prescription_to_dict(p),
                "trace": [trace_entry_to_dict(e) for e in store.get_trace_entries(p.prescription_id)],
            }
            for p in store.prescriptions
        ],
    }


def cycle_from_dict(doc: Mapping[str, Any]) -> TrainingCycle:
    return TrainingCycle(
        cycle_id=doc["cycle_id"],
        start_date=_date(doc["start_date"]),
        week_definitions=tuple(
            WeekDefinition(
                week=int(w["week"]),
                phase=Phase(w["phase"]),
                base_adjustment=float(w["base_adjustment"]),
                heavy_reps=int(w["heavy_reps"]),
                heavy_effort=int(w["heavy_effort"]),
            )
            for w in doc["week_definitions"]
        ),
        week_plans=tuple(
            WeekPlan(week=int(p["week"]), days=tuple(_day_plan(d) for d in p.get("days", [])))
            for p in doc.get("week_plans", [])
        ),
        week_count=int(doc.get("week_count", CYCLE_WEEKS)),
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _date(value: str) -> date:
    return date.fromisoformat(value)


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _day_plan(doc: Mapping[str, Any]) -> DayPlan:
    return DayPlan(
        day_type=DayType(doc["day_type"]),
        slots=tuple(
            Slot(
                role=SlotRole(s["role"]),
                category=s["category"],
                movement_name=s["movement_name"],
                sets=int(s["sets"]),
                reps=int(s["reps"]),
                target_effort=_optional_int(s.get("target_effort")),
            )
            for s in doc.get("slots", [])
        ),
        day_of_week=_optional_int(doc.get("day_of_week")),
    )


def _session(doc: Mapping[str, Any]) -> SessionRecord:
    return SessionRecord(session_id=str(doc["session_id"]), performed_on=_date(doc["performed_on"]))


def _set(doc: Mapping[str, Any]) -> SetRecord:
    return SetRecord(
        movement_id=str(doc["movement_id"]),
        performed_on=_date(doc["performed_on"]),
        external_load=float(doc.get("external_load") or 0.0),
        reps=_optional_int(doc.get("reps")),
        target_reps=_optional_int(doc.get("target_reps")),
        actual_effort=_optional_int(doc.get("actual_effort")),
        target_effort=_optional_int(doc.get("target_effort")),
        role=SetRole(doc.get("role", SetRole.OTHER.value)),
        sequence=int(doc.get("sequence", 0)),
        session_id=doc.get("session_id"),
    )


def _movement(doc: Mapping[str, Any]) -> Movement:
    return Movement(
        movement_id=str(doc["movement_id"]),
        name=doc["name"],
        category=doc["category"],
        is_primary=bool(doc.get("is_primary", False)),
        counts_as_pull_volume=bool(doc.get("counts_as_pull_volume", False)),
        movement_class=MovementClass(doc.get("movement_class", MovementClass.UPPER.value)),
    )


def _measurement(doc: Mapping[str, Any]) -> MeasurementSample:
    return MeasurementSample(
        measured_on=_date(doc["measured_on"]),
        channel=Channel(doc["channel"]),
        value=float(doc["value"]),
    )


def _progress(doc: Mapping[str, Any]) -> MovementProgress:
    last_load = doc.get("last_load")
    current_max = doc.get("current_max")
    suggested_load = doc.get("suggested_load")
    return MovementProgress(
        movement_id=str(doc["movement_id"]),
        last_load=None if last_load is None else float(last_load),
        last_reps=_optional_int(doc.get("last_reps")),
        current_max=None if current_max is None else float(current_max),
        max_history=tuple(
            MaxPoint(_date(p["recorded_on"]), float(p["estimated_max"]))
            for p in doc.get("max_history", [])
        ),
        consecutive_target_met=int(doc.get("consecutive_target_met", 0)),
        stagnation_weeks=int(doc.get("stagnation_weeks", 0)),
        stagnation_flagged=bool(doc.get("stagnation_flagged", False)),
        suggested_action=ProgressAction(doc.get("suggested_action", ProgressAction.HOLD.value)),
        suggested_load=None if suggested_load is None else float(suggested_load),
    )


def _config(doc: Mapping[str, Any]) -> EngineConfig:
    overrides = {}
    for f in dataclasses.fields(EngineConfig):
        if f.name in doc and doc[f.name] is not None:
            overrides[f.name] = parse_value(f.name, str(doc[f.name]), f.default)
    return EngineConfig(**overrides)
