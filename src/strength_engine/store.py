"""Data-access contract between the engine and its storage collaborator.

The engine reads history through ``TrainingStore`` and writes results back
through it exactly once per run. ``InMemoryStore`` is the implementation
used by the CLI and the tests; durable storage lives outside this package.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Protocol

from strength_engine.config import EngineConfig
from strength_engine.exceptions import RecordNotFoundError
from strength_engine.models.cycle import TrainingCycle
from strength_engine.models.decision_trace import TraceEntry
from strength_engine.models.enums import Channel
from strength_engine.models.history import MeasurementSample, Movement, SessionRecord, SetRecord
from strength_engine.models.prescription import Prescription
from strength_engine.models.progress import MovementProgress

logger = logging.getLogger(__name__)


class TrainingStore(Protocol):
    """Read and write operations the engine depends on."""

    # Read
    def list_sessions(self) -> list[SessionRecord]: ...

    def list_sets(self) -> list[SetRecord]: ...

    def list_movements(self) -> list[Movement]: ...

    def list_measurements(self, channel: Channel) -> list[MeasurementSample]: ...

    def get_active_cycle(self) -> TrainingCycle | None: ...

    def get_progress(self, movement_id: str) -> MovementProgress | None: ...

    def get_config(self) -> EngineConfig | None: ...

    # Write
    def save_cycle(self, cycle: TrainingCycle) -> None: ...

    def save_prescription(self, prescription: Prescription) -> None: ...

    def append_trace_entries(self, prescription_id: str, entries: Iterable[TraceEntry]) -> None: ...

    def save_progress(self, progress: MovementProgress) -> None: ...


class InMemoryStore:
    """Dictionary-backed TrainingStore.

    Usage:
        store = InMemoryStore(sessions=..., sets=..., movements=...)
        engine.recommend_from_store(store, date.today())
    """

    def __init__(
        self,
        sessions: Iterable[SessionRecord] = (),
        sets: Iterable[SetRecord] = (),
        movements: Iterable[Movement] = (),
        measurements: Iterable[MeasurementSample] = (),
        cycle: TrainingCycle | None = None,
        progress: Mapping[str, MovementProgress] | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self._sessions = list(sessions)
        self._sets = list(sets)
        self._movements = {m.movement_id: m for m in movements}
        self._measurements = list(measurements)
        self._cycle = cycle
        self._progress: dict[str, MovementProgress] = dict(progress or {})
        self._config = config
        self._prescriptions: dict[str, Prescription] = {}
        self._traces: dict[str, list[TraceEntry]] = {}
        self.write_count = 0

    # -- read -------------------------------------------------------------

    def list_sessions(self) -> list[SessionRecord]:
        return sorted(self._sessions, key=lambda s: (s.performed_on, s.session_id))

    def list_sets(self) -> list[SetRecord]:
        return sorted(self._sets, key=lambda s: s.sort_key)

    def list_movements(self) -> list[Movement]:
        return list(self._movements.values())

    def list_measurements(self, channel: Channel) -> list[MeasurementSample]:
        return sorted(
            (m for m in self._measurements if m.channel is channel),
            key=lambda m: m.measured_on,
        )

    def get_active_cycle(self) -> TrainingCycle | None:
        return self._cycle

    def get_progress(self, movement_id: str) -> MovementProgress | None:
        return self._progress.get(movement_id)

    def get_config(self) -> EngineConfig | None:
        return self._config

    def get_movement(self, movement_id: str) -> Movement:
        try:
            return self._movements[movement_id]
        except KeyError:
            raise RecordNotFoundError("movement", movement_id) from None

    def get_prescription(self, prescription_id: str) -> Prescription:
        try:
            return self._prescriptions[prescription_id]
        except KeyError:
            raise RecordNotFoundError("prescription", prescription_id) from None

    def get_trace_entries(self, prescription_id: str) -> list[TraceEntry]:
        return list(self._traces.get(prescription_id, []))

    @property
    def prescriptions(self) -> list[Prescription]:
        return list(self._prescriptions.values())

    @property
    def all_progress(self) -> list[MovementProgress]:
        return list(self._progress.values())

    # -- write ------------------------------------------------------------

    def add_session(self, session: SessionRecord, sets: Iterable[SetRecord] = ()) -> None:
        """Record a completed session (the logging side of the collaborator)."""
        self._sessions.append(session)
        self._sets.extend(sets)

    def save_cycle(self, cycle: TrainingCycle) -> None:
        self._cycle = cycle
        self.write_count += 1
        logger.info("Saved cycle %s starting %s", cycle.cycle_id, cycle.start_date)

    def save_prescription(self, prescription: Prescription) -> None:
        self._prescriptions[prescription.prescription_id] = prescription
        self.write_count += 1
        logger.info(
            "Saved prescription %s for %s", prescription.prescription_id, prescription.prescribed_on
        )

    def append_trace_entries(self, prescription_id: str, entries: Iterable[TraceEntry]) -> None:
        if prescription_id not in self._prescriptions:
            raise RecordNotFoundError("prescription", prescription_id)
        appended = list(entries)
        self._traces.setdefault(prescription_id, []).extend(appended)
        self.write_count += 1
        logger.debug("Appended %d trace entries to %s", len(appended), prescription_id)

    def save_progress(self, progress: MovementProgress) -> None:
        self._progress[progress.movement_id] = progress
        self.write_count += 1
        logger.info(
            "Saved progress for %s: %s", progress.movement_id, progress.suggested_action.value
        )
