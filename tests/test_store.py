"""Tests for the in-memory training store (store.py)."""

from __future__ import annotations

from datetime import date

import pytest

from strength_engine.exceptions import RecordNotFoundError, StoreError
from strength_engine.models.decision_trace import TraceEntry
from strength_engine.models.enums import Channel, RuleId
from strength_engine.models.history import SessionRecord, SetRecord
from strength_engine.models.progress import MovementProgress
from strength_engine.store import InMemoryStore


class TestReads:
    def test_sessions_and_sets_are_chronological(self) -> None:
        store = InMemoryStore(
            sessions=[SessionRecord("b", date(2024, 3, 6)), SessionRecord("a", date(2024, 3, 4))],
            sets=[
                SetRecord("pullup", date(2024, 3, 6), 67.0),
                SetRecord("pullup", date(2024, 3, 4), 67.0, sequence=1),
                SetRecord("pullup", date(2024, 3, 4), 60.0, sequence=0),
            ],
        )
        assert [s.session_id for s in store.list_sessions()] == ["a", "b"]
        assert [s.external_load for s in store.list_sets()] == [60.0, 67.0, 67.0]

    def test_measurements_filtered_by_channel(self, store) -> None:
        velocity = store.list_measurements(Channel.VELOCITY)
        assert len(velocity) == 10
        assert all(m.channel is Channel.VELOCITY for m in velocity)
        assert velocity == sorted(velocity, key=lambda m: m.measured_on)

    def test_missing_movement_raises(self, store) -> None:
        assert store.get_movement("row").name == "Chest-supported row"
        with pytest.raises(RecordNotFoundError) as exc_info:
            store.get_movement("dips")
        assert exc_info.value.kind == "movement"
        assert isinstance(exc_info.value, StoreError)

    def test_missing_prescription_raises(self, store) -> None:
        with pytest.raises(RecordNotFoundError, match="prescription"):
            store.get_prescription("nope")


class TestWrites:
    def test_trace_needs_a_saved_prescription(self, store) -> None:
        entry = TraceEntry.create(RuleId.TARGETS, {}, {}, "targets")
        with pytest.raises(RecordNotFoundError):
            store.append_trace_entries("unknown", [entry])
        assert store.write_count == 0

    def test_progress_replaced(self, store) -> None:
        store.save_progress(MovementProgress("row", last_load=60.0))
        store.save_progress(MovementProgress("row", last_load=62.5))
        assert store.get_progress("row").last_load == 62.5
        assert len(store.all_progress) == 1
        assert store.write_count == 2

    def test_add_session(self, store) -> None:
        store.add_session(
            SessionRecord("s9", date(2024, 3, 11)),
            [SetRecord("row", date(2024, 3, 11), 60.0, reps=10)],
        )
        assert store.list_sessions()[-1].session_id == "s9"
        assert store.list_sets()[-1].movement_id == "row"
