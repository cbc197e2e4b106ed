"""Shared test fixtures: default cycle, set histories, readiness samples, stores."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

import pytest

from strength_engine.config import EngineConfig
from strength_engine.engine import RecommendationEngine
from strength_engine.math.readiness import fuse_readiness
from strength_engine.models.cycle import TrainingCycle, create_default_cycle
from strength_engine.models.enums import Channel, MovementClass, ReadinessClass, SetRole
from strength_engine.models.history import MeasurementSample, Movement, SessionRecord, SetRecord
from strength_engine.models.inputs import RecommendationInputs
from strength_engine.models.readiness import ChannelReading, ReadinessSnapshot
from strength_engine.store import InMemoryStore

CYCLE_START = date(2024, 3, 4)  # Monday
BODYWEIGHT = 91.0
PULLUP_ID = "pullup"


@pytest.fixture
def engine() -> RecommendationEngine:
    return RecommendationEngine()


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def default_cycle() -> TrainingCycle:
    """Standard 4-week cycle starting Monday 2024-03-04."""
    return create_default_cycle(CYCLE_START, cycle_id="cycle-1")


@pytest.fixture
def movements() -> list[Movement]:
    return [
        Movement(PULLUP_ID, "Weighted pull-up", "vertical_pull", is_primary=True, counts_as_pull_volume=True),
        Movement("bench", "Bench press", "horizontal_push"),
        Movement("row", "Chest-supported row", "horizontal_pull", counts_as_pull_volume=True),
        Movement("squat", "Back squat", "squat", movement_class=MovementClass.LOWER),
    ]


@pytest.fixture
def make_top_set() -> Callable[..., SetRecord]:
    """Factory for primary top sets (67 kg × 3 at effort distance 2 by default)."""

    def _make(
        performed_on: date,
        external_load: float = 67.0,
        reps: int | None = 3,
        actual_effort: int | None = 2,
        target_effort: int | None = 2,
        sequence: int = 0,
        role: SetRole = SetRole.TOP,
    ) -> SetRecord:
        return SetRecord(
            movement_id=PULLUP_ID,
            performed_on=performed_on,
            external_load=external_load,
            reps=reps,
            target_reps=3,
            actual_effort=actual_effort,
            target_effort=target_effort,
            role=role,
            sequence=sequence,
        )

    return _make


@pytest.fixture
def week_one_history(make_top_set) -> tuple[tuple[SessionRecord, ...], tuple[SetRecord, ...]]:
    """Three week-1 sessions (Mon/Wed/Fri) with on-target top sets at 67 kg × 3 @ 2."""
    days = [CYCLE_START, CYCLE_START + timedelta(days=2), CYCLE_START + timedelta(days=4)]
    sessions = tuple(SessionRecord(f"s{i}", d) for i, d in enumerate(days))
    sets = tuple(make_top_set(d) for d in days)
    return sessions, sets


@pytest.fixture
def week_two_heavy_inputs(default_cycle, week_one_history) -> RecommendationInputs:
    """Monday of week 2 (+2.5 %), GREEN readiness, no break, estimated max ≈184.3."""
    sessions, sets = week_one_history
    return RecommendationInputs(
        today=CYCLE_START + timedelta(days=7),
        bodyweight=BODYWEIGHT,
        cycle=default_cycle,
        sessions=sessions,
        sets=sets,
        readiness=ReadinessSnapshot(),
        primary_movement_id=PULLUP_ID,
    )


@pytest.fixture
def reading() -> Callable[[Channel, ReadinessClass], ChannelReading]:
    def _make(channel: Channel, classification: ReadinessClass) -> ChannelReading:
        return ChannelReading(channel=channel, classification=classification)

    return _make


@pytest.fixture
def red_snapshot(reading) -> ReadinessSnapshot:
    return fuse_readiness(
        reading(Channel.VELOCITY, ReadinessClass.RED),
        reading(Channel.RECOVERY, ReadinessClass.RED),
        None,
    )


@pytest.fixture
def yellow_snapshot(reading) -> ReadinessSnapshot:
    return fuse_readiness(
        reading(Channel.VELOCITY, ReadinessClass.YELLOW),
        reading(Channel.RECOVERY, ReadinessClass.YELLOW),
        None,
    )


@pytest.fixture
def velocity_samples() -> list[MeasurementSample]:
    """Ten stable days of readiness-test velocity (m/s) before 2024-03-11."""
    values = [0.80, 0.82, 0.81, 0.79, 0.80, 0.83, 0.81, 0.80, 0.82, 0.81]
    start = date(2024, 3, 1)
    return [MeasurementSample(start + timedelta(days=i), Channel.VELOCITY, v) for i, v in enumerate(values)]


@pytest.fixture
def recovery_samples() -> list[MeasurementSample]:
    """Ten stable nights of lnRMSSD before 2024-03-11."""
    values = [4.10, 4.15, 4.12, 4.08, 4.11, 4.14, 4.09, 4.13, 4.10, 4.12]
    start = date(2024, 3, 1)
    return [MeasurementSample(start + timedelta(days=i), Channel.RECOVERY, v) for i, v in enumerate(values)]


@pytest.fixture
def store(default_cycle, movements, week_one_history, velocity_samples, recovery_samples) -> InMemoryStore:
    sessions, sets = week_one_history
    return InMemoryStore(
        sessions=sessions,
        sets=sets,
        movements=movements,
        measurements=velocity_samples + recovery_samples,
        cycle=default_cycle,
    )
