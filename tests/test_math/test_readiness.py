"""Tests for readiness classification and fusion (math/readiness.py)."""

from __future__ import annotations

import math
from datetime import date, timedelta

import pytest

from strength_engine.math.readiness import (
    build_readiness_snapshot,
    classify_z,
    compute_baseline,
    effort_reading,
    fuse_readiness,
    hrv_ms_to_ln_rmssd,
    recovery_reading,
    split_today,
    velocity_reading,
)
from strength_engine.models.enums import Channel, ReadinessClass, SetRole
from strength_engine.models.history import MeasurementSample, SetRecord
from strength_engine.models.readiness import ChannelReading

G, Y, R = ReadinessClass.GREEN, ReadinessClass.YELLOW, ReadinessClass.RED


class TestClassifyZ:
    def test_boundaries(self) -> None:
        assert classify_z(0.0) is G
        assert classify_z(-0.49) is G
        assert classify_z(-0.50) is Y
        assert classify_z(-0.99) is Y
        assert classify_z(-1.00) is R
        assert classify_z(-3.0) is R


class TestBaseline:
    def test_needs_three_windowed_samples(self) -> None:
        assert compute_baseline([1.0, 2.0], window=10) is None
        assert compute_baseline([1.0, 2.0, 3.0], window=10) is not None

    def test_window_keeps_most_recent(self) -> None:
        baseline = compute_baseline([100.0, 100.0, 1.0, 2.0, 3.0], window=3)
        assert baseline is not None
        assert baseline.center == 2.0
        assert baseline.sample_count == 3

    def test_window_smaller_than_minimum_is_inactive(self) -> None:
        assert compute_baseline([1.0, 2.0, 3.0, 4.0], window=2) is None


class TestZChannels:
    def test_velocity_drop_is_red(self) -> None:
        history = [0.80, 0.82, 0.78, 0.81, 0.79]
        result = velocity_reading(0.70, history)
        assert result is not None
        assert result.channel is Channel.VELOCITY
        assert result.classification is R
        assert result.z_score is not None and result.z_score < -1.0

    def test_no_sample_today_is_inactive(self) -> None:
        assert velocity_reading(None, [0.8, 0.8, 0.8]) is None

    def test_insufficient_history_is_inactive(self) -> None:
        assert recovery_reading(4.1, [4.0, 4.2]) is None

    def test_recovery_at_baseline_is_green(self) -> None:
        result = recovery_reading(4.1, [4.0, 4.1, 4.2, 4.1])
        assert result is not None
        assert result.classification is G


def _set(target: int | None, actual: int | None, day: int = 1) -> SetRecord:
    return SetRecord(
        "pullup", date(2024, 3, day), 60.0, reps=3, target_effort=target, actual_effort=actual, role=SetRole.TOP
    )


class TestEffortChannel:
    def test_mean_overshoot_thresholds(self) -> None:
        assert effort_reading([_set(2, 2), _set(2, 2)]).classification is G  # type: ignore[union-attr]
        assert effort_reading([_set(2, 1), _set(2, 1)]).classification is Y  # type: ignore[union-attr]
        assert effort_reading([_set(3, 1), _set(3, 1)]).classification is R  # type: ignore[union-attr]

    def test_needs_two_sets_with_both_efforts(self) -> None:
        assert effort_reading([_set(2, 0), _set(2, None)]) is None

    def test_only_window_counts(self) -> None:
        sets = [_set(4, 0, d) for d in range(1, 4)] + [_set(2, 2, d) for d in range(4, 9)]
        result = effort_reading(sets, window=5)
        assert result is not None
        assert result.mean_overshoot == 0.0
        assert result.classification is G


class TestFusion:
    def _c(self, channel: Channel, cls: ReadinessClass) -> ChannelReading:
        return ChannelReading(channel=channel, classification=cls)

    def test_no_active_channels_is_green(self) -> None:
        snapshot = fuse_readiness(None, None, None)
        assert snapshot.combined is G
        assert snapshot.cap_level == 0

    def test_three_green(self) -> None:
        snapshot = fuse_readiness(
            self._c(Channel.VELOCITY, G), self._c(Channel.RECOVERY, G), self._c(Channel.EFFORT, G)
        )
        assert snapshot.combined is G
        assert snapshot.cap_level == 0

    def test_two_red(self) -> None:
        snapshot = fuse_readiness(None, self._c(Channel.RECOVERY, R), self._c(Channel.EFFORT, R))
        assert snapshot.combined is R
        assert snapshot.cap_level == 2

    def test_veto_escalates_green_to_yellow(self) -> None:
        """velocity RED, effort GREEN, recovery GREEN → YELLOW."""
        snapshot = fuse_readiness(
            self._c(Channel.VELOCITY, R), self._c(Channel.RECOVERY, G), self._c(Channel.EFFORT, G)
        )
        assert snapshot.combined is Y
        assert snapshot.cap_level == 1
        assert snapshot.veto_applied

    def test_veto_with_second_bad_channel_forces_red(self) -> None:
        """velocity RED, effort YELLOW, recovery GREEN → RED."""
        snapshot = fuse_readiness(
            self._c(Channel.VELOCITY, R), self._c(Channel.RECOVERY, G), self._c(Channel.EFFORT, Y)
        )
        assert snapshot.combined is R
        assert snapshot.cap_level == 2

    def test_veto_condition_with_red_vote_stays_red(self) -> None:
        snapshot = fuse_readiness(self._c(Channel.VELOCITY, R), self._c(Channel.RECOVERY, Y), None)
        assert snapshot.combined is R
        assert not snapshot.veto_applied

    def test_velocity_red_alone_is_yellow(self) -> None:
        snapshot = fuse_readiness(self._c(Channel.VELOCITY, R), None, None)
        assert snapshot.combined is Y

    def test_yellow_majority(self) -> None:
        snapshot = fuse_readiness(
            self._c(Channel.VELOCITY, Y), self._c(Channel.RECOVERY, Y), self._c(Channel.EFFORT, G)
        )
        assert snapshot.combined is Y
        assert not snapshot.veto_applied

    def test_single_green_channel(self) -> None:
        assert fuse_readiness(None, self._c(Channel.RECOVERY, G), None).combined is Y

    def test_all_channels_impaired(self) -> None:
        snapshot = fuse_readiness(
            self._c(Channel.VELOCITY, Y), self._c(Channel.RECOVERY, R), self._c(Channel.EFFORT, Y)
        )
        assert snapshot.all_channels_impaired
        partial = fuse_readiness(self._c(Channel.VELOCITY, Y), self._c(Channel.RECOVERY, R), None)
        assert not partial.all_channels_impaired


class TestSnapshotFromSamples:
    def test_hrv_conversion(self) -> None:
        assert hrv_ms_to_ln_rmssd(60.0) == pytest.approx(math.log(60.0))
        assert hrv_ms_to_ln_rmssd(0.0) is None
        assert hrv_ms_to_ln_rmssd(None) is None

    def test_split_today_excludes_today_from_history(self) -> None:
        today = date(2024, 3, 11)
        samples = [
            MeasurementSample(today, Channel.VELOCITY, 0.7),
            MeasurementSample(today - timedelta(days=1), Channel.VELOCITY, 0.8),
        ]
        value, history = split_today(samples, today)
        assert value == 0.7
        assert history == [0.8]

    def test_build_snapshot(self, velocity_samples, recovery_samples) -> None:
        today = date(2024, 3, 11)
        samples = velocity_samples + [MeasurementSample(today, Channel.VELOCITY, 0.60)]
        recovery = recovery_samples + [MeasurementSample(today, Channel.RECOVERY, 3.60)]
        snapshot = build_readiness_snapshot(today, samples, recovery)
        assert snapshot.velocity is not None and snapshot.velocity.classification is R
        assert snapshot.recovery is not None and snapshot.recovery.classification is R
        assert snapshot.effort is None
        assert snapshot.combined is R

    def test_build_snapshot_without_today_sample(self, velocity_samples) -> None:
        snapshot = build_readiness_snapshot(date(2024, 3, 11), velocity_samples)
        assert snapshot.velocity is None
        assert snapshot.combined is G
