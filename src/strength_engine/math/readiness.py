"""Readiness classification: per-channel baselines and 3-channel fusion.

Velocity and recovery (HRV) channels are classified by a robust z-score
against a trailing baseline. The effort channel is classified by the mean
effort-distance overshoot of recent top sets. Active channels are fused
with a 2-of-3 vote plus a velocity veto.

References:
    Plews et al. (2013). Training adaptation and heart rate variability in
    elite endurance athletes. Int J Sports Physiol Perform 8(6):688-694.
    Jovanovic & Flanagan (2014). Researched applications of velocity based
    strength training. J Aust Strength Cond 22(2):58-69.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Iterable, Sequence

from strength_engine.math.robust_stats import mean, median, scale_estimate, z_score
from strength_engine.models.enums import (
    Z_GREEN_FLOOR,
    Z_YELLOW_FLOOR,
    Channel,
    ReadinessClass,
)
from strength_engine.models.history import MeasurementSample, SetRecord
from strength_engine.models.readiness import Baseline, ChannelReading, ReadinessSnapshot

DEFAULT_MIN_BASELINE_SAMPLES = 3
DEFAULT_MIN_EFFORT_SETS = 2


def compute_baseline(
    values: Sequence[float],
    window: int,
    min_samples: int = DEFAULT_MIN_BASELINE_SAMPLES,
) -> Baseline | None:
    """Median/MAD baseline over the last ``window`` values.

    Returns None when fewer than ``min_samples`` values fall in the window.
    """
    windowed = list(values)[-window:] if window > 0 else []
    if len(windowed) < min_samples:
        return None
    return Baseline(
        center=median(windowed),
        scale=scale_estimate(windowed),
        sample_count=len(windowed),
    )


def classify_z(z: float) -> ReadinessClass:
    """GREEN for z ≥ -0.5, YELLOW for -1.0 ≤ z < -0.5, RED below -1.0."""
    if z >= Z_GREEN_FLOOR:
        return ReadinessClass.GREEN
    if z >= Z_YELLOW_FLOOR:
        return ReadinessClass.YELLOW
    return ReadinessClass.RED


def _z_channel_reading(
    channel: Channel,
    today_value: float | None,
    history: Sequence[float],
    window: int,
    min_samples: int,
) -> ChannelReading | None:
    if today_value is None:
        return None
    baseline = compute_baseline(history, window, min_samples)
    if baseline is None:
        return None
    z = z_score(today_value, baseline.center, baseline.scale)
    return ChannelReading(channel=channel, classification=classify_z(z), z_score=z, baseline=baseline)


def velocity_reading(
    today_velocity: float | None,
    history: Sequence[float],
    window: int = 10,
    min_samples: int = DEFAULT_MIN_BASELINE_SAMPLES,
) -> ChannelReading | None:
    """Readiness-test first-rep velocity against its trailing baseline."""
    return _z_channel_reading(Channel.VELOCITY, today_velocity, history, window, min_samples)


def recovery_reading(
    today_ln_rmssd: float | None,
    history: Sequence[float],
    window: int = 14,
    min_samples: int = DEFAULT_MIN_BASELINE_SAMPLES,
) -> ChannelReading | None:
    """Nightly HRV (lnRMSSD) against its trailing baseline."""
    return _z_channel_reading(Channel.RECOVERY, today_ln_rmssd, history, window, min_samples)


def effort_reading(
    recent_top_sets: Sequence[SetRecord],
    window: int = 5,
    min_sets: int = DEFAULT_MIN_EFFORT_SETS,
    yellow_overshoot: float = 1.0,
    red_overshoot: float = 2.0,
) -> ChannelReading | None:
    """Classify by mean overshoot (target − actual effort) of recent top sets.

    Only sets inside the last ``window`` that record both efforts count.
    """
    windowed = list(recent_top_sets)[-window:] if window > 0 else []
    overshoots = [s.overshoot for s in windowed if s.overshoot is not None]
    if len(overshoots) < min_sets:
        return None
    mean_overshoot = mean(overshoots)
    if mean_overshoot >= red_overshoot:
        classification = ReadinessClass.RED
    elif mean_overshoot >= yellow_overshoot:
        classification = ReadinessClass.YELLOW
    else:
        classification = ReadinessClass.GREEN
    return ChannelReading(
        channel=Channel.EFFORT,
        classification=classification,
        mean_overshoot=mean_overshoot,
    )


def fuse_readiness(
    velocity: ChannelReading | None,
    recovery: ChannelReading | None,
    effort: ChannelReading | None,
) -> ReadinessSnapshot:
    """Fuse up to three active channels into one classification.

    1. No active channel: GREEN.
    2. Vote: ≥2 GREEN → GREEN; ≥2 RED, or ≥1 RED with ≥1 YELLOW → RED;
       otherwise YELLOW.
    3. Velocity veto: a RED velocity channel never leaves the result GREEN,
       and forces RED when any other active channel is YELLOW or RED. The
       veto is absolute once its condition holds.
    """
    active = [c for c in (velocity, recovery, effort) if c is not None]
    if not active:
        return ReadinessSnapshot(velocity, recovery, effort, ReadinessClass.GREEN)

    greens = sum(1 for c in active if c.classification is ReadinessClass.GREEN)
    yellows = sum(1 for c in active if c.classification is ReadinessClass.YELLOW)
    reds = sum(1 for c in active if c.classification is ReadinessClass.RED)

    if greens >= 2:
        combined = ReadinessClass.GREEN
    elif reds >= 2 or (reds >= 1 and yellows >= 1):
        combined = ReadinessClass.RED
    else:
        combined = ReadinessClass.YELLOW

    voted = combined
    if velocity is not None and velocity.classification is ReadinessClass.RED:
        if combined is ReadinessClass.GREEN:
            combined = ReadinessClass.YELLOW
        if any(c is not None and c.is_impaired for c in (recovery, effort)):
            combined = ReadinessClass.RED

    return ReadinessSnapshot(velocity, recovery, effort, combined, veto_applied=combined is not voted)


def hrv_ms_to_ln_rmssd(hrv_ms: float | None) -> float | None:
    """Convert an RMSSD reading in milliseconds to lnRMSSD."""
    if hrv_ms is None or hrv_ms <= 0:
        return None
    return math.log(hrv_ms)


def split_today(samples: Iterable[MeasurementSample], today: date) -> tuple[float | None, list[float]]:
    """Return today's value (last one recorded today) and prior values, oldest first."""
    ordered = sorted(samples, key=lambda s: s.measured_on)
    history = [s.value for s in ordered if s.measured_on < today]
    todays = [s.value for s in ordered if s.measured_on == today]
    return (todays[-1] if todays else None), history


def build_readiness_snapshot(
    today: date,
    velocity_samples: Iterable[MeasurementSample] = (),
    recovery_samples: Iterable[MeasurementSample] = (),
    recent_top_sets: Sequence[SetRecord] = (),
    velocity_window: int = 10,
    recovery_window: int = 14,
    effort_window: int = 5,
    min_baseline_samples: int = DEFAULT_MIN_BASELINE_SAMPLES,
    min_effort_sets: int = DEFAULT_MIN_EFFORT_SETS,
    yellow_overshoot: float = 1.0,
    red_overshoot: float = 2.0,
) -> ReadinessSnapshot:
    """Build a fresh snapshot for ``today`` from raw samples.

    The baseline uses only samples dated before today; today's sample is
    the one being classified.
    """
    today_velocity, velocity_history = split_today(velocity_samples, today)
    today_recovery, recovery_history = split_today(recovery_samples, today)
    return fuse_readiness(
        velocity_reading(today_velocity, velocity_history, velocity_window, min_baseline_samples),
        recovery_reading(today_recovery, recovery_history, recovery_window, min_baseline_samples),
        effort_reading(recent_top_sets, effort_window, min_effort_sets, yellow_overshoot, red_overshoot),
    )
