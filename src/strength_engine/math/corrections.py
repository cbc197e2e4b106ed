"""Effort-distance feedback: trend correction, session feedback, calibration.

All three read the gap between the effort distance a set was prescribed at
and the one the lifter reported (``overshoot = target − actual``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from strength_engine.math.robust_stats import clamp, mean
from strength_engine.models.enums import (
    CALIBRATION_EASY_THRESHOLD,
    CALIBRATION_HARD_THRESHOLD,
    CALIBRATION_STEP,
    FEEDBACK_MARGIN,
    FEEDBACK_WINDOW,
    TREND_DEADBAND,
    FeedbackType,
)
from strength_engine.models.history import SetRecord
from strength_engine.models.prescription import EffortFeedback


def _with_effort_pair(sets: Sequence[SetRecord]) -> list[SetRecord]:
    return [s for s in sets if s.has_effort_pair]


def trend_correction(
    recent_top_sets: Sequence[SetRecord],
    window: int = 6,
    min_sets: int = 4,
    gain: float = 0.005,
    max_correction: float = 0.015,
) -> float:
    """Small load nudge from a systematic effort-distance overshoot.

    Uses the last ``window`` sets that record both efforts; needs at least
    ``min_sets``. Mean overshoot above +0.5 gives a positive nudge, below
    -0.5 a negative one, each proportional to the mean and clamped to
    ±``max_correction``.
    """
    usable = _with_effort_pair(recent_top_sets)[-window:]
    if len(usable) < min_sets:
        return 0.0
    mean_overshoot = mean([s.overshoot for s in usable])  # type: ignore[misc]
    if mean_overshoot > TREND_DEADBAND:
        return clamp(mean_overshoot * gain, 0.0, max_correction)
    if mean_overshoot < -TREND_DEADBAND:
        return clamp(mean_overshoot * gain, -max_correction, 0.0)
    return 0.0


def effort_feedback(recent_sets: Sequence[SetRecord]) -> EffortFeedback | None:
    """Compare actual with target effort over the last 3 recorded sets.

    All three more than one rep easier than targeted → too easy; two or
    more more than one rep harder → too hard.
    """
    usable = _with_effort_pair(recent_sets)
    if len(usable) < FEEDBACK_WINDOW:
        return None
    last = usable[-FEEDBACK_WINDOW:]
    if all(s.actual_effort > s.target_effort + FEEDBACK_MARGIN for s in last):  # type: ignore[operator]
        return EffortFeedback(FeedbackType.TOO_EASY, "Load looks too light, consider +1-2 kg.")
    too_hard = sum(1 for s in last if s.actual_effort < s.target_effort - FEEDBACK_MARGIN)  # type: ignore[operator]
    if too_hard >= 2:
        return EffortFeedback(FeedbackType.TOO_HARD, "Load looks too heavy, consider -1-2 kg.")
    return None


@dataclass(frozen=True)
class CycleCalibration:
    adjustment: float
    mean_overshoot: float | None
    reason: str


def calibrate_cycle(feedback_sets: Sequence[SetRecord]) -> CycleCalibration:
    """Shift to apply to next cycle's phase coefficients after a completed cycle."""
    overshoots = [s.overshoot for s in feedback_sets if s.overshoot is not None]
    if not overshoots:
        return CycleCalibration(0.0, None, "No effort-distance data.")
    mean_overshoot = mean(overshoots)
    if mean_overshoot > CALIBRATION_EASY_THRESHOLD:
        return CycleCalibration(
            CALIBRATION_STEP, mean_overshoot, f"Too light (mean overshoot {mean_overshoot:.2f}): +1%."
        )
    if mean_overshoot < CALIBRATION_HARD_THRESHOLD:
        return CycleCalibration(
            -CALIBRATION_STEP, mean_overshoot, f"Too heavy (mean overshoot {mean_overshoot:.2f}): -1%."
        )
    return CycleCalibration(0.0, mean_overshoot, f"On target (mean overshoot {mean_overshoot:.2f}).")
