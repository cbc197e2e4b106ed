"""Strength estimation: reps-in-reserve adjusted Epley model and its inverse.

Two load models are used:

- **System model** for the primary movement, where bodyweight is part of the
  moved mass (weighted pull-up):
  ``max = (bodyweight + external) × (1 + (reps + effort) / 30)``
- **Accessory model** for everything else: ``max = load × (1 + reps / 30)``

Missing or non-physical inputs give None ("no estimate available") rather
than raising.

References:
    Epley (1985). Poundage chart. Boyd Epley Workout.
    Helms et al. (2016). Application of the repetitions in reserve-based
    rating of perceived exertion scale for resistance training. Strength
    Cond J 38(4):42-49.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from strength_engine.math.robust_stats import median, round_to_half
from strength_engine.models.enums import (
    DEFAULT_EFFORT_DISTANCE,
    DEFAULT_TOP_SET_REPS,
    EPLEY_DIVISOR,
    FAILURE_LOAD_FRACTION,
    INITIAL_LOAD_FRACTION,
    SPEED_DAY_MAX_FRACTION,
)
from strength_engine.models.history import SetRecord

_MOVEMENT_MAX_WINDOW = 6


def system_max(
    bodyweight: float,
    external_load: float,
    reps: int | None,
    effort_distance: float | None = None,
) -> float | None:
    """Estimated max of the whole moved mass (bodyweight + external load).

    A missing effort distance is treated as the default of 2 reps in reserve.
    """
    system_load = bodyweight + external_load
    if system_load <= 0 or reps is None or reps < 1:
        return None
    effort = DEFAULT_EFFORT_DISTANCE if effort_distance is None else effort_distance
    return system_load * (1 + (reps + effort) / EPLEY_DIVISOR)


def external_max(
    bodyweight: float,
    external_load: float,
    reps: int | None,
    effort_distance: float | None = None,
) -> float | None:
    """System max minus bodyweight, floored at zero."""
    estimate = system_max(bodyweight, external_load, reps, effort_distance)
    if estimate is None:
        return None
    return max(0.0, estimate - bodyweight)


def accessory_max(load: float, reps: int | None) -> float | None:
    if load <= 0 or reps is None or reps < 1:
        return None
    return load * (1 + reps / EPLEY_DIVISOR)


def target_external_load(
    estimated_system_max: float | None,
    bodyweight: float,
    target_reps: int,
    target_effort: float,
    adjustment: float = 0.0,
) -> float | None:
    """Invert the system model to an external load for the target reps/effort.

    ``adjustment`` is a fraction (0.025 = +2.5 %) applied to the system
    load before bodyweight is removed. The result is floored at zero and
    rounded to the nearest half unit.
    """
    if estimated_system_max is None or estimated_system_max <= 0:
        return None
    system_load = estimated_system_max / (1 + (target_reps + target_effort) / EPLEY_DIVISOR)
    return round_to_half(max(0.0, system_load * (1 + adjustment) - bodyweight))


def top_set_max(set_record: SetRecord, bodyweight: float) -> float | None:
    """System max for a primary top set, filling gaps the way lifters log them.

    Effort: actual, else target, else the default. Reps: actual, else target,
    else 3.
    """
    effort = set_record.actual_effort
    if effort is None:
        effort = set_record.target_effort
    reps = set_record.reps or set_record.target_reps or DEFAULT_TOP_SET_REPS
    return system_max(bodyweight, set_record.external_load or 0.0, reps, effort)


def estimate_from_top_sets(top_sets: Sequence[SetRecord], bodyweight: float) -> float | None:
    """Median system max over ``top_sets``; None when none yields an estimate."""
    values = [v for v in (top_set_max(s, bodyweight) for s in top_sets) if v is not None]
    if not values:
        return None
    return median(values)


def movement_estimated_max(
    sets: Sequence[SetRecord],
    is_primary: bool,
    bodyweight: float,
) -> float | None:
    """Median estimated max over the last 6 valid sets of one movement."""
    valid = [s for s in sets if s.external_load > 0 and (s.reps or 0) >= 1]
    recent = sorted(valid, key=lambda s: s.sort_key)[-_MOVEMENT_MAX_WINDOW:]
    values = [v for v in (_set_max(s, is_primary, bodyweight) for s in recent) if v is not None]
    if not values:
        return None
    return median(values)


@dataclass(frozen=True)
class MaxHistoryPoint:
    performed_on: date
    estimated_max: float
    load: float
    reps: int


def movement_max_history(
    sets: Iterable[SetRecord],
    is_primary: bool,
    bodyweight: float,
) -> list[MaxHistoryPoint]:
    """Per-set estimated max time series for one movement, oldest first."""
    points: list[MaxHistoryPoint] = []
    for s in sorted(sets, key=lambda s: s.sort_key):
        if s.external_load <= 0 or (s.reps or 0) < 1:
            continue
        estimate = _set_max(s, is_primary, bodyweight)
        if estimate is not None:
            points.append(MaxHistoryPoint(s.performed_on, estimate, s.external_load, s.reps or 0))
    return points


def _set_max(s: SetRecord, is_primary: bool, bodyweight: float) -> float | None:
    if is_primary:
        effort = s.actual_effort if s.actual_effort is not None else s.target_effort
        return system_max(bodyweight, s.external_load, s.reps, effort)
    return accessory_max(s.external_load, s.reps)


# ---------------------------------------------------------------------------
# Derived load helpers
# ---------------------------------------------------------------------------


def speed_day_load(external_max_estimate: float | None, bodyweight: float) -> float | None:
    """External load at ~57.5 % of system max for max-intent speed work."""
    if external_max_estimate is None:
        return None
    system_target = (external_max_estimate + bodyweight) * SPEED_DAY_MAX_FRACTION
    return round_to_half(max(0.0, system_target - bodyweight))


def initial_load_from_max(one_rep_max: float) -> float:
    """Starting working load for a newly added movement (70 % of 1RM)."""
    return round_to_half(one_rep_max * INITIAL_LOAD_FRACTION)


def velocity_loss_percent(first_rep_velocity: float | None, last_rep_velocity: float | None) -> float | None:
    """Velocity loss across a set, in percent of the first rep."""
    if not first_rep_velocity or not last_rep_velocity or first_rep_velocity <= 0:
        return None
    return (first_rep_velocity - last_rep_velocity) / first_rep_velocity * 100


@dataclass(frozen=True)
class FailureReaction:
    next_set_load: float
    next_set_reps: int
    should_stop: bool
    message: str


def failure_reaction(
    current_load: float,
    target_reps: int,
    is_primary: bool,
    consecutive_failures: int,
) -> FailureReaction:
    """Next-set adjustment after a set taken to failure (effort distance 0)."""
    next_load = round_to_half(current_load * FAILURE_LOAD_FRACTION)
    next_reps = max(target_reps - 1, 1) if is_primary else target_reps
    if consecutive_failures >= 2:
        return FailureReaction(
            next_set_load=next_load,
            next_set_reps=next_reps,
            should_stop=True,
            message="Two consecutive failures: consider ending this movement for today.",
        )
    return FailureReaction(
        next_set_load=next_load,
        next_set_reps=next_reps,
        should_stop=False,
        message=f"Failure: next set at {next_load:g} for {next_reps} reps.",
    )
