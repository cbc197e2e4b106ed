"""Robust statistics: median, MAD-derived sigma, z-score.

Windows are small (at most ~14 samples), so everything is recomputed from
scratch on each call.

References:
    Leys et al. (2013). Detecting outliers: do not use standard deviation
    around the mean, use absolute deviation around the median. J Exp Soc
    Psychol 49(4):764-766.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from strength_engine.models.enums import MAD_TO_SIGMA, SCALE_EPSILON


def median(values: Sequence[float]) -> float:
    """Median of ``values``; 0.0 for an empty sequence.

    A zero median is not a meaningful observation, so callers must guard
    against empty input themselves.
    """
    if len(values) == 0:
        return 0.0
    return float(np.median(np.asarray(values, dtype=np.float64)))


def mad(values: Sequence[float]) -> float:
    """Median absolute deviation from the median."""
    if len(values) == 0:
        return 0.0
    arr = np.asarray(values, dtype=np.float64)
    return float(np.median(np.abs(arr - np.median(arr))))


def scale_estimate(values: Sequence[float]) -> float:
    """Robust sigma: 1.4826 × MAD, floored to a small epsilon."""
    return max(SCALE_EPSILON, MAD_TO_SIGMA * mad(values))


def z_score(value: float, center: float, scale: float) -> float:
    return (value - center) / max(SCALE_EPSILON, scale)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_to_half(value: float) -> float:
    """Round to the nearest 0.5 unit (plate-loadable increment).

    Halves round up, matching how loads are displayed to the lifter.
    """
    return float(np.floor(value * 2.0 + 0.5) / 2.0)
