"""Weekly stimulus: pull volume, heavy exposures, tonnage and balance checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import pandas as pd

from strength_engine.models.enums import (
    DEFAULT_EFFORT_DISTANCE,
    HEAVY_EXPOSURE_MAX_EFFECTIVE_REPS,
    MIN_PUSH_TO_PULL_RATIO,
    MIN_WEEKLY_HEAVY_EXPOSURES,
    MIN_WEEKLY_PULL_SETS,
    TARGET_WEEKLY_HEAVY_EXPOSURES,
    TARGET_WEEKLY_PULL_SETS,
)
from strength_engine.models.history import Movement, SetRecord

_PUSH_CATEGORIES = ("horizontal_push", "vertical_push")
_UNKNOWN_CATEGORY = "other"


@dataclass(frozen=True)
class CategoryVolume:
    sets: int
    tonnage: float


@dataclass(frozen=True)
class WeeklyStimulus:
    pull_sets: int = 0
    pull_tonnage: float = 0.0
    heavy_exposures: int = 0
    total_tonnage: float = 0.0
    by_category: dict[str, CategoryVolume] = field(default_factory=dict)


def _sets_frame(sets: Iterable[SetRecord], movements: Sequence[Movement]) -> pd.DataFrame:
    catalogue = {m.movement_id: m for m in movements}
    rows = []
    for s in sets:
        movement = catalogue.get(s.movement_id)
        effort = s.actual_effort if s.actual_effort is not None else s.target_effort
        reps = s.reps or 0
        rows.append(
            {
                "category": movement.category if movement else _UNKNOWN_CATEGORY,
                "counts_as_pull": bool(movement and movement.counts_as_pull_volume),
                "tonnage": (s.external_load or 0.0) * reps,
                "effective_reps": reps + (DEFAULT_EFFORT_DISTANCE if effort is None else effort),
            }
        )
    return pd.DataFrame(rows, columns=["category", "counts_as_pull", "tonnage", "effective_reps"])


def weekly_stimulus(sets: Iterable[SetRecord], movements: Sequence[Movement]) -> WeeklyStimulus:
    """Aggregate one week of sets.

    A set counts as a heavy exposure when reps plus effort distance is at
    most 4.
    """
    df = _sets_frame(sets, movements)
    if df.empty:
        return WeeklyStimulus()

    pull = df[df["counts_as_pull"]]
    grouped = df.groupby("category", sort=True).agg(sets=("tonnage", "size"), tonnage=("tonnage", "sum"))
    by_category = {
        str(category): CategoryVolume(sets=int(row["sets"]), tonnage=float(row["tonnage"]))
        for category, row in grouped.iterrows()
    }
    return WeeklyStimulus(
        pull_sets=int(len(pull)),
        pull_tonnage=float(pull["tonnage"].sum()),
        heavy_exposures=int((df["effective_reps"] <= HEAVY_EXPOSURE_MAX_EFFECTIVE_REPS).sum()),
        total_tonnage=float(df["tonnage"].sum()),
        by_category=by_category,
    )


@dataclass(frozen=True)
class VolumeWarning:
    warning_type: str
    current: float
    target: float
    message: str


@dataclass(frozen=True)
class VolumeCheck:
    stimulus: WeeklyStimulus
    warnings: tuple[VolumeWarning, ...] = ()

    @property
    def meets_minimums(self) -> bool:
        return not self.warnings


def volume_check(sets: Iterable[SetRecord], movements: Sequence[Movement]) -> VolumeCheck:
    """Flag low pull volume, too few heavy exposures and push/pull imbalance."""
    stimulus = weekly_stimulus(sets, movements)
    warnings: list[VolumeWarning] = []

    if stimulus.pull_sets < MIN_WEEKLY_PULL_SETS:
        warnings.append(
            VolumeWarning(
                "low_pull_volume",
                stimulus.pull_sets,
                TARGET_WEEKLY_PULL_SETS,
                f"{stimulus.pull_sets} pull sets this week, recommended at least {TARGET_WEEKLY_PULL_SETS}.",
            )
        )
    if stimulus.heavy_exposures < MIN_WEEKLY_HEAVY_EXPOSURES:
        warnings.append(
            VolumeWarning(
                "low_heavy_exposure",
                stimulus.heavy_exposures,
                TARGET_WEEKLY_HEAVY_EXPOSURES,
                f"{stimulus.heavy_exposures} heavy exposures this week, "
                f"recommended at least {TARGET_WEEKLY_HEAVY_EXPOSURES}.",
            )
        )

    push_sets = sum(
        stimulus.by_category[c].sets for c in _PUSH_CATEGORIES if c in stimulus.by_category
    )
    pull_sets = stimulus.pull_sets
    if pull_sets > 0 and push_sets < pull_sets * MIN_PUSH_TO_PULL_RATIO:
        warnings.append(
            VolumeWarning(
                "push_pull_imbalance",
                push_sets,
                pull_sets * MIN_PUSH_TO_PULL_RATIO,
                f"Push/pull {push_sets}:{pull_sets}, add pushing work (target at least 1:2).",
            )
        )

    return VolumeCheck(stimulus=stimulus, warnings=tuple(warnings))
