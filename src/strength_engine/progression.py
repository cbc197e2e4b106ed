"""Accessory progression: per-movement target streaks, stagnation and load suggestions.

Each accessory movement progresses independently of the primary-movement
pipeline. After a completed session the tracker replaces the movement's
progress record with an updated one.

Reference:
    Kraemer & Ratamess (2004). Fundamentals of resistance training:
    progression and exercise prescription. Med Sci Sports Exerc
    36(4):674-688.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from typing import NamedTuple, Sequence

from strength_engine.config import EngineConfig
from strength_engine.math.robust_stats import round_to_half
from strength_engine.math.strength import accessory_max
from strength_engine.models.enums import (
    TARGET_MET_SESSIONS_FOR_INCREASE,
    MovementClass,
    ProgressAction,
    StagnationSeverity,
)
from strength_engine.models.history import Movement, SetRecord
from strength_engine.models.progress import MaxPoint, MovementProgress
from strength_engine.store import TrainingStore

logger = logging.getLogger(__name__)


class StagnationCheck(NamedTuple):
    stagnated: bool
    severity: StagnationSeverity | None
    message: str | None


def check_stagnation(
    progress: MovementProgress | None,
    threshold_weeks: int = 3,
    escalation_weeks: int = 6,
) -> StagnationCheck:
    """Yellow at ``threshold_weeks`` without a new max, orange at ``escalation_weeks``."""
    if progress is None or progress.stagnation_weeks < threshold_weeks:
        return StagnationCheck(False, None, None)
    weeks = progress.stagnation_weeks
    if weeks >= escalation_weeks:
        return StagnationCheck(
            True,
            StagnationSeverity.ORANGE,
            f"{weeks} weeks without progress: substituting the movement is recommended.",
        )
    return StagnationCheck(
        True,
        StagnationSeverity.YELLOW,
        f"{weeks} weeks without progress: consider substituting the movement.",
    )


@dataclass(frozen=True)
class ProgressionSuggestion:
    action: ProgressAction
    suggested_load: float | None
    reason: str
    stagnation_warning: bool = False


def suggest_action(
    progress: MovementProgress | None,
    movement_class: MovementClass = MovementClass.UPPER,
    config: EngineConfig | None = None,
) -> ProgressionSuggestion:
    """Increase after two target-met sessions in a row, otherwise hold.

    The increment is 2.5 for upper-body movements and 5 for lower-body
    movements (configurable).
    """
    cfg = config or EngineConfig()
    if progress is None:
        return ProgressionSuggestion(ProgressAction.HOLD, None, "No progression data yet.")

    increment = cfg.lower_increment if movement_class is MovementClass.LOWER else cfg.upper_increment
    if progress.consecutive_target_met >= TARGET_MET_SESSIONS_FOR_INCREASE:
        new_load = round_to_half((progress.last_load or 0.0) + increment)
        return ProgressionSuggestion(
            ProgressAction.INCREASE,
            new_load,
            f"Target met {progress.consecutive_target_met} sessions in a row: +{increment:g}.",
        )

    if progress.stagnation_weeks >= cfg.stagnation_threshold_weeks:
        return ProgressionSuggestion(
            ProgressAction.HOLD,
            progress.last_load,
            f"Stagnant for {progress.stagnation_weeks} weeks: consider substituting the movement.",
            stagnation_warning=True,
        )

    return ProgressionSuggestion(ProgressAction.HOLD, progress.last_load, "Keep the same load.")


def _target_met(s: SetRecord) -> bool:
    reps_met = s.target_reps is None or (s.reps or 0) >= s.target_reps
    effort_met = s.target_effort is None or s.actual_effort is None or s.actual_effort >= s.target_effort
    return reps_met and effort_met


def update_progress(
    previous: MovementProgress | None,
    movement: Movement,
    session_sets: Sequence[SetRecord],
    performed_on: date,
    config: EngineConfig | None = None,
) -> MovementProgress:
    """New progress record after one completed session of ``movement``.

    Returns ``previous`` unchanged when the session has no sets for the
    movement.
    """
    cfg = config or EngineConfig()
    sets = sorted(
        (s for s in session_sets if s.movement_id == movement.movement_id), key=lambda s: s.sort_key
    )
    current = previous or MovementProgress(movement_id=movement.movement_id)
    if not sets:
        return current

    last = sets[-1]
    new_max = accessory_max(last.external_load, last.reps)
    previous_max = current.current_max

    consecutive = current.consecutive_target_met + 1 if all(_target_met(s) for s in sets) else 0

    stagnation_weeks = current.stagnation_weeks
    flagged = current.stagnation_flagged
    if new_max is not None and previous_max is not None:
        if new_max <= previous_max:
            stagnation_weeks += 1
        else:
            stagnation_weeks = 0
            flagged = False
    if stagnation_weeks >= cfg.stagnation_threshold_weeks:
        flagged = True

    history = current.max_history
    if new_max is not None:
        history = history + (MaxPoint(performed_on, new_max),)

    updated = dataclasses.replace(
        current,
        last_load=last.external_load,
        last_reps=last.reps,
        current_max=new_max if new_max is not None else previous_max,
        max_history=history,
        consecutive_target_met=consecutive,
        stagnation_weeks=stagnation_weeks,
        stagnation_flagged=flagged,
    )
    suggestion = suggest_action(updated, movement.movement_class, cfg)
    return dataclasses.replace(
        updated,
        suggested_action=suggestion.action,
        suggested_load=suggestion.suggested_load,
    )


class ProgressionTracker:
    """Applies update_progress to every accessory movement of a session.

    Usage:
        tracker = ProgressionTracker(store)
        updated = tracker.record_session(session_sets, date(2024, 3, 4))
    """

    def __init__(self, store: TrainingStore, config: EngineConfig | None = None) -> None:
        self.store = store
        self.config = config or store.get_config() or EngineConfig()

    def record_session(
        self,
        session_sets: Sequence[SetRecord],
        performed_on: date,
        trial_run: bool = False,
    ) -> list[MovementProgress]:
        """Update (and unless ``trial_run``, save) progress for each accessory movement trained."""
        movements = {m.movement_id: m for m in self.store.list_movements()}
        trained = sorted({s.movement_id for s in session_sets})
        updated: list[MovementProgress] = []
        for movement_id in trained:
            movement = movements.get(movement_id)
            if movement is None:
                logger.warning("Sets for unknown movement %s skipped", movement_id)
                continue
            if movement.is_primary:
                continue
            progress = update_progress(
                self.store.get_progress(movement_id), movement, session_sets, performed_on, self.config
            )
            stagnation = check_stagnation(
                progress, self.config.stagnation_threshold_weeks, self.config.stagnation_escalation_weeks
            )
            if stagnation.stagnated:
                logger.info("%s: %s", movement.name, stagnation.message)
            if not trial_run:
                self.store.save_progress(progress)
            updated.append(progress)
        return updated
