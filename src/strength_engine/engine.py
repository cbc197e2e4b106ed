"""RecommendationEngine — the orchestrator that prescribes today's training."""

from __future__ import annotations

import dataclasses
import logging
import math
import uuid
from datetime import date
from typing import Iterable, Sequence

from strength_engine.config import EngineConfig
from strength_engine.exceptions import PlanResolutionError
from strength_engine.math.corrections import effort_feedback
from strength_engine.math.cycle import (
    analyze_break,
    cycle_week,
    day_targets,
    find_planned_day,
    resolve_day_plan,
    set_count,
)
from strength_engine.math.readiness import build_readiness_snapshot
from strength_engine.math.strength import estimate_from_top_sets, target_external_load
from strength_engine.models.adjustment import AdjustmentContext, AdjustmentState
from strength_engine.models.cycle import DayPlan, TrainingCycle, WeekDefinition, create_default_cycle
from strength_engine.models.decision_trace import TraceRecorder
from strength_engine.models.enums import (
    BreakSeverity,
    Channel,
    DayType,
    PlanSource,
    RuleId,
    SetRole,
    SlotRole,
)
from strength_engine.models.history import SetRecord
from strength_engine.models.inputs import RecommendationInputs
from strength_engine.models.prescription import Prescription, Recommendation
from strength_engine.registry import RuleRegistry
from strength_engine.store import TrainingStore

logger = logging.getLogger(__name__)

_TOP_SET_ROLES = frozenset({SetRole.TOP, SetRole.READINESS_TEST})


def select_top_sets(
    sets: Iterable[SetRecord],
    today: date,
    primary_movement_id: str | None = None,
    window: int | None = None,
) -> list[SetRecord]:
    """Top-effort sets of the primary movement up to ``today``, oldest first.

    When ``primary_movement_id`` is None every movement's top sets count.
    """
    selected = [
        s
        for s in sets
        if s.role in _TOP_SET_ROLES
        and s.performed_on <= today
        and (primary_movement_id is None or s.movement_id == primary_movement_id)
    ]
    selected.sort(key=lambda s: s.sort_key)
    if window is not None:
        return selected[-window:] if window > 0 else []
    return selected


def apply_accessory_cap(plan: DayPlan, reduction: float, min_sets: int) -> DayPlan:
    """Reduce every accessory slot's sets by ``reduction`` (half-up, floored at ``min_sets``)."""
    slots = tuple(
        dataclasses.replace(s, sets=max(min_sets, math.floor(s.sets * (1 - reduction) + 0.5)))
        if s.role is SlotRole.ACCESSORY
        else s
        for s in plan.slots
    )
    return dataclasses.replace(plan, slots=slots)


class RecommendationEngine:
    """Runs the fixed, ordered recommendation pipeline.

    Usage:
        engine = RecommendationEngine()
        result = engine.recommend(inputs)
        result = engine.recommend_from_store(store, date.today())
        previews = engine.preview(inputs, [date(2024, 3, 5), date(2024, 3, 7)])
        previews = engine.preview_from_store(store, date.today(), [date.today()])

    Each run builds new immutable values; the caller (or
    ``recommend_from_store``) decides whether to persist them.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        registry: RuleRegistry | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.registry = registry or RuleRegistry()

        # Auto-discover rules if using default registry
        if registry is None:
            self.registry.discover_rules()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def recommend(
        self,
        inputs: RecommendationInputs,
        trial_run: bool = False,
        config: EngineConfig | None = None,
    ) -> Recommendation:
        """Compute today's prescription and its decision trace.

        Pure with respect to ``inputs``: nothing is written anywhere. The
        returned ``Recommendation.cycle`` is the cycle the caller should
        store.

        Args:
            inputs: Frozen snapshot of everything the run reads.
            trial_run: Marks the result as a what-if computation.
            config: Overrides the engine's configuration for this run.
        """
        cfg = config or self.config
        today = inputs.today
        recorder = TraceRecorder()

        # 1. Resolve or create the cycle, then week and day type
        cycle, week, replaced = self._resolve_cycle(inputs.cycle, today, recorder)
        week_definition = cycle.week_definition(week)
        planned, _ = find_planned_day(cycle, week, today.isoweekday())
        day_type = planned.day_type if planned is not None else cfg.default_day_type
        recorder.record(
            RuleId.CYCLE_PHASE,
            {},
            {
                "week": week,
                "day_type": day_type.value,
                "phase": week_definition.phase.value if week_definition else None,
            },
            f"Week {week}: {week_definition.phase.value if week_definition else 'unknown'} phase, "
            f"{day_type.value} day.",
        )

        # 2. Break analysis, forced day type and cycle reset
        break_info = analyze_break(inputs.last_session_date, today)
        if break_info.modifier != 0.0:
            if break_info.forced_day_type is not None and break_info.forced_day_type is not day_type:
                recorder.record(
                    RuleId.BREAK_DAY_TYPE,
                    {"day_type": day_type.value},
                    {"day_type": break_info.forced_day_type.value},
                    break_info.message or "Break: day type forced.",
                )
                day_type = break_info.forced_day_type
            recorder.record(
                RuleId.BREAK_DETECTED,
                {"modifier": 0.0},
                {
                    "modifier": break_info.modifier,
                    "break_days": break_info.days,
                    "reset_cycle": break_info.reset_cycle,
                },
                break_info.message or f"Break of {break_info.days} days.",
            )
            if break_info.reset_cycle and cycle.start_date != today:
                cycle = create_default_cycle(today)
                week = 1
                week_definition = cycle.week_definition(week)
                replaced = True
                recorder.record(
                    RuleId.CYCLE_BREAK_RESET,
                    {"skipped_weeks": break_info.skipped_weeks},
                    {"week": week, "cycle_id": cycle.cycle_id},
                    f"{break_info.skipped_weeks} weeks skipped: cycle restarted at week 1.",
                )
                logger.debug("Cycle reset after %d-day break", break_info.days)

        # 3. Estimated max from recent top sets
        top_sets = select_top_sets(
            inputs.sets, today, inputs.primary_movement_id, window=cfg.top_set_window
        )
        estimated_max = estimate_from_top_sets(top_sets, inputs.bodyweight)
        estimated_max_external = (
            max(0.0, estimated_max - inputs.bodyweight) if estimated_max is not None else None
        )
        recorder.record(
            RuleId.ESTIMATED_MAX,
            {},
            {
                "estimated_max": estimated_max,
                "estimated_max_external": estimated_max_external,
                "from_sets": len(top_sets),
            },
            (
                f"Estimated max {estimated_max:.1f} (external {estimated_max_external:.1f}) "
                f"from {len(top_sets)} recent top sets."
                if estimated_max is not None and estimated_max_external is not None
                else "No qualifying top sets: estimated max unavailable."
            ),
        )

        # 4-8. Adjustment rules in stage order
        state = AdjustmentState(adjustment=0.0, day_type=day_type)
        context = AdjustmentContext(
            config=cfg,
            week_definition=week_definition,
            readiness=inputs.readiness,
            break_info=break_info,
            recent_top_sets=tuple(top_sets),
        )
        for rule in self.registry.get_all_rules():
            if not rule.has_required_data(context):
                logger.debug("Rule %s not applicable: missing %s", rule.rule_id.value, rule.required_context)
                continue
            outcome = rule.apply(state, context)
            if outcome is None:
                continue
            state = outcome.state
            recorder.extend(outcome.entries)
        adjustment = state.adjustment
        day_type = state.day_type

        # 9. Target reps and effort distance
        target_reps, target_effort = day_targets(day_type, week_definition)
        recorder.record(
            RuleId.TARGETS,
            {},
            {"day_type": day_type.value, "target_reps": target_reps, "target_effort": target_effort},
            (
                f"{day_type.value.capitalize()} day: {target_reps} reps at effort distance {target_effort}."
                if target_reps is not None
                else f"{day_type.value.capitalize()} day: no primary targets."
            ),
        )

        # 10. Target load via the inverse model
        target_load = None
        if target_reps is not None and target_effort is not None:
            target_load = target_external_load(
                estimated_max, inputs.bodyweight, target_reps, target_effort, adjustment
            )
        recorder.record(
            RuleId.TARGET_LOAD,
            {},
            {"target_load": target_load, "adjustment": adjustment},
            (
                f"Target load +{target_load:g} at adjustment {adjustment:+.2%}."
                if target_load is not None
                else "No load suggestion: use own judgment."
            ),
        )

        # 11. Set count, plus effort feedback on recent top sets
        sets = set_count(day_type)
        recorder.record(
            RuleId.SET_COUNT, {}, {"set_count": sets}, f"{sets} working sets for a {day_type.value} day."
        )
        feedback = effort_feedback(top_sets)
        if feedback is not None:
            recorder.record(
                RuleId.EFFORT_FEEDBACK,
                {},
                {"feedback_type": feedback.feedback_type.value},
                feedback.suggestion,
            )

        # 12. Accessory volume cap
        accessory_cap_active = inputs.readiness.all_channels_impaired
        if accessory_cap_active:
            recorder.record(
                RuleId.ACCESSORY_CAP,
                {},
                {"reduction": cfg.accessory_cap_reduction, "min_sets": cfg.accessory_min_sets},
                f"All readiness channels impaired: accessory sets reduced by "
                f"{cfg.accessory_cap_reduction:.0%}.",
            )

        # 13. Day plan
        day_plan = self._resolve_day_plan(cycle, week, today, day_type, week_definition, recorder)
        if accessory_cap_active:
            day_plan = apply_accessory_cap(day_plan, cfg.accessory_cap_reduction, cfg.accessory_min_sets)

        # 14. Assemble; persisting is the caller's single final step
        prescription_id = uuid.uuid4().hex
        prescription = Prescription(
            prescription_id=prescription_id,
            prescribed_on=today,
            cycle_id=cycle.cycle_id,
            week=week,
            phase=week_definition.phase if week_definition else None,
            day_type=day_type,
            target_load=target_load,
            target_reps=target_reps,
            target_effort=target_effort,
            set_count=sets,
            adjustment_pct=adjustment,
            cap_level=inputs.readiness.cap_level,
            readiness=inputs.readiness,
            estimated_max=estimated_max,
            estimated_max_external=estimated_max_external,
            bodyweight=inputs.bodyweight,
            accessory_cap_active=accessory_cap_active,
            day_plan=day_plan,
            break_info=break_info if break_info.severity is not BreakSeverity.NONE else None,
            effort_feedback=feedback,
        )
        logger.debug(
            "Prescribed %s: week %d %s, load %s, adjustment %+.4f",
            today,
            week,
            day_type.value,
            target_load,
            adjustment,
        )
        return Recommendation(
            prescription=prescription,
            trace=recorder.freeze(prescription_id),
            cycle=cycle,
            cycle_replaced=replaced,
            trial_run=trial_run,
        )

    def inputs_from_store(
        self,
        store: TrainingStore,
        today: date,
        bodyweight: float | None = None,
        config: EngineConfig | None = None,
    ) -> RecommendationInputs:
        """Load the read contract and build a fresh readiness snapshot for ``today``."""
        cfg = config or store.get_config() or self.config
        sets = tuple(store.list_sets())
        primary = next((m for m in store.list_movements() if m.is_primary), None)
        primary_id = primary.movement_id if primary is not None else None

        effort_sets = select_top_sets(sets, today, primary_id)
        # Today's own top sets are not yet feedback on readiness
        effort_sets = [s for s in effort_sets if s.performed_on < today]
        readiness = build_readiness_snapshot(
            today,
            velocity_samples=store.list_measurements(Channel.VELOCITY),
            recovery_samples=store.list_measurements(Channel.RECOVERY),
            recent_top_sets=effort_sets,
            velocity_window=cfg.velocity_window,
            recovery_window=cfg.recovery_window,
            effort_window=cfg.effort_window,
            min_baseline_samples=cfg.min_baseline_samples,
            min_effort_sets=cfg.min_effort_samples,
            yellow_overshoot=cfg.effort_yellow_overshoot,
            red_overshoot=cfg.effort_red_overshoot,
        )
        return RecommendationInputs(
            today=today,
            bodyweight=bodyweight if bodyweight is not None else cfg.default_bodyweight,
            cycle=store.get_active_cycle(),
            sessions=tuple(store.list_sessions()),
            sets=sets,
            readiness=readiness,
            primary_movement_id=primary_id,
        )

    def recommend_from_store(
        self,
        store: TrainingStore,
        today: date,
        trial_run: bool = False,
        bodyweight: float | None = None,
    ) -> Recommendation:
        """Load from ``store``, recommend, and write back once unless ``trial_run``."""
        cfg = store.get_config() or self.config
        inputs = self.inputs_from_store(store, today, bodyweight, cfg)
        result = self.recommend(inputs, trial_run=trial_run, config=cfg)

        if trial_run:
            logger.info("Trial run for %s: nothing persisted", today)
            return result

        store.save_cycle(result.cycle)
        store.save_prescription(result.prescription)
        store.append_trace_entries(result.prescription.prescription_id, result.trace.entries)
        return result

    def preview(
        self,
        inputs: RecommendationInputs,
        dates: Sequence[date],
        config: EngineConfig | None = None,
    ) -> list[Recommendation]:
        """Trial-run prescriptions for future ``dates`` (what-if; never persisted).

        The cycle produced for one date is carried into the next so a
        preview crossing a cycle boundary stays consistent.
        """
        cfg = config or self.config
        results: list[Recommendation] = []
        cycle = inputs.cycle
        for on in sorted(dates):
            result = self.recommend(
                dataclasses.replace(inputs, today=on, cycle=cycle), trial_run=True, config=cfg
            )
            cycle = result.cycle
            results.append(result)
        return results

    def preview_from_store(
        self,
        store: TrainingStore,
        start: date,
        dates: Sequence[date],
        bodyweight: float | None = None,
    ) -> list[Recommendation]:
        """``preview`` over the store's state, with the same configuration
        ``recommend_from_store`` would use."""
        cfg = store.get_config() or self.config
        inputs = self.inputs_from_store(store, start, bodyweight, cfg)
        return self.preview(inputs, dates, config=cfg)

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def _resolve_cycle(
        self,
        cycle: TrainingCycle | None,
        today: date,
        recorder: TraceRecorder,
    ) -> tuple[TrainingCycle, int, bool]:
        if cycle is None:
            cycle = create_default_cycle(today)
            recorder.record(
                RuleId.CYCLE_CREATED,
                {},
                {"cycle_id": cycle.cycle_id, "start_date": today.isoformat()},
                "No active cycle: new cycle created.",
            )
            logger.debug("Created cycle %s", cycle.cycle_id)
            return cycle, 1, True

        week = cycle_week(cycle, today)
        if week is None:
            previous = cycle.cycle_id
            cycle = create_default_cycle(today)
            recorder.record(
                RuleId.CYCLE_ROLLOVER,
                {"cycle_id": previous},
                {"cycle_id": cycle.cycle_id, "week": 1},
                "Previous cycle ended: new cycle started.",
            )
            logger.debug("Cycle %s ended, rolled over to %s", previous, cycle.cycle_id)
            return cycle, 1, True
        return cycle, week, False

    def _resolve_day_plan(
        self,
        cycle: TrainingCycle,
        week: int,
        today: date,
        day_type: DayType,
        week_definition: WeekDefinition | None,
        recorder: TraceRecorder,
    ) -> DayPlan:
        resolution = resolve_day_plan(cycle, week, today.isoweekday(), day_type, week_definition)
        if resolution.plan is None:
            raise PlanResolutionError(f"No day plan for week {week} on {today}")
        if resolution.source is PlanSource.NEAREST:
            recorder.record(
                RuleId.DAY_PLAN_NEAREST,
                {"day_of_week": today.isoweekday()},
                {"day_of_week": resolution.plan.day_of_week},
                f"No plan for weekday {today.isoweekday()}: using nearest planned day "
                f"{resolution.plan.day_of_week}.",
            )
        elif resolution.source is PlanSource.GENERATED:
            recorder.record(
                RuleId.DAY_PLAN_GENERATED,
                {},
                {"day_type": day_type.value, "slots": len(resolution.plan.slots)},
                f"Day plan generated with default movements for a {day_type.value} day.",
            )
        return resolution.plan
