"""SAFETY rule: bound the combined adjustment before readiness is applied."""

from __future__ import annotations

from strength_engine.math.robust_stats import clamp
from strength_engine.models.adjustment import AdjustmentContext, AdjustmentState, RuleOutcome
from strength_engine.models.decision_trace import TraceEntry
from strength_engine.models.enums import RuleId, Stage
from strength_engine.rules.base import AdjustmentRule


class ClampRule(AdjustmentRule):
    """Clamps the adjustment to ±max_adjustment (default 25 %)."""

    rule_id = RuleId.ADJUSTMENT_CLAMP
    version = "1.0.0"
    stage = Stage.CLAMP

    def apply(self, state: AdjustmentState, context: AdjustmentContext) -> RuleOutcome | None:
        limit = context.config.max_adjustment
        clamped = clamp(state.adjustment, -limit, limit)
        if clamped == state.adjustment:
            return None

        entry = TraceEntry.create(
            self.rule_id,
            {"adjustment": state.adjustment},
            {"adjustment": clamped, "limit": limit},
            f"Adjustment {state.adjustment:+.2%} clamped to ±{limit:.0%}.",
        )
        return RuleOutcome(AdjustmentState(clamped, state.day_type), (entry,))
