"""CORRECTION rule: load penalty after time away from training.

Reference:
    Mujika & Padilla (2000). Detraining: loss of training-induced
    physiological and performance adaptations. Sports Med 30(2):79-87.
"""

from __future__ import annotations

from strength_engine.models.adjustment import AdjustmentContext, AdjustmentState, RuleOutcome
from strength_engine.models.decision_trace import TraceEntry
from strength_engine.models.enums import RuleId, Stage
from strength_engine.rules.base import AdjustmentRule


class BreakModifierRule(AdjustmentRule):
    """Adds the return-from-break modifier (-5 %, -10 % or -15 %)."""

    rule_id = RuleId.BREAK_MODIFIER
    version = "1.0.0"
    stage = Stage.BREAK
    required_context = ["break_info"]

    def apply(self, state: AdjustmentState, context: AdjustmentContext) -> RuleOutcome | None:
        modifier = context.break_info.modifier
        if modifier == 0.0:
            return None

        adjusted = state.adjustment + modifier
        entry = TraceEntry.create(
            self.rule_id,
            {"adjustment": state.adjustment},
            {"adjustment": adjusted, "modifier": modifier, "break_days": context.break_info.days},
            f"Break of {context.break_info.days} days: modifier {modifier:+.0%}.",
        )
        return RuleOutcome(AdjustmentState(adjusted, state.day_type), (entry,))
