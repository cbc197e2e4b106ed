"""CORRECTION rule: effort-distance trend of recent top sets.

When recent top sets systematically end further from failure than
prescribed, the load is too light and is nudged up; when they end closer,
it is nudged down. The nudge is small and bounded.

Reference:
    Helms et al. (2018). RPE vs. percentage 1RM loading in periodized
    programs matched for sets and repetitions. Front Physiol 9:247.
"""

from __future__ import annotations

from strength_engine.math.corrections import trend_correction
from strength_engine.models.adjustment import AdjustmentContext, AdjustmentState, RuleOutcome
from strength_engine.models.decision_trace import TraceEntry
from strength_engine.models.enums import RuleId, Stage
from strength_engine.rules.base import AdjustmentRule


class TrendCorrectionRule(AdjustmentRule):
    """Adds the bounded effort-distance trend correction."""

    rule_id = RuleId.TREND_CORRECTION
    version = "1.0.0"
    stage = Stage.TREND
    required_context = ["recent_top_sets"]

    def apply(self, state: AdjustmentState, context: AdjustmentContext) -> RuleOutcome | None:
        config = context.config
        correction = trend_correction(
            context.recent_top_sets,
            window=config.top_set_window,
            min_sets=config.trend_min_sets,
            gain=config.trend_gain,
            max_correction=config.trend_max_correction,
        )
        if correction == 0.0:
            return None

        adjusted = state.adjustment + correction
        direction = "easier" if correction > 0 else "harder"
        entry = TraceEntry.create(
            self.rule_id,
            {"adjustment": state.adjustment},
            {"adjustment": adjusted, "correction": correction},
            f"Recent top sets ran {direction} than prescribed: trend correction {correction:+.2%}.",
        )
        return RuleOutcome(AdjustmentState(adjusted, state.day_type), (entry,))
