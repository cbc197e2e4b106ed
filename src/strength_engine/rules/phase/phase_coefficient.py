"""PHASE rule: raw adjustment from the week's phase coefficient.

The planned load change of the week is scaled by how much of it the day
type carries: heavy days take the full coefficient, volume and speed days
a fraction, accessory and rest days none.

Reference:
    Issurin (2010). New horizons for the methodology and physiology of
    training periodization. Sports Med 40(3):189-206.
"""

from __future__ import annotations

from strength_engine.math.cycle import raw_adjustment
from strength_engine.models.adjustment import AdjustmentContext, AdjustmentState, RuleOutcome
from strength_engine.models.decision_trace import TraceEntry
from strength_engine.models.enums import DAY_TYPE_MULTIPLIERS, RuleId, Stage
from strength_engine.rules.base import AdjustmentRule


class PhaseCoefficientRule(AdjustmentRule):
    """Sets the adjustment to phase coefficient × day-type multiplier."""

    rule_id = RuleId.ADJUSTMENT_RAW
    version = "1.0.0"
    stage = Stage.PHASE

    def apply(self, state: AdjustmentState, context: AdjustmentContext) -> RuleOutcome | None:
        definition = context.week_definition
        base = definition.base_adjustment if definition is not None else 0.0
        multiplier = DAY_TYPE_MULTIPLIERS[state.day_type]
        raw = raw_adjustment(definition, state.day_type)

        phase = definition.phase.value if definition is not None else "unknown"
        entry = TraceEntry.create(
            self.rule_id,
            {"adjustment": state.adjustment},
            {"adjustment": raw, "base_adjustment": base, "multiplier": multiplier},
            f"Raw adjustment = {phase} coefficient {base:+.1%} × "
            f"{state.day_type.value} multiplier {multiplier:.1f} = {raw:+.2%}.",
        )
        return RuleOutcome(AdjustmentState(raw, state.day_type), (entry,))
