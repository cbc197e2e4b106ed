"""SAFETY rule: readiness cap on the planned load increase.

The cap only restricts an increase. RED removes any increase and turns a
heavy day into a volume day; YELLOW halves the adjustment; GREEN leaves it
alone.

Reference:
    Plews et al. (2013). Training adaptation and heart rate variability in
    elite endurance athletes. Int J Sports Physiol Perform 8(6):688-694.
    Jovanovic & Flanagan (2014). Researched applications of velocity based
    strength training. J Aust Strength Cond 22(2):58-69.
"""

from __future__ import annotations

from strength_engine.models.adjustment import AdjustmentContext, AdjustmentState, RuleOutcome
from strength_engine.models.decision_trace import TraceEntry
from strength_engine.models.enums import YELLOW_CAP_FACTOR, DayType, ReadinessClass, RuleId, Stage
from strength_engine.rules.base import AdjustmentRule


class ReadinessCapRule(AdjustmentRule):
    """Applies the combined readiness classification to the clamped adjustment."""

    rule_id = RuleId.READINESS_RED_CAP
    version = "1.0.0"
    stage = Stage.READINESS
    required_context = ["readiness"]

    def apply(self, state: AdjustmentState, context: AdjustmentContext) -> RuleOutcome | None:
        readiness = context.readiness
        combined = readiness.combined

        if combined is ReadinessClass.RED:
            entries: list[TraceEntry] = []
            day_type = state.day_type
            if day_type is DayType.HEAVY:
                day_type = DayType.VOLUME
                entries.append(
                    TraceEntry.create(
                        RuleId.READINESS_RED_DAY_TYPE,
                        {"day_type": state.day_type.value},
                        {"day_type": day_type.value},
                        "RED readiness: heavy day downgraded to volume.",
                    )
                )
            capped = min(state.adjustment, 0.0)
            if capped != state.adjustment:
                entries.append(
                    TraceEntry.create(
                        RuleId.READINESS_RED_CAP,
                        {"adjustment": state.adjustment},
                        {"adjustment": capped, "cap_level": readiness.cap_level},
                        "RED readiness: adjustment capped at 0.",
                    )
                )
            if not entries:
                return None
            return RuleOutcome(AdjustmentState(capped, day_type), tuple(entries))

        if combined is ReadinessClass.YELLOW:
            if state.adjustment == 0.0:
                return None
            halved = state.adjustment * YELLOW_CAP_FACTOR
            entry = TraceEntry.create(
                RuleId.READINESS_YELLOW_CAP,
                {"adjustment": state.adjustment},
                {"adjustment": halved, "cap_level": readiness.cap_level},
                f"YELLOW readiness: adjustment halved to {halved:+.2%}.",
            )
            return RuleOutcome(AdjustmentState(halved, state.day_type), (entry,))

        # GREEN: no cap
        return None
