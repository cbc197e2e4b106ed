"""Abstract base class for all load-adjustment rules."""

from __future__ import annotations

from abc import ABC, abstractmethod

from strength_engine.models.adjustment import AdjustmentContext, AdjustmentState, RuleOutcome
from strength_engine.models.enums import RuleId, Stage


class AdjustmentRule(ABC):
    """Base class for one correction layer of the load adjustment.

    Each rule encapsulates one step of the fixed adjustment order. Rules are
    discovered automatically by the RuleRegistry and applied by the
    RecommendationEngine in ``stage`` order; each sees the state left by the
    previous stage.

    Subclasses must define:
        rule_id: trace identifier of the main entry the rule emits
        version: semantic version string
        stage: position in the adjustment order
        required_context: AdjustmentContext field names the rule needs
        apply(): the rule's decision logic
    """

    rule_id: RuleId
    version: str
    stage: Stage
    required_context: list[str] = []

    def has_required_data(self, context: AdjustmentContext) -> bool:
        """Check that all required context fields are present and non-empty."""
        for field_name in self.required_context:
            value = getattr(context, field_name, None)
            if value is None:
                return False
            if isinstance(value, (list, tuple)) and len(value) == 0:
                return False
        return True

    @abstractmethod
    def apply(self, state: AdjustmentState, context: AdjustmentContext) -> RuleOutcome | None:
        """Apply this rule to the running adjustment state.

        Returns a RuleOutcome when the rule changed (or established) the
        state, or None when it had nothing to do.
        """
        ...
