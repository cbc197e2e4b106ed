"""Tests for BreakModifierRule — return-from-break load penalty."""

from __future__ import annotations

import pytest

from strength_engine.config import EngineConfig
from strength_engine.models.adjustment import AdjustmentContext, AdjustmentState
from strength_engine.models.cycle import BreakInfo
from strength_engine.models.enums import BreakSeverity, DayType, RuleId, Stage
from strength_engine.models.readiness import ReadinessSnapshot
from strength_engine.rules.correction.break_modifier import BreakModifierRule


class TestBreakModifierRule:
    def setup_method(self) -> None:
        self.rule = BreakModifierRule()

    def _make_context(self, break_info: BreakInfo) -> AdjustmentContext:
        return AdjustmentContext(
            config=EngineConfig(),
            week_definition=None,
            readiness=ReadinessSnapshot(),
            break_info=break_info,
        )

    def test_runs_after_trend(self) -> None:
        assert self.rule.stage == Stage.BREAK

    def test_adds_modifier(self) -> None:
        info = BreakInfo(days=9, modifier=-0.05, severity=BreakSeverity.SHORT)
        outcome = self.rule.apply(AdjustmentState(0.025, DayType.HEAVY), self._make_context(info))
        assert outcome is not None
        assert outcome.state.adjustment == pytest.approx(-0.025)
        entry = outcome.entries[0]
        assert entry.rule_id is RuleId.BREAK_MODIFIER
        assert entry.after["break_days"] == 9
        assert "9 days" in entry.rationale

    def test_no_break_is_silent(self) -> None:
        assert self.rule.apply(AdjustmentState(0.025, DayType.HEAVY), self._make_context(BreakInfo(days=3))) is None
