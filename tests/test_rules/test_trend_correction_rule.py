"""Tests for TrendCorrectionRule — bounded effort-distance trend nudge."""

from __future__ import annotations

from datetime import date

import pytest

from strength_engine.config import EngineConfig
from strength_engine.models.adjustment import AdjustmentContext, AdjustmentState
from strength_engine.models.cycle import BreakInfo
from strength_engine.models.enums import DayType, RuleId, SetRole
from strength_engine.models.history import SetRecord
from strength_engine.models.readiness import ReadinessSnapshot
from strength_engine.rules.correction.trend_correction import TrendCorrectionRule


class TestTrendCorrectionRule:
    def setup_method(self) -> None:
        self.rule = TrendCorrectionRule()

    def _make_context(
        self, target: int, actual: int, count: int = 6, config: EngineConfig | None = None
    ) -> AdjustmentContext:
        sets = tuple(
            SetRecord(
                "pullup",
                date(2024, 3, i + 1),
                67.0,
                reps=3,
                target_effort=target,
                actual_effort=actual,
                role=SetRole.TOP,
            )
            for i in range(count)
        )
        return AdjustmentContext(
            config=config or EngineConfig(),
            week_definition=None,
            readiness=ReadinessSnapshot(),
            break_info=BreakInfo(days=None),
            recent_top_sets=sets,
        )

    def test_systematic_overshoot_adds_correction(self) -> None:
        outcome = self.rule.apply(AdjustmentState(0.025, DayType.HEAVY), self._make_context(3, 1))
        assert outcome is not None
        assert outcome.state.adjustment == pytest.approx(0.035)
        assert outcome.entries[0].rule_id is RuleId.TREND_CORRECTION
        assert outcome.entries[0].after["correction"] == pytest.approx(0.01)

    def test_systematic_undershoot_subtracts(self) -> None:
        outcome = self.rule.apply(AdjustmentState(0.025, DayType.HEAVY), self._make_context(1, 3))
        assert outcome is not None
        assert outcome.state.adjustment == pytest.approx(0.015)

    def test_on_target_is_silent(self) -> None:
        assert self.rule.apply(AdjustmentState(0.025, DayType.HEAVY), self._make_context(2, 2)) is None

    def test_too_few_sets_is_silent(self) -> None:
        assert self.rule.apply(AdjustmentState(0.0, DayType.HEAVY), self._make_context(3, 1, count=3)) is None

    def test_config_limits_apply(self) -> None:
        config = EngineConfig(trend_max_correction=0.005)
        outcome = self.rule.apply(AdjustmentState(0.0, DayType.HEAVY), self._make_context(5, 0, config=config))
        assert outcome is not None
        assert outcome.state.adjustment == pytest.approx(0.005)

    def test_requires_recent_top_sets(self) -> None:
        empty = AdjustmentContext(
            config=EngineConfig(),
            week_definition=None,
            readiness=ReadinessSnapshot(),
            break_info=BreakInfo(days=None),
        )
        assert not self.rule.has_required_data(empty)
        assert self.rule.has_required_data(self._make_context(2, 2))
