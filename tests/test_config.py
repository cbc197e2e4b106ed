"""Tests for EngineConfig and its environment overrides (config.py)."""

from __future__ import annotations

import pytest

from strength_engine.config import EngineConfig
from strength_engine.exceptions import ConfigurationError
from strength_engine.models.enums import DayType


class TestDefaults:
    def test_defaults(self) -> None:
        config = EngineConfig()
        assert config.max_adjustment == 0.25
        assert config.velocity_window == 10
        assert config.recovery_window == 14
        assert config.top_set_window == 6
        assert config.accessory_cap_reduction == 0.30
        assert config.default_day_type is DayType.HEAVY


class TestFromEnv:
    def test_empty_environment_gives_defaults(self) -> None:
        assert EngineConfig.from_env({}) == EngineConfig()

    def test_overrides(self) -> None:
        config = EngineConfig.from_env(
            {
                "STRENGTH_ENGINE_MAX_ADJUSTMENT": "0.2",
                "STRENGTH_ENGINE_VELOCITY_WINDOW": "7",
                "STRENGTH_ENGINE_DEFAULT_DAY_TYPE": "Volume",
                "UNRELATED": "x",
            }
        )
        assert config.max_adjustment == 0.2
        assert config.velocity_window == 7
        assert config.default_day_type is DayType.VOLUME

    def test_blank_values_are_ignored(self) -> None:
        assert EngineConfig.from_env({"STRENGTH_ENGINE_TREND_GAIN": "  "}).trend_gain == 0.005

    def test_reads_process_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("STRENGTH_ENGINE_DEFAULT_BODYWEIGHT", "85.5")
        assert EngineConfig.from_env().default_bodyweight == 85.5

    @pytest.mark.parametrize(
        "key, raw",
        [
            ("STRENGTH_ENGINE_EFFORT_WINDOW", "five"),
            ("STRENGTH_ENGINE_EFFORT_WINDOW", "2.5"),
            ("STRENGTH_ENGINE_DEFAULT_DAY_TYPE", "leg_day"),
        ],
    )
    def test_invalid_values_raise(self, key: str, raw: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig.from_env({key: raw})
        assert exc_info.value.key == key
