"""Engine configuration, optionally read from STRENGTH_ENGINE_* environment variables."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Mapping

from strength_engine.exceptions import ConfigurationError
from strength_engine.models.enums import DayType

ENV_PREFIX = "STRENGTH_ENGINE_"


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for one engine instance. Passed explicitly, never global."""

    default_bodyweight: float = 91.0
    max_adjustment: float = 0.25
    # Readiness windows and thresholds
    velocity_window: int = 10
    recovery_window: int = 14
    effort_window: int = 5
    min_baseline_samples: int = 3
    min_effort_samples: int = 2
    effort_yellow_overshoot: float = 1.0
    effort_red_overshoot: float = 2.0
    # Estimated max and trend correction
    top_set_window: int = 6
    trend_min_sets: int = 4
    trend_max_correction: float = 0.015
    trend_gain: float = 0.005
    # Accessory progression
    upper_increment: float = 2.5
    lower_increment: float = 5.0
    stagnation_threshold_weeks: int = 3
    stagnation_escalation_weeks: int = 6
    accessory_cap_reduction: float = 0.30
    accessory_min_sets: int = 2
    default_day_type: DayType = DayType.HEAVY

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """Build a config, overriding defaults with ``STRENGTH_ENGINE_<FIELD>`` variables.

        Raises:
            ConfigurationError: when a variable is set but cannot be parsed.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for f in dataclasses.fields(cls):
            key = ENV_PREFIX + f.name.upper()
            raw = env.get(key)
            if raw is None or raw.strip() == "":
                continue
            overrides[f.name] = parse_value(key, raw.strip(), f.default)
        return cls(**overrides)


def parse_value(key: str, raw: str, default: object) -> object:
    try:
        if isinstance(default, DayType):
            return DayType(raw.lower())
        if isinstance(default, int):
            return int(raw)
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid value for {key}: {raw!r}", key=key) from exc
