"""Deterministic strength-training recommendation engine."""

from strength_engine.config import EngineConfig
from strength_engine.engine import RecommendationEngine

__all__ = ["EngineConfig", "RecommendationEngine"]
