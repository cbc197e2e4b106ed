"""Custom exception hierarchy for the strength engine boundary.

Core computation never raises for missing data; these cover configuration,
the store contract and the command-line surface.
"""

from __future__ import annotations


class StrengthEngineError(Exception):
    """Base exception for all strength_engine errors."""


class ConfigurationError(StrengthEngineError):
    """A configuration value could not be parsed."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class StoreError(StrengthEngineError):
    """The training store failed to read or write a record."""


class RecordNotFoundError(StoreError):
    """A referenced record does not exist in the store."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"No {kind} with id {record_id!r}")
        self.kind = kind
        self.record_id = record_id


class PlanResolutionError(StrengthEngineError):
    """No day plan could be resolved for the requested date."""
