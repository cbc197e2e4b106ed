"""Decision trace — full audit trail of how the engine reached its prescription."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from strength_engine.models.enums import RuleId


def _freeze(values: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class TraceEntry:
    """Record of a single rule's effect during an engine call.

    ``before`` and ``after`` hold only the numeric/categorical state the
    rule touched.
    """

    rule_id: RuleId
    before: Mapping[str, Any]
    after: Mapping[str, Any]
    rationale: str

    @classmethod
    def create(
        cls,
        rule_id: RuleId,
        before: Mapping[str, Any] | None,
        after: Mapping[str, Any] | None,
        rationale: str,
    ) -> TraceEntry:
        return cls(rule_id, _freeze(before), _freeze(after), rationale)


@dataclass(frozen=True)
class DecisionTrace:
    """Complete, ordered audit trail for a single engine.recommend() call.

    Write-once. The engine never reads a trace back as input, so deleting
    stored traces cannot change future recommendations.
    """

    prescription_id: str
    entries: tuple[TraceEntry, ...] = field(default_factory=tuple)

    @property
    def rule_ids(self) -> list[RuleId]:
        return [e.rule_id for e in self.entries]

    @property
    def rationales(self) -> list[str]:
        return [e.rationale for e in self.entries]

    def find(self, rule_id: RuleId) -> TraceEntry | None:
        """Return the first entry for ``rule_id``, or None."""
        for entry in self.entries:
            if entry.rule_id is rule_id:
                return entry
        return None


class TraceRecorder:
    """Append-only builder used while a single recommendation is computed."""

    def __init__(self) -> None:
        self._entries: list[TraceEntry] = []

    def record(
        self,
        rule_id: RuleId,
        before: Mapping[str, Any] | None,
        after: Mapping[str, Any] | None,
        rationale: str,
    ) -> None:
        self._entries.append(TraceEntry.create(rule_id, before, after, rationale))

    def extend(self, entries: tuple[TraceEntry, ...]) -> None:
        self._entries.extend(entries)

    def freeze(self, prescription_id: str) -> DecisionTrace:
        return DecisionTrace(prescription_id=prescription_id, entries=tuple(self._entries))
