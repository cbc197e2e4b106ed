"""Registry of the load-adjustment layers, found by scanning ``strength_engine.rules``."""

from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path

from strength_engine.rules.base import AdjustmentRule


class RuleRegistry:
    """Holds one instance of each adjustment layer, keyed by its trace id.

    The engine walks ``get_all_rules()`` front to back, feeding each layer
    the adjustment left by the one before, so the stage sort is what fixes
    phase → trend → break → clamp → readiness.
    """

    def __init__(self) -> None:
        self._rules: dict[str, AdjustmentRule] = {}

    def discover_rules(self) -> None:
        """Import every module under rules/ and register its concrete layers."""
        import strength_engine.rules as rules_pkg

        rules_path = Path(rules_pkg.__file__).parent  # type: ignore[arg-type]
        self._scan_package(rules_pkg.__name__, str(rules_path))

    def _scan_package(self, package_name: str, package_path: str) -> None:
        for _, module_name, _ in pkgutil.walk_packages([package_path], prefix=package_name + "."):
            module = importlib.import_module(module_name)
            for attr in vars(module).values():
                if (
                    isinstance(attr, type)
                    and issubclass(attr, AdjustmentRule)
                    and attr is not AdjustmentRule
                    and attr.__module__ == module.__name__
                    and not getattr(attr, "__abstractmethods__", set())
                ):
                    self.register(attr())

    def register(self, rule: AdjustmentRule) -> None:
        # A later layer with the same trace id replaces the earlier one
        self._rules[rule.rule_id.value] = rule

    def get(self, rule_id: str) -> AdjustmentRule | None:
        return self._rules.get(rule_id)

    def get_all_rules(self) -> list[AdjustmentRule]:
        """Layers in application order: by stage, then trace id."""
        return sorted(self._rules.values(), key=lambda r: (r.stage, r.rule_id.value))

    @property
    def rule_ids(self) -> list[str]:
        return list(self._rules.keys())
