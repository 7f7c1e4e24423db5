"""Central rule registry.

Rules are kept in registration order, which is their precedence: for a
given candidate the first rule that applies to its kind and matches wins.
"""

from __future__ import annotations

import logging
from typing import Iterator

from artifact_collector.models.rule import Rule, RuleGroup
from artifact_collector.rules import archives, assemblies, testware

log = logging.getLogger(__name__)


class RuleRegistry:
    """Stores classification rules in precedence order."""

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}

    def register(self, rule: Rule) -> None:
        """Append a rule to the end of the decision list."""
        if rule.id in self._rules:
            log.warning("Rule '%s' already registered, skipping duplicate", rule.id)
            return
        self._rules[rule.id] = rule
        log.debug("Registered rule: %s (%s)", rule.id, rule.name)

    def get(self, rule_id: str) -> Rule | None:
        """Get a rule by its ID."""
        return self._rules.get(rule_id)

    def get_all(self) -> list[Rule]:
        """Get all rules in precedence order."""
        return list(self._rules.values())

    def rules_for(self, kind: str) -> list[Rule]:
        """Get the decision list for one candidate kind."""
        return [r for r in self._rules.values() if r.applies_to(kind)]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._rules

    def get_groups(self) -> dict[str, list[Rule]]:
        """Group rules by their RuleGroup id, keeping precedence order inside each group."""
        groups: dict[str, list[Rule]] = {}
        for rule in self._rules.values():
            groups.setdefault(rule.group.id, []).append(rule)
        return groups

    def group_info(self, group_id: str) -> RuleGroup | None:
        for rule in self._rules.values():
            if rule.group.id == group_id:
                return rule.group
        return None


# Precedence: structural validity, then naming overrides, then test
# detection, then location, then content.
DEFAULT_RULES: tuple[Rule, ...] = (
    archives.INVALID_ARCHIVE,
    archives.BUILD_TOOL_WRAPPER,
    testware.TEST_ARCHIVE_NAME,
    testware.TEST_ARCHIVE_CONTENT,
    archives.DEPLOYABLE_PACKAGE,
    archives.DEPENDENCY_DIRECTORY,
    archives.APPLICATION_CONTENT,
    archives.LIBRARY_CONTENT,
    testware.TEST_ASSEMBLY_NAME,
    testware.TEST_ASSEMBLY_DIRECTORY,
    assemblies.PACKAGE_DIRECTORY,
    assemblies.VENDOR_PREFIX,
    assemblies.VERSIONED_NAME,
)


def default_registry() -> RuleRegistry:
    """Build a registry holding the built-in decision lists."""
    registry = RuleRegistry()
    for rule in DEFAULT_RULES:
        registry.register(rule)
    return registry
