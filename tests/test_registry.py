"""Tests for the rule registry."""

from __future__ import annotations

from artifact_collector.core.registry import DEFAULT_RULES, RuleRegistry, default_registry
from artifact_collector.models.classification import Classification
from artifact_collector.models.rule import Rule, RuleGroup

GROUP = RuleGroup("misc", "Misc")


def _rule(rule_id: str, kinds=("jar",)) -> Rule:
    return Rule(
        id=rule_id,
        name=rule_id.title(),
        description="",
        classification=Classification.THIRD_PARTY_LIBRARY,
        predicate=lambda ctx: True,
        kinds=kinds,
        group=GROUP,
    )


class TestRuleRegistry:
    def test_register_and_get(self):
        registry = RuleRegistry()
        rule = _rule("one")
        registry.register(rule)
        assert registry.get("one") is rule
        assert "one" in registry
        assert len(registry) == 1

    def test_duplicate_is_skipped(self, caplog):
        registry = RuleRegistry()
        registry.register(_rule("one"))
        registry.register(_rule("one"))
        assert len(registry) == 1
        assert "already registered" in caplog.text

    def test_rules_for_kind(self):
        registry = RuleRegistry()
        registry.register(_rule("jar_only"))
        registry.register(_rule("dll_only", kinds=("dll",)))
        assert [r.id for r in registry.rules_for("dll")] == ["dll_only"]

    def test_groups(self):
        registry = default_registry()
        groups = registry.get_groups()
        assert set(groups) == {"archives", "tests", "assemblies"}
        assert registry.group_info("tests").name == "Test Artifacts"
        assert registry.group_info("nope") is None


class TestDefaultPrecedence:
    def test_all_rules_registered(self):
        assert len(default_registry()) == len(DEFAULT_RULES)

    def test_jar_order(self):
        ids = [r.id for r in default_registry().rules_for("jar")]
        assert ids == [
            "invalid_archive",
            "build_tool_wrapper",
            "test_archive_name",
            "test_archive_content",
            "dependency_directory",
            "application_content",
            "library_content",
        ]

    def test_war_order(self):
        ids = [r.id for r in default_registry().rules_for("war")]
        assert ids == ["invalid_archive", "test_archive_name", "deployable_package"]

    def test_dll_order(self):
        ids = [r.id for r in default_registry().rules_for("dll")]
        assert ids == [
            "test_assembly_name",
            "test_assembly_directory",
            "package_directory",
            "vendor_prefix",
            "versioned_name",
        ]
