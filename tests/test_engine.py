"""Tests for the classification engine."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import write_corrupt_jar, write_file, write_jar

from artifact_collector.core.discovery import discover
from artifact_collector.core.engine import DEFAULT_RULE_ID, ClassificationEngine
from artifact_collector.core.inspector import ArchiveInspector, ZipfileInspector
from artifact_collector.core.registry import default_registry
from artifact_collector.models.classification import Classification


class FakeInspector(ArchiveInspector):
    """Inspector that never touches archive bytes and records every call."""

    id = "fake"
    description = "Fake inspector for testing"

    def __init__(self, entries: list[str] | None = None, valid: bool = True):
        self.entries = entries or []
        self.valid = valid
        self.calls: list[tuple[str, str]] = []

    def validate_integrity(self, path: Path) -> bool:
        self.calls.append(("validate", path.name))
        return self.valid

    def list_entries(self, path: Path) -> list[str]:
        self.calls.append(("list", path.name))
        return list(self.entries)

    def extract_to(self, path: Path, destination: Path) -> None:
        self.calls.append(("extract", path.name))


@pytest.fixture
def engine():
    return ClassificationEngine(default_registry(), ZipfileInspector())


def _classify_one(engine, root, relative):
    candidates = [c for c in discover(root) if str(c.relative_path) == relative]
    assert len(candidates) == 1
    return engine.classify(candidates[0])


class TestArchiveDecisionList:
    def test_build_tool_wrapper_beats_content(self, engine, build_dir, app_jar):
        app_jar(build_dir / "gradle" / "wrapper" / "gradle-wrapper.jar")
        result = _classify_one(engine, build_dir, "gradle/wrapper/gradle-wrapper.jar")
        assert result.classification is Classification.THIRD_PARTY_LIBRARY
        assert result.rule_id == "build_tool_wrapper"

    def test_empty_archive_is_invalid(self, build_dir):
        write_file(build_dir / "broken.jar", b"")
        inspector = FakeInspector()
        engine = ClassificationEngine(default_registry(), inspector)

        result = _classify_one(engine, build_dir, "broken.jar")
        assert result.classification is Classification.INVALID_ARCHIVE
        assert inspector.calls == []

    def test_corrupt_archive_never_reaches_content(self, build_dir):
        write_file(build_dir / "corrupt.jar", b"garbage")
        inspector = FakeInspector(valid=False)
        engine = ClassificationEngine(default_registry(), inspector)

        result = _classify_one(engine, build_dir, "corrupt.jar")
        assert result.classification is Classification.INVALID_ARCHIVE
        assert inspector.calls == [("validate", "corrupt.jar")]

    def test_corrupt_member_data_is_invalid(self, engine, build_dir, app_jar):
        write_corrupt_jar(build_dir / "target" / "corrupt.jar")
        app_jar(build_dir / "target" / "shop.jar")

        classified = engine.classify_all(discover(build_dir))
        assert [r.candidate.name for r in classified.invalid] == ["corrupt.jar"]
        assert [r.candidate.name for r in classified.compiled] == ["shop.jar"]

    def test_lib_location_beats_application_content(self, engine, build_dir, app_jar):
        app_jar(build_dir / "dist" / "lib" / "shop.jar")
        result = _classify_one(engine, build_dir, "dist/lib/shop.jar")
        assert result.classification is Classification.THIRD_PARTY_LIBRARY
        assert result.rule_id == "dependency_directory"

    def test_war_with_library_content_is_application(self, engine, build_dir, library_jar):
        library_jar(build_dir / "target" / "site.war")
        result = _classify_one(engine, build_dir, "target/site.war")
        assert result.classification is Classification.COMPILED_APPLICATION

    def test_ear_in_lib_is_still_application(self, engine, build_dir, library_jar):
        library_jar(build_dir / "lib" / "suite.ear")
        result = _classify_one(engine, build_dir, "lib/suite.ear")
        assert result.classification is Classification.COMPILED_APPLICATION

    def test_test_named_war(self, engine, build_dir, app_jar):
        app_jar(build_dir / "site-test.war")
        result = _classify_one(engine, build_dir, "site-test.war")
        assert result.classification is Classification.TEST_ARTIFACT

    def test_test_name_beats_application_content(self, engine, build_dir, app_jar):
        app_jar(build_dir / "shop-tests.jar")
        result = _classify_one(engine, build_dir, "shop-tests.jar")
        assert result.classification is Classification.TEST_ARTIFACT

    def test_test_content(self, engine, build_dir):
        write_jar(build_dir / "suite.jar", classes=["a/CartTest.class", "a/OrderTest.class"])
        result = _classify_one(engine, build_dir, "suite.jar")
        assert result.classification is Classification.TEST_ARTIFACT
        assert result.rule_id == "test_archive_content"

    def test_application_content(self, engine, build_dir, app_jar):
        app_jar(build_dir / "target" / "shop.jar")
        result = _classify_one(engine, build_dir, "target/shop.jar")
        assert result.classification is Classification.COMPILED_APPLICATION
        assert result.rule_id == "application_content"

    def test_library_content(self, engine, build_dir, library_jar):
        library_jar(build_dir / "json.jar")
        result = _classify_one(engine, build_dir, "json.jar")
        assert result.classification is Classification.THIRD_PARTY_LIBRARY
        assert result.rule_id == "library_content"

    def test_no_signals_defaults_to_application(self, engine, build_dir):
        write_jar(build_dir / "helpers.jar", classes=["acme/StringUtil.class"])
        result = _classify_one(engine, build_dir, "helpers.jar")
        assert result.classification is Classification.COMPILED_APPLICATION
        assert result.rule_id == DEFAULT_RULE_ID

    def test_archives_have_no_symbols(self, engine, build_dir, app_jar):
        app_jar(build_dir / "shop.jar")
        write_file(build_dir / "shop.pdb", b"pdb")
        result = _classify_one(engine, build_dir, "shop.jar")
        assert result.symbol is None
        assert result.symbol_missing is False


class TestAssemblyDecisionList:
    def test_first_party_with_symbol(self, engine, build_dir):
        write_file(build_dir / "bin" / "Debug" / "MyApp.dll")
        pdb = write_file(build_dir / "bin" / "Debug" / "MyApp.pdb", b"pdb")
        result = _classify_one(engine, build_dir, "bin/Debug/MyApp.dll")
        assert result.classification is Classification.COMPILED_APPLICATION
        assert result.symbol == pdb
        assert result.is_retained

    def test_third_party_is_retained(self, engine, build_dir):
        write_file(build_dir / "packages" / "Newtonsoft.Json.dll")
        result = _classify_one(engine, build_dir, "packages/Newtonsoft.Json.dll")
        assert result.classification is Classification.THIRD_PARTY_LIBRARY
        assert result.is_retained
        assert result.symbol_missing

    def test_vendor_prefix(self, engine, build_dir):
        write_file(build_dir / "bin" / "System.Memory.dll")
        result = _classify_one(engine, build_dir, "bin/System.Memory.dll")
        assert result.rule_id == "vendor_prefix"

    def test_versioned_name(self, engine, build_dir):
        write_file(build_dir / "bin" / "Acme.Sdk.2.1.dll")
        result = _classify_one(engine, build_dir, "bin/Acme.Sdk.2.1.dll")
        assert result.rule_id == "versioned_name"

    def test_test_assembly_skips_symbol_pairing(self, engine, build_dir):
        write_file(build_dir / "bin" / "MyApp.Tests.dll")
        write_file(build_dir / "bin" / "MyApp.Tests.pdb", b"pdb")
        result = _classify_one(engine, build_dir, "bin/MyApp.Tests.dll")
        assert result.classification is Classification.TEST_ARTIFACT
        assert result.symbol is None
        assert not result.symbol_missing
        assert not result.is_retained

    def test_test_directory_beats_packages(self, engine, build_dir):
        write_file(build_dir / "tests" / "packages" / "Helper.dll")
        result = _classify_one(engine, build_dir, "tests/packages/Helper.dll")
        assert result.classification is Classification.TEST_ARTIFACT

    def test_assemblies_never_inspected(self, build_dir):
        write_file(build_dir / "App.dll")
        inspector = FakeInspector()
        engine = ClassificationEngine(default_registry(), inspector)
        _classify_one(engine, build_dir, "App.dll")
        assert inspector.calls == []


class TestClassifyAll:
    @pytest.fixture
    def mixed_tree(self, build_dir, app_jar, library_jar):
        app_jar(build_dir / "svc" / "target" / "svc.jar")
        library_jar(build_dir / "svc" / "target" / "lib" / "json.jar")
        write_file(build_dir / "svc" / "broken.jar", b"")
        write_jar(build_dir / "svc" / "svc-test.jar")
        app_jar(build_dir / "web" / "site.war")
        write_file(build_dir / "bin" / "MyApp.dll")
        write_file(build_dir / "bin" / "MyApp.pdb", b"pdb")
        write_file(build_dir / "packages" / "Newtonsoft.Json.dll")
        write_file(build_dir / "Tests" / "Helper.dll")
        return build_dir

    def test_total_and_exclusive(self, engine, mixed_tree):
        candidates = discover(mixed_tree)
        classified = engine.classify_all(candidates)

        assert len(classified.ordered) == len(candidates)
        assert sum(classified.counts().values()) == len(candidates)
        buckets = classified.compiled + classified.third_party + classified.tests + classified.invalid
        assert sorted(r.candidate.index for r in buckets) == list(range(len(candidates)))

    def test_buckets(self, engine, mixed_tree):
        classified = engine.classify_all(discover(mixed_tree))
        counts = classified.counts()
        assert counts[Classification.COMPILED_APPLICATION] == 3  # svc.jar, site.war, MyApp.dll
        assert counts[Classification.THIRD_PARTY_LIBRARY] == 2  # json.jar, Newtonsoft.Json.dll
        assert counts[Classification.TEST_ARTIFACT] == 2
        assert counts[Classification.INVALID_ARCHIVE] == 1

    def test_to_collect_keeps_every_assembly(self, engine, mixed_tree):
        classified = engine.classify_all(discover(mixed_tree))
        names = [r.candidate.name for r in classified.to_collect]
        assert names[:2] == ["svc.jar", "site.war"]
        assert set(names[2:]) == {"MyApp.dll", "Newtonsoft.Json.dll"}
        assert "json.jar" not in names
        assert [p.name for p in classified.symbols] == ["MyApp.pdb"]
        assert [r.candidate.name for r in classified.missing_symbols] == ["Newtonsoft.Json.dll"]

    def test_parallel_matches_sequential(self, engine, mixed_tree):
        candidates = discover(mixed_tree)
        sequential = engine.classify_all(candidates)
        seen: list[int] = []
        parallel = engine.classify_all(candidates, jobs=4, on_result=lambda r: seen.append(r.candidate.index))

        assert parallel == sequential
        assert seen == list(range(len(candidates)))

    def test_sequential_callback_order(self, engine, mixed_tree):
        candidates = discover(mixed_tree)
        seen: list[int] = []
        engine.classify_all(candidates, on_result=lambda r: seen.append(r.candidate.index))
        assert seen == list(range(len(candidates)))

    def test_empty(self, engine):
        classified = engine.classify_all([])
        assert classified.ordered == ()
        assert classified.to_collect == ()
