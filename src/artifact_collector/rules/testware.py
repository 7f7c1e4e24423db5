"""Rules that recognise test artifacts in both ecosystems.

Archives trust a plain ``test`` in the filename.  Assemblies do not: plenty
of application DLLs carry ``Test`` inside a compound word, so they need a
stronger filename shape or a test directory around them.
"""

from __future__ import annotations

import logging
import re

from artifact_collector.models.candidate import ARCHIVE_KINDS, ASSEMBLY_KINDS
from artifact_collector.models.classification import Classification
from artifact_collector.models.rule import Rule, RuleGroup
from artifact_collector.rules.context import RuleContext
from artifact_collector.utils import split_words

log = logging.getLogger(__name__)

TESTS_GROUP = RuleGroup("tests", "Test Artifacts", "Test jars and test assemblies, never collected")

_TEST_DIR_WORDS = frozenset({"test", "tests", "testing"})

# Manifest attributes that record who built the archive, not what it is.
_PROVENANCE_KEYS = frozenset({"created-by", "built-by", "build-by"})

_TEST_TEXT = re.compile(r"test|Test|TEST")

# foo.test.dll, MyApp.Tests.dll, bar-tests.dll, My.UnitTests.dll but not Contest.dll
_ASSEMBLY_TEST_SUFFIX = re.compile(r"(?:[._-](?i:tests?)|(?<=[a-z])(?:Test|TEST)s?)\.dll$")
# test.dll, Tests.dll, TestProject.dll, test_helpers.dll but not Testimony.dll
_ASSEMBLY_TEST_PREFIX = re.compile(r"^(?:test|Test|TEST)s?(?![a-z])")
_ASSEMBLY_TEST_INFIX = re.compile(r"-tests?-", re.IGNORECASE)

# Share of compiled units that must look like tests, in percent.
_TEST_CLASS_THRESHOLD = 50


def archive_name_is_test(ctx: RuleContext) -> bool:
    if "test" in ctx.candidate.name.lower():
        log.debug("Archive appears to be a test artifact based on filename: %s", ctx.candidate.name)
        return True
    return False


def assembly_name_is_test(ctx: RuleContext) -> bool:
    name = ctx.candidate.name
    if "test" not in name.lower():
        return False
    if (
        _ASSEMBLY_TEST_SUFFIX.search(name)
        or _ASSEMBLY_TEST_PREFIX.match(name)
        or _ASSEMBLY_TEST_INFIX.search(name)
    ):
        log.debug("Assembly appears to be a test artifact based on filename: %s", name)
        return True
    log.debug("Assembly has 'test' in its name but looks like an application DLL: %s", name)
    return False


def assembly_in_test_directory(ctx: RuleContext) -> bool:
    for segment in ctx.candidate.directory_parts:
        if _TEST_DIR_WORDS.intersection(split_words(segment)):
            log.debug("Assembly is in a test-related directory: %s", ctx.candidate.relative_path)
            return True
    return False


def manifest_mentions_tests(manifest: dict[str, str]) -> bool:
    """True if a non-provenance manifest attribute mentions tests."""
    for key, value in manifest.items():
        if key.lower() in _PROVENANCE_KEYS:
            continue
        if _TEST_TEXT.search(f"{key}: {value}"):
            return True
    return False


def archive_content_is_test(ctx: RuleContext) -> bool:
    snapshot = ctx.snapshot
    classes = snapshot.class_entries
    if classes:
        test_classes = sum(1 for entry in classes if _TEST_TEXT.search(entry))
        if test_classes and test_classes * 100 // len(classes) > _TEST_CLASS_THRESHOLD:
            log.debug("Archive contains primarily test classes (%d/%d)", test_classes, len(classes))
            return True
    if manifest_mentions_tests(snapshot.manifest):
        log.debug("Archive manifest contains test-related attributes")
        return True
    return False


TEST_ARCHIVE_NAME = Rule(
    id="test_archive_name",
    name="Test archive name",
    description="Archive filename contains 'test'",
    classification=Classification.TEST_ARTIFACT,
    predicate=archive_name_is_test,
    kinds=ARCHIVE_KINDS,
    group=TESTS_GROUP,
)

TEST_ARCHIVE_CONTENT = Rule(
    id="test_archive_content",
    name="Test archive content",
    description="Mostly test classes, or a manifest that mentions tests",
    classification=Classification.TEST_ARTIFACT,
    predicate=archive_content_is_test,
    kinds=("jar",),
    group=TESTS_GROUP,
)

TEST_ASSEMBLY_NAME = Rule(
    id="test_assembly_name",
    name="Test assembly name",
    description="Ends in .Test(s).dll or a camel-case Test(s), starts with 'Test', or has a -test- infix",
    classification=Classification.TEST_ARTIFACT,
    predicate=assembly_name_is_test,
    kinds=ASSEMBLY_KINDS,
    group=TESTS_GROUP,
)

TEST_ASSEMBLY_DIRECTORY = Rule(
    id="test_assembly_directory",
    name="Test directory",
    description="A directory segment is made of test/tests/testing words",
    classification=Classification.TEST_ARTIFACT,
    predicate=assembly_in_test_directory,
    kinds=ASSEMBLY_KINDS,
    group=TESTS_GROUP,
)
