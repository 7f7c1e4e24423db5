"""Rules for Java archives (.jar, .war, .ear).

The content heuristics are best effort.  The "application-like class name"
signal assumes descriptive CamelCase class names, so a library made of
plainly named classes can pass for an application, and an application made
of ``*Service``/``*Manager`` classes can fall through to the library checks.
"""

from __future__ import annotations

import logging
import os
import re

from artifact_collector.models.candidate import ARCHIVE_KINDS
from artifact_collector.models.classification import Classification
from artifact_collector.models.rule import Rule, RuleGroup
from artifact_collector.rules.context import RuleContext

log = logging.getLogger(__name__)

ARCHIVES_GROUP = RuleGroup("archives", "Java Archives", "JAR, WAR and EAR files")

_APP_CLASS_NAME = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
_UTILITY_SUFFIXES = ("Util", "Helper", "Factory", "Manager", "Service", "Config", "Constants")

_WRAPPER_NAMES = frozenset({"gradle-wrapper.jar", "maven-wrapper.jar"})
_WRAPPER_DIRS = (("gradle", "wrapper"), (".mvn", "wrapper"))

# META-INF subdirectories written by package tooling.
_LIBRARY_METADATA_DIRS = frozenset({"maven", "services"})


def is_valid_archive(ctx: RuleContext) -> bool:
    """Exists, readable, non-empty, and a structurally valid ZIP container."""
    path = ctx.candidate.path
    if not path.is_file():
        log.debug("File does not exist: %s", path)
        return False
    if not os.access(path, os.R_OK):
        log.debug("File is not readable: %s", path)
        return False
    try:
        if path.stat().st_size == 0:
            log.debug("File is empty: %s", path)
            return False
    except OSError:
        log.debug("Cannot stat: %s", path)
        return False
    if not ctx.inspector.validate_integrity(path):
        log.debug("Invalid %s file (not a valid ZIP): %s", ctx.candidate.kind.upper(), path)
        return False
    return True


def archive_is_invalid(ctx: RuleContext) -> bool:
    return not is_valid_archive(ctx)


def _has_dir_sequence(parts: tuple[str, ...], sequence: tuple[str, ...]) -> bool:
    n = len(sequence)
    return any(parts[i:i + n] == sequence for i in range(len(parts) - n + 1))


def is_build_tool_wrapper(ctx: RuleContext) -> bool:
    candidate = ctx.candidate
    if candidate.name in _WRAPPER_NAMES:
        return True
    return any(_has_dir_sequence(candidate.directory_parts, seq) for seq in _WRAPPER_DIRS)


def is_deployable_package(ctx: RuleContext) -> bool:
    return ctx.candidate.kind in ("war", "ear")


def in_dependency_directory(ctx: RuleContext) -> bool:
    """Under ``lib/`` or ``WEB-INF/lib/``, so already bundled by a parent application."""
    return "lib" in ctx.directory_parts_lower


def is_application_class_name(name: str) -> bool:
    return bool(_APP_CLASS_NAME.match(name)) and not name.endswith(_UTILITY_SUFFIXES)


def has_application_signal(ctx: RuleContext) -> bool:
    snapshot = ctx.snapshot
    if snapshot.manifest_value("Main-Class"):
        log.debug("Archive has a main class - likely a compiled application")
        return True

    names = snapshot.class_names
    if not names:
        return False
    app_like = sum(1 for n in names if is_application_class_name(n))
    lib_like = len(names) - app_like
    if app_like > lib_like:
        log.debug("Archive has more application-like classes (%d) than library-like classes (%d)", app_like, lib_like)
        return True
    return False


def has_library_signal(ctx: RuleContext) -> bool:
    snapshot = ctx.snapshot
    if snapshot.metadata_dirs & _LIBRARY_METADATA_DIRS:
        log.debug("Archive contains Maven or services metadata, likely a 3rd party library")
        return True
    prefixes = ctx.options.namespace_prefixes
    if any(q.startswith(prefixes) for q in snapshot.qualified_names):
        log.debug("Archive contains classes with common 3rd party package names")
        return True
    return False


INVALID_ARCHIVE = Rule(
    id="invalid_archive",
    name="Invalid archive",
    description="Missing, unreadable, empty or not a valid ZIP container",
    classification=Classification.INVALID_ARCHIVE,
    predicate=archive_is_invalid,
    kinds=ARCHIVE_KINDS,
    group=ARCHIVES_GROUP,
)

BUILD_TOOL_WRAPPER = Rule(
    id="build_tool_wrapper",
    name="Build tool wrapper",
    description="gradle-wrapper.jar, maven-wrapper.jar, gradle/wrapper/ or .mvn/wrapper/",
    classification=Classification.THIRD_PARTY_LIBRARY,
    predicate=is_build_tool_wrapper,
    kinds=("jar",),
    group=ARCHIVES_GROUP,
)

DEPLOYABLE_PACKAGE = Rule(
    id="deployable_package",
    name="Deployable package",
    description="WAR and EAR files bundle their own dependencies",
    classification=Classification.COMPILED_APPLICATION,
    predicate=is_deployable_package,
    kinds=("war", "ear"),
    group=ARCHIVES_GROUP,
)

DEPENDENCY_DIRECTORY = Rule(
    id="dependency_directory",
    name="Dependency directory",
    description="Under lib/ or WEB-INF/lib/",
    classification=Classification.THIRD_PARTY_LIBRARY,
    predicate=in_dependency_directory,
    kinds=("jar",),
    group=ARCHIVES_GROUP,
)

APPLICATION_CONTENT = Rule(
    id="application_content",
    name="Application content",
    description="Manifest Main-Class, or mostly application-like class names",
    classification=Classification.COMPILED_APPLICATION,
    predicate=has_application_signal,
    kinds=("jar",),
    group=ARCHIVES_GROUP,
)

LIBRARY_CONTENT = Rule(
    id="library_content",
    name="Library content",
    description="META-INF/maven or META-INF/services, or common vendor packages",
    classification=Classification.THIRD_PARTY_LIBRARY,
    predicate=has_library_signal,
    kinds=("jar",),
    group=ARCHIVES_GROUP,
)
