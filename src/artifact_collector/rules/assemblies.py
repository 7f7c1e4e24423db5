"""Rules for .NET assemblies.

Third-party assemblies are still collected: unlike WAR/EAR files, an
assembly never bundles its dependencies, so the scan needs all of them.
"""

from __future__ import annotations

import logging
import re

from artifact_collector.models.candidate import ASSEMBLY_KINDS
from artifact_collector.models.classification import Classification
from artifact_collector.models.rule import Rule, RuleGroup
from artifact_collector.rules.context import RuleContext

log = logging.getLogger(__name__)

ASSEMBLIES_GROUP = RuleGroup("assemblies", ".NET Assemblies", "DLL files and their PDB debug symbols")

_PACKAGE_DIRS = frozenset({"lib", "packages"})

# NuGet-published files usually carry a version, e.g. Foo.Bar.1.2.dll
_VERSION_IN_NAME = re.compile(r"\.[0-9]+\.[0-9]+")


def in_package_directory(ctx: RuleContext) -> bool:
    if _PACKAGE_DIRS.intersection(ctx.directory_parts_lower):
        log.debug("Assembly is in a library directory: %s", ctx.candidate.relative_path)
        return True
    return False


def has_vendor_prefix(ctx: RuleContext) -> bool:
    if ctx.candidate.name.startswith(ctx.options.vendor_prefixes):
        log.debug("Assembly appears to be a 3rd party library based on filename: %s", ctx.candidate.name)
        return True
    return False


def has_version_in_name(ctx: RuleContext) -> bool:
    if _VERSION_IN_NAME.search(ctx.candidate.name):
        log.debug("Assembly appears to be a NuGet package based on version in filename: %s", ctx.candidate.name)
        return True
    return False


PACKAGE_DIRECTORY = Rule(
    id="package_directory",
    name="Package directory",
    description="Under a lib/ or packages/ directory",
    classification=Classification.THIRD_PARTY_LIBRARY,
    predicate=in_package_directory,
    kinds=ASSEMBLY_KINDS,
    group=ASSEMBLIES_GROUP,
)

VENDOR_PREFIX = Rule(
    id="vendor_prefix",
    name="Vendor prefix",
    description="System., Microsoft., Newtonsoft., log4net, NUnit and other well-known prefixes",
    classification=Classification.THIRD_PARTY_LIBRARY,
    predicate=has_vendor_prefix,
    kinds=ASSEMBLY_KINDS,
    group=ASSEMBLIES_GROUP,
)

VERSIONED_NAME = Rule(
    id="versioned_name",
    name="Versioned filename",
    description="Dotted version number in the filename",
    classification=Classification.THIRD_PARTY_LIBRARY,
    predicate=has_version_in_name,
    kinds=ASSEMBLY_KINDS,
    group=ASSEMBLIES_GROUP,
)
