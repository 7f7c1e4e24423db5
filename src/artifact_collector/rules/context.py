"""Per-candidate state shared by the classification rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

from artifact_collector.core.inspector import ArchiveInspector
from artifact_collector.core.scratch import scratch_directory
from artifact_collector.errors import ArchiveInspectionError
from artifact_collector.models.candidate import Candidate

log = logging.getLogger(__name__)

# Well-known vendor and framework assembly name prefixes.
VENDOR_PREFIXES = (
    "System.",
    "Microsoft.",
    "Newtonsoft.",
    "log4net",
    "NUnit",
    "MSTest",
    "Moq",
    "Castle.",
    "Autofac",
    "Unity",
    "Ninject",
    "StructureMap",
)

# Organisational package prefixes typical of published Java libraries.
NAMESPACE_PREFIXES = ("org.", "com.", "net.", "io.", "java.", "javax.")

_MANIFEST = "META-INF/MANIFEST.MF"


@dataclass(frozen=True)
class HeuristicOptions:
    """Tunable name lists used by the rules."""

    vendor_prefixes: tuple[str, ...] = VENDOR_PREFIXES
    namespace_prefixes: tuple[str, ...] = NAMESPACE_PREFIXES

    @classmethod
    def with_extras(cls, vendor_prefixes: tuple[str, ...] = (), namespace_prefixes: tuple[str, ...] = ()) -> HeuristicOptions:
        return cls(
            vendor_prefixes=VENDOR_PREFIXES + tuple(p for p in vendor_prefixes if p not in VENDOR_PREFIXES),
            namespace_prefixes=NAMESPACE_PREFIXES + tuple(p for p in namespace_prefixes if p not in NAMESPACE_PREFIXES),
        )


@dataclass(frozen=True)
class ArchiveSnapshot:
    """What the content rules need to know about an extracted archive."""

    entries: tuple[str, ...] = ()
    manifest: dict[str, str] = field(default_factory=dict)
    metadata_dirs: frozenset[str] = frozenset()

    @property
    def class_entries(self) -> tuple[str, ...]:
        """Compiled-unit member paths, e.g. ``com/example/Main.class``."""
        return tuple(e for e in self.entries if e.endswith(".class") and not e.endswith("/"))

    @property
    def class_names(self) -> tuple[str, ...]:
        """Simple class names without package or suffix."""
        return tuple(e.rsplit("/", 1)[-1][: -len(".class")] for e in self.class_entries)

    @property
    def qualified_names(self) -> tuple[str, ...]:
        """Fully-qualified dotted class names."""
        return tuple(e[: -len(".class")].replace("/", ".") for e in self.class_entries)

    def manifest_value(self, key: str) -> str | None:
        """Case-insensitive manifest attribute lookup."""
        wanted = key.lower()
        for name, value in self.manifest.items():
            if name.lower() == wanted:
                return value
        return None


def parse_manifest(text: str) -> dict[str, str]:
    """Parse a JAR manifest's main section plus any per-entry sections.

    Continuation lines start with a single space and are joined to the
    previous value.  Later duplicate keys win.
    """
    attrs: dict[str, str] = {}
    last_key: str | None = None
    for raw in text.splitlines():
        if raw.startswith(" ") and last_key is not None:
            attrs[last_key] += raw[1:]
            continue
        line = raw.strip()
        if not line or ":" not in line:
            last_key = None
            continue
        key, _, value = line.partition(":")
        last_key = key.strip()
        attrs[last_key] = value.strip()
    return attrs


def take_snapshot(inspector: ArchiveInspector, path: Path) -> ArchiveSnapshot:
    """Extract *path* to a scratch directory and record its content signals.

    The scratch directory is gone by the time this returns.  An archive
    that cannot be listed or extracted yields an empty snapshot.
    """
    try:
        entries = tuple(inspector.list_entries(path))
        with scratch_directory() as scratch:
            inspector.extract_to(path, scratch)
            meta_inf = scratch / "META-INF"
            manifest_file = scratch / _MANIFEST
            manifest: dict[str, str] = {}
            if manifest_file.is_file():
                manifest = parse_manifest(manifest_file.read_text(encoding="utf-8", errors="replace"))
            metadata_dirs: frozenset[str] = frozenset()
            if meta_inf.is_dir():
                metadata_dirs = frozenset(d.name for d in meta_inf.iterdir() if d.is_dir())
    except (ArchiveInspectionError, OSError) as exc:
        log.warning("Cannot inspect archive contents, treating as empty: %s (%s)", path, exc)
        return ArchiveSnapshot()

    log.debug(
        "Snapshot of %s: %d entries, %d manifest attributes, metadata dirs %s",
        path.name,
        len(entries),
        len(manifest),
        sorted(metadata_dirs) or "none",
    )
    return ArchiveSnapshot(entries=entries, manifest=manifest, metadata_dirs=metadata_dirs)


class RuleContext:
    """Everything a rule may look at for one candidate.

    The archive snapshot is taken lazily, at most once, and only when a
    content rule actually asks for it.
    """

    def __init__(
        self,
        candidate: Candidate,
        inspector: ArchiveInspector,
        options: HeuristicOptions | None = None,
    ) -> None:
        self.candidate = candidate
        self.inspector = inspector
        self.options = options or HeuristicOptions()

    @cached_property
    def snapshot(self) -> ArchiveSnapshot:
        return take_snapshot(self.inspector, self.candidate.path)

    @property
    def directory_parts_lower(self) -> tuple[str, ...]:
        return tuple(p.lower() for p in self.candidate.directory_parts)
