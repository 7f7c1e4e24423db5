"""Collection result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from artifact_collector.models.classification import Classification


@dataclass(frozen=True, slots=True)
class CopyFailure:
    """A file that could not be copied to the output directory."""

    source: Path
    error: str


@dataclass(frozen=True, slots=True)
class BundleInfo:
    """Assembly bundle written after collection."""

    path: Path
    entry_count: int
    removed_count: int
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CollectionResult:
    """Outcome of one collection run. Used only to render the reports."""

    source: Path
    output: Path
    generated_at: str
    detected_language: str
    counts: dict[Classification, int] = field(default_factory=dict)
    collected: tuple[str, ...] = ()
    symbols_collected: tuple[str, ...] = ()
    missing_symbols: tuple[str, ...] = ()
    duplicates: tuple[str, ...] = ()
    failures: tuple[CopyFailure, ...] = ()
    third_party: tuple[str, ...] = ()
    tests: tuple[str, ...] = ()
    invalid: tuple[str, ...] = ()
    bundle: BundleInfo | None = None
    bytes_copied: int = 0
    collectable: int = 0

    @property
    def has_applications(self) -> bool:
        """Whether anything qualified for collection (copied or not)."""
        return self.collectable > 0

    @property
    def total_collected(self) -> int:
        return len(self.collected) + len(self.symbols_collected)

    def to_dict(self) -> dict:
        """JSON-serialisable view of the result."""
        data = {
            "generated_at": self.generated_at,
            "source": str(self.source),
            "output": str(self.output),
            "detected_language": self.detected_language,
            "counts": {c.value: self.counts.get(c, 0) for c in Classification},
            "collected": sorted(set(self.collected)),
            "symbols_collected": list(self.symbols_collected),
            "missing_symbols": list(self.missing_symbols),
            "duplicates": list(self.duplicates),
            "failures": [{"path": str(f.source), "error": f.error} for f in self.failures],
            "third_party": list(self.third_party),
            "tests": list(self.tests),
            "invalid": list(self.invalid),
            "bundle": None,
            "bytes_copied": self.bytes_copied,
            "collectable": self.collectable,
        }
        if self.bundle is not None:
            data["bundle"] = {
                "path": str(self.bundle.path),
                "entry_count": self.bundle.entry_count,
                "removed_count": self.bundle.removed_count,
                "errors": list(self.bundle.errors),
            }
        return data
