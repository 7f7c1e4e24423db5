"""Classification results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable

from artifact_collector.models.candidate import Candidate


class Classification(Enum):
    """Bucket assigned to every candidate. Mutually exclusive."""

    COMPILED_APPLICATION = "compiled_application"
    THIRD_PARTY_LIBRARY = "third_party_library"
    TEST_ARTIFACT = "test_artifact"
    INVALID_ARCHIVE = "invalid_archive"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Classification.COMPILED_APPLICATION: "Compiled application",
    Classification.THIRD_PARTY_LIBRARY: "3rd party library",
    Classification.TEST_ARTIFACT: "Test artifact",
    Classification.INVALID_ARCHIVE: "Invalid archive",
}


@dataclass(frozen=True, slots=True)
class ClassifiedArtifact:
    """A candidate together with the rule that decided its bucket.

    For assemblies that are kept, ``symbol`` is the paired ``.pdb`` file or
    ``None``; ``symbol_missing`` is set in the latter case.  Both stay at
    their defaults for archives and test assemblies.
    """

    candidate: Candidate
    classification: Classification
    rule_id: str
    symbol: Path | None = None
    symbol_missing: bool = False

    @property
    def is_retained(self) -> bool:
        """Whether this artifact goes to the collector."""
        if self.classification is Classification.COMPILED_APPLICATION:
            return True
        # Assemblies never bundle their dependencies, so third-party ones are kept.
        return self.candidate.is_assembly and self.classification is Classification.THIRD_PARTY_LIBRARY


@dataclass(frozen=True, slots=True)
class ClassificationSet:
    """Immutable reduction of per-candidate results into the four buckets."""

    compiled: tuple[ClassifiedArtifact, ...] = ()
    third_party: tuple[ClassifiedArtifact, ...] = ()
    tests: tuple[ClassifiedArtifact, ...] = ()
    invalid: tuple[ClassifiedArtifact, ...] = ()
    ordered: tuple[ClassifiedArtifact, ...] = field(default=(), repr=False)

    @classmethod
    def from_results(cls, results: Iterable[ClassifiedArtifact]) -> ClassificationSet:
        """Reduce results into buckets, ordered by discovery index."""
        ordered = tuple(sorted(results, key=lambda r: r.candidate.index))
        buckets: dict[Classification, list[ClassifiedArtifact]] = {c: [] for c in Classification}
        for result in ordered:
            buckets[result.classification].append(result)
        return cls(
            compiled=tuple(buckets[Classification.COMPILED_APPLICATION]),
            third_party=tuple(buckets[Classification.THIRD_PARTY_LIBRARY]),
            tests=tuple(buckets[Classification.TEST_ARTIFACT]),
            invalid=tuple(buckets[Classification.INVALID_ARCHIVE]),
            ordered=ordered,
        )

    def counts(self) -> dict[Classification, int]:
        return {
            Classification.COMPILED_APPLICATION: len(self.compiled),
            Classification.THIRD_PARTY_LIBRARY: len(self.third_party),
            Classification.TEST_ARTIFACT: len(self.tests),
            Classification.INVALID_ARCHIVE: len(self.invalid),
        }

    @property
    def to_collect(self) -> tuple[ClassifiedArtifact, ...]:
        """Retained artifacts in discovery order (archives sort before assemblies)."""
        return tuple(r for r in self.ordered if r.is_retained)

    @property
    def symbols(self) -> tuple[Path, ...]:
        return tuple(r.symbol for r in self.ordered if r.symbol is not None)

    @property
    def missing_symbols(self) -> tuple[ClassifiedArtifact, ...]:
        return tuple(r for r in self.ordered if r.symbol_missing)

    @property
    def has_archives(self) -> bool:
        return any(r.candidate.is_archive for r in self.ordered)

    @property
    def has_assemblies(self) -> bool:
        return any(r.candidate.is_assembly for r in self.ordered)
