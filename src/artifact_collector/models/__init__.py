"""Artifact collector data models."""

from artifact_collector.models.candidate import (
    ARCHIVE_KINDS,
    ASSEMBLY_KINDS,
    KIND_ORDER,
    SYMBOL_SUFFIX,
    Candidate,
)
from artifact_collector.models.classification import Classification, ClassificationSet, ClassifiedArtifact
from artifact_collector.models.collection_result import BundleInfo, CollectionResult, CopyFailure

__all__ = [
    "ARCHIVE_KINDS",
    "ASSEMBLY_KINDS",
    "BundleInfo",
    "Candidate",
    "Classification",
    "ClassificationSet",
    "ClassifiedArtifact",
    "CollectionResult",
    "CopyFailure",
    "KIND_ORDER",
    "SYMBOL_SUFFIX",
]
