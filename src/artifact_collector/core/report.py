"""Collection summary reports."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from artifact_collector.models.classification import Classification
from artifact_collector.models.collection_result import CollectionResult

log = logging.getLogger(__name__)

SUMMARY_TEXT = "collection_summary.txt"
SUMMARY_JSON = "collection_summary.json"

NO_APPLICATIONS = "No compiled applications found."


def _listing(title: str, names: list[str] | tuple[str, ...]) -> list[str]:
    if not names:
        return []
    return ["", f"{title}:"] + [f"  - {name}" for name in names]


def render_summary(result: CollectionResult) -> str:
    """Render the human-readable summary in its fixed layout."""
    counts = result.counts
    lines = [
        "Java and .NET Artifact Collection Summary",
        f"Generated: {result.generated_at}",
        f"Source folder: {result.source}",
        f"Detected language: {result.detected_language}",
        "",
        f"Compiled applications: {counts.get(Classification.COMPILED_APPLICATION, 0)}",
        f"3rd party libraries: {counts.get(Classification.THIRD_PARTY_LIBRARY, 0)}",
        f"Test artifacts skipped: {counts.get(Classification.TEST_ARTIFACT, 0)}",
        f"Invalid archives found: {counts.get(Classification.INVALID_ARCHIVE, 0)}",
        f"Debug symbol files collected: {len(result.symbols_collected)}",
        f"Missing debug symbol files: {len(result.missing_symbols)}",
        f"Duplicates skipped: {len(result.duplicates)}",
        f"Copy failures: {len(result.failures)}",
        "",
        f"Total files collected: {result.total_collected}",
    ]

    if not result.has_applications:
        lines += ["", NO_APPLICATIONS]

    lines += _listing("Collected files", sorted(set(result.collected)))
    lines += _listing("Debug symbol files", result.symbols_collected)

    if result.third_party:
        lines += ["", "3rd party libraries:"]
        for name in result.third_party:
            note = "collected" if name.lower().endswith(".dll") else "not collected, bundled by its application"
            lines.append(f"  - {name} ({note})")

    lines += _listing("Test artifacts skipped", result.tests)
    lines += _listing("Invalid archives found", result.invalid)
    lines += _listing("Duplicates skipped (already collected)", result.duplicates)
    lines += _listing("Copy failures", [f"{f.source}: {f.error}" for f in result.failures])

    if result.missing_symbols:
        lines += _listing("WARNING: assemblies missing PDB files", result.missing_symbols)
        lines.append("Scan accuracy may be affected without PDB files.")
        lines.append("Consider enabling PDB generation in your build configuration.")

    if result.bundle is not None:
        lines += [
            "",
            "=== .NET Artifacts Bundled ===",
            f"Bundle file: {result.bundle.path.name}",
            f"Individual .NET files removed: {result.bundle.removed_count}",
            f"Bundle contains: {result.bundle.entry_count} .NET artifacts",
        ]

    return "\n".join(lines) + "\n"


def write_summaries(result: CollectionResult) -> tuple[Path, Path]:
    """Write the text and JSON summaries into the output directory.

    Raises:
        OSError: If either file cannot be written.
    """
    text_path = result.output / SUMMARY_TEXT
    json_path = result.output / SUMMARY_JSON
    text_path.write_text(render_summary(result), encoding="utf-8")
    json_path.write_text(json.dumps(result.to_dict(), indent=2) + "\n", encoding="utf-8")
    log.info("Summary written to: %s", text_path)
    return text_path, json_path
