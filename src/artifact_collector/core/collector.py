"""Copying of accepted artifacts into the output directory."""

from __future__ import annotations

import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from artifact_collector.core.bundle import BUNDLED_SUFFIXES, bundle_assemblies, bundled_names
from artifact_collector.core.report import write_summaries
from artifact_collector.errors import ConfigurationError
from artifact_collector.models.classification import ClassificationSet
from artifact_collector.models.collection_result import BundleInfo, CollectionResult, CopyFailure

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]  # (filename, status)


class _Copier:
    """Copies files keyed by filename; the first file seen with a name wins."""

    def __init__(self, output: Path, taken: set[str], on_progress: ProgressCallback | None) -> None:
        self.output = output
        self.taken = taken
        self.on_progress = on_progress
        self.duplicates: list[str] = []
        self.failures: list[CopyFailure] = []
        self.bytes_copied = 0

    def _notify(self, name: str, status: str) -> None:
        if self.on_progress:
            self.on_progress(name, status)

    def copy(self, source: Path) -> bool:
        name = source.name
        if name in self.taken:
            log.info("Skipping duplicate: %s (already collected)", name)
            self.duplicates.append(name)
            self._notify(name, "duplicate")
            return False

        dest = self.output / name
        try:
            shutil.copy2(source, dest)
            self.bytes_copied += dest.stat().st_size
        except OSError as exc:
            log.error("Failed to collect %s: %s", source, exc)
            self.failures.append(CopyFailure(source=source, error=str(exc)))
            self._notify(name, "error")
            return False

        self.taken.add(name)
        log.info("Collected: %s", name)
        self._notify(name, "collected")
        return True


def _existing_names(output: Path) -> set[str]:
    names = {p.name for p in output.iterdir() if p.is_file()}
    return names | bundled_names(output)


def collect(
    classified: ClassificationSet,
    source: Path,
    output: Path,
    *,
    detected_language: str,
    bundle: bool = True,
    on_progress: ProgressCallback | None = None,
) -> CollectionResult:
    """Copy retained artifacts and their symbol files, then write the summaries.

    Archives that are compiled applications are copied first, then every
    retained assembly, in discovery order.  A filename already present in
    *output* (or inside an existing assembly bundle) is skipped and noted as
    a duplicate.  Copy errors are recorded per file and never abort the run.

    Raises:
        ConfigurationError: If the output directory cannot be created.
    """
    try:
        output.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(f"Cannot create output folder {output}: {exc}") from exc

    copier = _Copier(output, _existing_names(output), on_progress)
    to_collect = classified.to_collect
    collected: list[str] = []
    symbols_collected: list[str] = []

    if to_collect:
        log.info("Collecting %d compiled applications to: %s", len(to_collect), output)
        for artifact in to_collect:
            if copier.copy(artifact.candidate.path):
                collected.append(artifact.candidate.name)

        symbols = classified.symbols
        if symbols:
            log.info("Collecting %d PDB files...", len(symbols))
        for symbol in symbols:
            if copier.copy(symbol):
                symbols_collected.append(symbol.name)
    else:
        log.warning("No compiled applications found in the artifact folder")
        log.info("3rd party libraries are not collected when no compiled applications are present")

    if copier.duplicates:
        log.info("Skipped %d duplicate files", len(copier.duplicates))

    missing = [str(r.candidate.relative_path) for r in classified.missing_symbols]
    for name in missing:
        log.warning("Missing PDB file for: %s", name)

    bundle_info: BundleInfo | None = None
    copied_assembly_files = any(n.endswith(BUNDLED_SUFFIXES) for n in collected + symbols_collected)
    if bundle and copied_assembly_files:
        try:
            bundle_info = bundle_assemblies(output)
        except OSError as exc:
            log.error("Failed to create .NET artifacts bundle: %s", exc)

    result = CollectionResult(
        source=source,
        output=output,
        generated_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        detected_language=detected_language,
        counts=classified.counts(),
        collected=tuple(collected),
        symbols_collected=tuple(symbols_collected),
        missing_symbols=tuple(missing),
        duplicates=tuple(copier.duplicates),
        failures=tuple(copier.failures),
        third_party=tuple(str(r.candidate.relative_path) for r in classified.third_party),
        tests=tuple(str(r.candidate.relative_path) for r in classified.tests),
        invalid=tuple(str(r.candidate.relative_path) for r in classified.invalid),
        bundle=bundle_info,
        bytes_copied=copier.bytes_copied,
        collectable=len(to_collect),
    )
    write_summaries(result)
    return result
