"""Bundling of collected assemblies into a single ZIP archive."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from artifact_collector.models.collection_result import BundleInfo
from artifact_collector.utils import remove_files

log = logging.getLogger(__name__)

BUNDLE_NAME = "pre-compiled-dotnet-artifacts.zip"
BUNDLED_SUFFIXES = (".dll", ".pdb")


def bundled_names(output: Path) -> set[str]:
    """Names already stored in an existing bundle in *output*."""
    bundle = output / BUNDLE_NAME
    if not bundle.is_file():
        return set()
    try:
        with zipfile.ZipFile(bundle) as archive:
            return set(archive.namelist())
    except (zipfile.BadZipFile, OSError) as exc:
        log.warning("Cannot read existing bundle %s: %s", bundle, exc)
        return set()


def bundle_assemblies(output: Path) -> BundleInfo | None:
    """Pack loose ``.dll``/``.pdb`` files in *output* into the bundle.

    Appends to an existing bundle, skipping names it already holds.  The
    loose copies are removed once they are safely in the archive.  Returns
    None when there was nothing to bundle.

    Raises:
        OSError: If the bundle cannot be written.
    """
    loose = sorted(
        p for p in output.iterdir()
        if p.is_file() and p.suffix in BUNDLED_SUFFIXES
    )
    if not loose:
        log.warning("No .NET artifacts found to bundle")
        return None

    bundle = output / BUNDLE_NAME
    existing = bundled_names(output)
    mode = "a" if bundle.is_file() and existing else "w"
    log.info("Bundling %d .NET artifacts into %s", len(loose), BUNDLE_NAME)

    added = 0
    with zipfile.ZipFile(bundle, mode, compression=zipfile.ZIP_DEFLATED) as archive:
        for path in loose:
            if path.name in existing:
                log.info("Skipping duplicate in bundle: %s", path.name)
                continue
            archive.write(path, arcname=path.name)
            added += 1

    removed, errors = remove_files(loose)
    for error in errors:
        log.warning("Failed to remove individual file: %s", error)
    log.info("Removed %d individual .NET files, keeping only the bundle", removed)

    return BundleInfo(
        path=bundle,
        entry_count=len(existing) + added,
        removed_count=removed,
        errors=tuple(errors),
    )
