"""Candidate discovery under the input tree."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath

from artifact_collector.models.candidate import ASSEMBLY_KINDS, ARCHIVE_KINDS, KIND_ORDER, Candidate

log = logging.getLogger(__name__)

_SUFFIX_TO_KIND = {f".{kind}": kind for kind in KIND_ORDER}


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


def discover(root: Path, exclude: Path | None = None) -> list[Candidate]:
    """Find candidate files below *root*.

    Only regular files are considered (symlinks are skipped) and suffixes
    match case-sensitively.  All ``.jar`` files come first, then ``.war``,
    ``.ear`` and ``.dll``; within a kind the order is the filesystem's
    traversal order.  *exclude* (typically the output directory) is pruned
    from the walk when it lies inside *root*.
    """
    root = root.resolve()
    excluded = exclude.resolve() if exclude is not None else None
    by_kind: dict[str, list[Path]] = {kind: [] for kind in KIND_ORDER}

    def _on_error(err: OSError) -> None:
        log.debug("Cannot read directory: %s (%s)", err.filename, err.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        if excluded is not None:
            dirnames[:] = [d for d in dirnames if not _is_within(current / d, excluded)]
        for filename in filenames:
            kind = _SUFFIX_TO_KIND.get(os.path.splitext(filename)[1])
            if kind is None:
                continue
            path = current / filename
            if path.is_symlink() or not path.is_file():
                continue
            by_kind[kind].append(path)

    candidates: list[Candidate] = []
    for kind in KIND_ORDER:
        for path in by_kind[kind]:
            relative = PurePosixPath(path.relative_to(root).as_posix())
            candidates.append(Candidate(path=path, kind=kind, relative_path=relative, index=len(candidates)))
            log.info("Found %s file: %s", kind.upper(), relative)

    log.info(
        "Found %d JAR files, %d WAR files, %d EAR files, %d DLL files",
        len(by_kind["jar"]),
        len(by_kind["war"]),
        len(by_kind["ear"]),
        len(by_kind["dll"]),
    )
    return candidates


def detect_language(candidates: list[Candidate]) -> str:
    """Return 'java', 'dotnet', 'mixed' or 'none' for the discovered set."""
    has_archives = any(c.kind in ARCHIVE_KINDS for c in candidates)
    has_assemblies = any(c.kind in ASSEMBLY_KINDS for c in candidates)
    if has_archives and has_assemblies:
        return "mixed"
    if has_assemblies:
        return "dotnet"
    if has_archives:
        return "java"
    return "none"
