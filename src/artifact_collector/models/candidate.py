"""Discovered candidate file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

# Discovery order: all archives before assemblies, in this kind order.
ARCHIVE_KINDS = ("jar", "war", "ear")
ASSEMBLY_KINDS = ("dll",)
KIND_ORDER = ARCHIVE_KINDS + ASSEMBLY_KINDS

SYMBOL_SUFFIX = ".pdb"


@dataclass(frozen=True, slots=True)
class Candidate:
    """A file found under the input root that may be collected.

    ``relative_path`` is always POSIX-style so path heuristics behave the
    same on every platform.  ``index`` is the position in discovery order
    and is what collection order is ultimately sorted by.
    """

    path: Path
    kind: str
    relative_path: PurePosixPath
    index: int = 0

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def is_archive(self) -> bool:
        return self.kind in ARCHIVE_KINDS

    @property
    def is_assembly(self) -> bool:
        return self.kind in ASSEMBLY_KINDS

    @property
    def directory_parts(self) -> tuple[str, ...]:
        """Directory segments of the relative path, excluding the filename."""
        return self.relative_path.parts[:-1]
