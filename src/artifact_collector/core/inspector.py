"""Archive inspection backends.

Archives are only ever touched through an :class:`ArchiveInspector`, so the
native ``zipfile`` backend and the ``unzip`` subprocess backend are
interchangeable.
"""

from __future__ import annotations

import logging
import subprocess
import zipfile
import zlib
from abc import ABC, abstractmethod
from pathlib import Path

from artifact_collector.errors import ArchiveInspectionError, ConfigurationError
from artifact_collector.utils import has_command

log = logging.getLogger(__name__)

# Timeout for each unzip subprocess (seconds).
_UNZIP_TIMEOUT = 300

# Raised by zipfile while reading member data: corrupt deflate streams,
# truncated members and unsupported compression methods.
_ZIP_READ_ERRORS = (zipfile.BadZipFile, OSError, RuntimeError, ValueError, EOFError, NotImplementedError, zlib.error)


class ArchiveInspector(ABC):
    """Capability for validating, listing and extracting ZIP-based archives."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Backend identifier used on the command line, e.g. 'zipfile'."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of the backend."""

    @property
    def unavailable_reason(self) -> str | None:
        """Why this backend cannot work on this system, or None if supported."""
        return None

    def is_available(self) -> bool:
        return self.unavailable_reason is None

    @abstractmethod
    def validate_integrity(self, path: Path) -> bool:
        """Return True if *path* is a structurally sound ZIP container."""

    @abstractmethod
    def list_entries(self, path: Path) -> list[str]:
        """Return the archive member names, directories included.

        Raises:
            ArchiveInspectionError: If the archive cannot be read.
        """

    @abstractmethod
    def extract_to(self, path: Path, destination: Path) -> None:
        """Extract every member of *path* below *destination*.

        Raises:
            ArchiveInspectionError: If extraction fails.
        """


class ZipfileInspector(ArchiveInspector):
    """Pure-Python backend built on :mod:`zipfile`."""

    id = "zipfile"
    description = "Python zipfile module (built in)"

    def validate_integrity(self, path: Path) -> bool:
        try:
            with zipfile.ZipFile(path) as archive:
                bad = archive.testzip()
        except _ZIP_READ_ERRORS as exc:
            log.debug("Archive failed to open: %s (%s)", path, exc)
            return False
        if bad is not None:
            log.debug("Archive has a corrupt member %s: %s", bad, path)
            return False
        return True

    def list_entries(self, path: Path) -> list[str]:
        try:
            with zipfile.ZipFile(path) as archive:
                return archive.namelist()
        except (zipfile.BadZipFile, OSError) as exc:
            raise ArchiveInspectionError(f"Cannot list {path}: {exc}") from exc

    def extract_to(self, path: Path, destination: Path) -> None:
        try:
            with zipfile.ZipFile(path) as archive:
                archive.extractall(destination)
        except _ZIP_READ_ERRORS as exc:
            raise ArchiveInspectionError(f"Cannot extract {path}: {exc}") from exc


class UnzipInspector(ArchiveInspector):
    """Backend that shells out to Info-ZIP ``unzip``."""

    id = "unzip"
    description = "External unzip command"

    @property
    def unavailable_reason(self) -> str | None:
        if not has_command("unzip"):
            return "Required dependency 'unzip' not found"
        return None

    def validate_integrity(self, path: Path) -> bool:
        try:
            proc = self._run(["unzip", "-t", "-qq", str(path)])
        except ArchiveInspectionError as exc:
            log.debug("%s", exc)
            return False
        return proc.returncode == 0

    def list_entries(self, path: Path) -> list[str]:
        proc = self._run(["unzip", "-Z1", str(path)])
        if proc.returncode != 0:
            raise ArchiveInspectionError(f"Cannot list {path} (exit {proc.returncode}): {proc.stderr.strip()}")
        return [line for line in proc.stdout.splitlines() if line]

    def extract_to(self, path: Path, destination: Path) -> None:
        proc = self._run(["unzip", "-q", "-o", str(path), "-d", str(destination)])
        # Exit code 1 is unzip's "warnings only" status.
        if proc.returncode not in (0, 1):
            raise ArchiveInspectionError(f"Cannot extract {path} (exit {proc.returncode}): {proc.stderr.strip()}")

    @staticmethod
    def _run(args: list[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(args, capture_output=True, text=True, timeout=_UNZIP_TIMEOUT)
        except subprocess.TimeoutExpired:
            raise ArchiveInspectionError(f"'{' '.join(args)}' timed out after {_UNZIP_TIMEOUT}s")
        except OSError as exc:
            raise ArchiveInspectionError(f"Cannot run unzip: {exc}") from exc


INSPECTORS: dict[str, type[ArchiveInspector]] = {
    ZipfileInspector.id: ZipfileInspector,
    UnzipInspector.id: UnzipInspector,
}


def get_inspector(inspector_id: str) -> ArchiveInspector:
    """Instantiate the backend named *inspector_id*.

    Raises:
        ConfigurationError: If the backend is unknown or unavailable here.
    """
    cls = INSPECTORS.get(inspector_id)
    if cls is None:
        raise ConfigurationError(f"Unknown archive inspector '{inspector_id}' (choose from: {', '.join(INSPECTORS)})")
    inspector = cls()
    reason = inspector.unavailable_reason
    if reason is not None:
        raise ConfigurationError(f"{reason}. Please install it first.")
    return inspector
