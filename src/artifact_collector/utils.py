"""Shared utility functions."""

from __future__ import annotations

import logging
import os
import re
import subprocess
from pathlib import Path

log = logging.getLogger(__name__)

# Word boundaries inside identifiers: separators and camelCase humps.
_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+")


def has_command(name: str) -> bool:
    """Check if a command exists on the system."""
    try:
        subprocess.run(["which", name], capture_output=True, check=True)
        return True
    except (subprocess.CalledProcessError, FileNotFoundError):
        return False


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def split_words(segment: str) -> list[str]:
    """Split an identifier-ish string into lowercase words.

    ``"MyApp.UnitTests"`` -> ``["my", "app", "unit", "tests"]``
    """
    return [w.lower() for w in _WORD_RE.findall(segment)]


def remove_files(paths: list[Path]) -> tuple[int, list[str]]:
    """Remove plain files and return (files_removed, errors)."""
    removed = 0
    errors: list[str] = []

    for path in paths:
        try:
            if path.exists():
                path.unlink()
                removed += 1
        except OSError as e:
            errors.append(f"{path}: {e}")

    return removed, errors


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string."""
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes == 0:
        return "0 B"

    units = ("B", "KB", "MB", "GB", "TB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if abs(value) < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1024
    return f"{value:.1f} {units[-1]}"


def format_elapsed(seconds: float) -> str:
    """Format an elapsed time as a human-readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds) // 60
    secs = seconds - minutes * 60
    return f"{minutes}m {secs:.0f}s"
