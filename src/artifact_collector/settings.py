"""JSON-backed user settings."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from artifact_collector.utils import xdg_config_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "artifact-collector"
_SETTINGS_FILE = "settings.json"

DEFAULT_OUTPUT_DIR = "./collected_artifacts"
DEFAULT_INSPECTOR = "zipfile"


class Settings:
    """Read-only settings backed by a JSON file.

    Uses dot-notation keys for nested access::

        settings.get("collect.output_dir")  # reads data["collect"]["output_dir"]

    Recognised keys:

    - ``collect.output_dir``: default output directory.
    - ``collect.inspector``: default archive inspector backend.
    - ``assemblies.vendor_prefixes``: extra third-party assembly name prefixes.
    - ``archives.namespace_prefixes``: extra third-party Java package prefixes.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or (xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE)
        self._data: dict[str, Any] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_list(self, key: str) -> tuple[str, ...]:
        """Get a list of strings, ignoring anything malformed."""
        value = self.get(key, [])
        if not isinstance(value, list):
            log.warning("Setting '%s' in %s should be a list, ignoring", key, self._path)
            return ()
        return tuple(str(v) for v in value if isinstance(v, str) and v)

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            return
        if not isinstance(data, dict):
            log.warning("Settings file %s does not contain an object, ignoring", self._path)
            return
        self._data = data
