"""Per-candidate scratch directories for archive extraction."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

log = logging.getLogger(__name__)

SCRATCH_PREFIX = "artifact-collector-"


def _scratch_root() -> Path:
    return Path(tempfile.gettempdir())


@contextmanager
def scratch_directory() -> Iterator[Path]:
    """Yield a fresh directory that is always removed on exit.

    The name embeds the owning PID so :func:`purge_stale_scratch` can tell
    leftovers of killed runs from directories of live ones.
    """
    path = Path(tempfile.mkdtemp(prefix=f"{SCRATCH_PREFIX}{os.getpid()}-", dir=_scratch_root()))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


def purge_stale_scratch(root: Path | None = None) -> int:
    """Remove scratch directories left behind by processes that no longer exist.

    Returns the number of directories removed.
    """
    root = root or _scratch_root()
    removed = 0
    try:
        children = list(root.iterdir())
    except OSError:
        log.debug("Cannot list scratch root: %s", root)
        return 0

    for child in children:
        if not child.name.startswith(SCRATCH_PREFIX) or not child.is_dir():
            continue
        pid_text = child.name[len(SCRATCH_PREFIX):].split("-", 1)[0]
        if not pid_text.isdigit():
            continue
        pid = int(pid_text)
        if pid == os.getpid() or _pid_alive(pid):
            continue
        shutil.rmtree(child, ignore_errors=True)
        if not child.exists():
            removed += 1
            log.debug("Removed stale scratch directory: %s", child)

    if removed:
        log.info("Removed %d stale scratch directories", removed)
    return removed
