"""Debug symbol (.pdb) pairing for assemblies."""

from __future__ import annotations

import logging
from pathlib import Path

from artifact_collector.models.candidate import SYMBOL_SUFFIX, Candidate

log = logging.getLogger(__name__)


def find_symbol_file(candidate: Candidate) -> Path | None:
    """Return the same-stem ``.pdb`` next to *candidate*, or None."""
    symbol = candidate.path.with_name(candidate.stem + SYMBOL_SUFFIX)
    if symbol.is_file():
        log.debug("Found PDB file: %s", symbol)
        return symbol
    log.debug("No PDB file found for: %s", candidate.path)
    return None
