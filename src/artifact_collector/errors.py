"""Exceptions raised by the collector."""

from __future__ import annotations


class CollectorError(Exception):
    """Base class for collector errors."""


class ConfigurationError(CollectorError):
    """Bad arguments, missing input directory, or a missing required tool.

    Fatal: the CLI reports it and exits non-zero.
    """


class ArchiveInspectionError(CollectorError):
    """Raised when an archive cannot be listed or extracted."""
