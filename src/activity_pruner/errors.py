"""Error types raised by the pruning pipeline."""

from __future__ import annotations


class PruningError(ValueError):
    """Base class for failures of a pruning run."""


class InvalidRangeError(PruningError):
    """An exclusion range does not address the sample sequence."""


class EmptyResultError(PruningError):
    """Every sample was excluded; nothing remains to summarize."""


class EmptyLapError(PruningError):
    """Lap statistics were requested for a lap without samples."""


class EmptySessionError(PruningError):
    """Session statistics were requested without any laps."""
