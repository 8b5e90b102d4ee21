"""Split a sample sequence into laps around excluded index ranges."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .errors import EmptyResultError
from .intervals import ExclusionRange
from .samples import Lap, TelemetrySample

logger = logging.getLogger(__name__)


def exclusion_mask(n_samples: int, ranges: Sequence[ExclusionRange]) -> np.ndarray:
    """Boolean mask, True where the sample index falls inside any range."""
    mask = np.zeros(n_samples, dtype=bool)
    for exclusion in ranges:
        start_i = max(exclusion.start_index, 0)
        end_i = min(exclusion.end_index, n_samples - 1)
        if start_i > end_i:
            continue
        mask[start_i : end_i + 1] = True
    return mask


def kept_spans(mask: np.ndarray) -> list[tuple[int, int]]:
    """Inclusive (start, end) index spans of consecutive False entries."""
    kept = (~mask).astype(np.int8)
    edges = np.diff(np.concatenate(([0], kept, [0])))
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1) - 1
    return [(int(start_i), int(end_i)) for start_i, end_i in zip(starts, ends, strict=True)]


def split_laps(
    samples: Sequence[TelemetrySample],
    ranges: Sequence[ExclusionRange],
) -> list[Lap]:
    """Drop excluded samples and return each contiguous kept run as a lap.

    A lap boundary is drawn at every exclusion range, however short the
    excluded stretch is in time.
    """
    mask = exclusion_mask(len(samples), ranges)
    laps = [
        Lap(samples=tuple(samples[start_i : end_i + 1]), start_index=start_i, end_index=end_i)
        for start_i, end_i in kept_spans(mask)
    ]

    logger.debug(
        "Split %d samples into %d laps (sizes %s) around %d ranges",
        len(samples),
        len(laps),
        [len(lap) for lap in laps],
        len(ranges),
    )

    if not laps:
        raise EmptyResultError(
            "No activity data remains after removing intervals. All records were filtered out."
        )
    return laps
