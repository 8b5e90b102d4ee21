"""Exclusion ranges: construction from segment efforts, time bounds, and merging."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Mapping, Sequence

from .errors import InvalidRangeError
from .samples import TelemetrySample


@dataclass(frozen=True)
class ExclusionRange:
    """Inclusive index range of samples to drop.

    Index bounds decide which samples are removed. Time bounds are derived
    from the samples and only order ranges while merging.
    """

    start_index: int
    end_index: int
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def has_time_bounds(self) -> bool:
        return self.start_time is not None and self.end_time is not None


def ranges_from_efforts(
    efforts: Sequence[Mapping[str, Any] | Any],
    selected: Sequence[int],
) -> list[ExclusionRange]:
    """Build index ranges from the selected segment efforts."""
    ranges: list[ExclusionRange] = []
    for position in selected:
        if position < 0 or position >= len(efforts):
            continue
        effort = efforts[position]
        if isinstance(effort, Mapping):
            start_index, end_index = effort["start_index"], effort["end_index"]
        else:
            start_index, end_index = effort.start_index, effort.end_index
        ranges.append(ExclusionRange(int(start_index), int(end_index)))
    return ranges


def attach_time_bounds(
    samples: Sequence[TelemetrySample],
    ranges: Sequence[ExclusionRange],
) -> list[ExclusionRange]:
    """Fill each range's time bounds from the samples at its index bounds."""
    n_samples = len(samples)
    bounded: list[ExclusionRange] = []
    for exclusion in ranges:
        if exclusion.end_index < exclusion.start_index:
            raise InvalidRangeError(
                f"Range end index {exclusion.end_index} precedes start index {exclusion.start_index}"
            )
        if exclusion.start_index < 0 or exclusion.end_index >= n_samples:
            raise InvalidRangeError(
                f"Range [{exclusion.start_index}, {exclusion.end_index}] is outside "
                f"the {n_samples} available samples"
            )
        bounded.append(
            replace(
                exclusion,
                start_time=samples[exclusion.start_index].timestamp,
                end_time=samples[exclusion.end_index].timestamp,
            )
        )
    return bounded


def normalize_ranges(ranges: Sequence[ExclusionRange]) -> list[ExclusionRange]:
    """Sort ranges and merge overlapping or touching ones into a disjoint cover."""
    if not ranges:
        return []

    by_time = all(exclusion.has_time_bounds for exclusion in ranges)
    if by_time:
        ordered = sorted(ranges, key=lambda exclusion: exclusion.start_time)
    else:
        ordered = sorted(ranges, key=lambda exclusion: exclusion.start_index)

    merged = [ordered[0]]
    for current in ordered[1:]:
        last = merged[-1]
        if by_time:
            overlaps = current.start_time <= last.end_time
        else:
            overlaps = current.start_index <= last.end_index
        if not overlaps:
            merged.append(current)
            continue

        if by_time:
            merged[-1] = replace(
                last,
                end_index=max(last.end_index, current.end_index),
                end_time=max(last.end_time, current.end_time),
            )
        else:
            # Index-merged ranges drop their time bounds; attach_time_bounds restores them.
            merged[-1] = replace(
                last,
                end_index=max(last.end_index, current.end_index),
                start_time=None,
                end_time=None,
            )
    return merged
