from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from activity_pruner.errors import InvalidRangeError
from activity_pruner.intervals import (
    ExclusionRange,
    attach_time_bounds,
    normalize_ranges,
    ranges_from_efforts,
)
from activity_pruner.samples import TelemetrySample
from activity_pruner.sports import SportCode, map_sport

T0 = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)


def _samples(n: int) -> list[TelemetrySample]:
    return [TelemetrySample(timestamp=T0 + timedelta(seconds=i), distance=float(i)) for i in range(n)]


def _timed(start: int, end: int) -> ExclusionRange:
    return ExclusionRange(start, end, T0 + timedelta(seconds=start), T0 + timedelta(seconds=end))


def test_normalize_empty_returns_empty() -> None:
    assert normalize_ranges([]) == []


def test_normalize_sorts_and_merges_overlaps() -> None:
    merged = normalize_ranges([_timed(50, 60), _timed(10, 20), _timed(15, 30), _timed(30, 35)])

    assert [(r.start_index, r.end_index) for r in merged] == [(10, 35), (50, 60)]
    assert merged[0].end_time == T0 + timedelta(seconds=35)


def test_normalize_keeps_larger_end_when_contained() -> None:
    merged = normalize_ranges([_timed(0, 40), _timed(5, 10)])

    assert len(merged) == 1
    assert merged[0].end_index == 40
    assert merged[0].end_time == T0 + timedelta(seconds=40)


def test_normalize_is_idempotent_and_disjoint() -> None:
    once = normalize_ranges([_timed(7, 9), _timed(0, 3), _timed(2, 5), _timed(20, 22), _timed(9, 12)])
    twice = normalize_ranges(once)

    assert twice == once
    for left, right in zip(once, once[1:]):
        assert left.end_time < right.start_time
        assert left.end_index < right.start_index


def test_normalize_without_time_bounds_uses_indices() -> None:
    merged = normalize_ranges([ExclusionRange(8, 12), ExclusionRange(0, 4), ExclusionRange(4, 6)])

    assert [(r.start_index, r.end_index) for r in merged] == [(0, 6), (8, 12)]


def test_normalize_by_index_clears_stale_time_bounds() -> None:
    merged = normalize_ranges([_timed(0, 5), ExclusionRange(3, 9), _timed(20, 22)])

    assert merged == [ExclusionRange(0, 9), ExclusionRange(20, 22, T0 + timedelta(seconds=20), T0 + timedelta(seconds=22))]
    assert not merged[0].has_time_bounds


def test_normalize_does_not_mutate_inputs() -> None:
    first = _timed(0, 5)
    normalize_ranges([first, _timed(3, 9)])

    assert first.end_index == 5


def test_attach_time_bounds_reads_sample_timestamps() -> None:
    samples = _samples(10)
    (bounded,) = attach_time_bounds(samples, [ExclusionRange(2, 6)])

    assert bounded.start_time == samples[2].timestamp
    assert bounded.end_time == samples[6].timestamp


@pytest.mark.parametrize("bad", [ExclusionRange(5, 2), ExclusionRange(-1, 3), ExclusionRange(4, 10)])
def test_attach_time_bounds_rejects_bad_ranges(bad: ExclusionRange) -> None:
    with pytest.raises(InvalidRangeError):
        attach_time_bounds(_samples(10), [bad])


def test_ranges_from_efforts_skips_unknown_positions() -> None:
    efforts = [
        {"start_index": 3, "end_index": 8},
        {"start_index": 20, "end_index": 25},
    ]
    ranges = ranges_from_efforts(efforts, [1, 5, 0])

    assert [(r.start_index, r.end_index) for r in ranges] == [(20, 25), (3, 8)]


def test_map_sport_known_labels_are_case_insensitive() -> None:
    assert map_sport("Ride") == SportCode(2, 0)
    assert map_sport("GravelRide") == SportCode(2, 46)
    assert map_sport("trailrun") == SportCode(1, 3)
    assert map_sport("BackcountrySki").sub_sport == 2


@pytest.mark.parametrize("label", [None, "", "underwaterbasketweaving"])
def test_map_sport_unknown_labels_map_to_zero(label: str | None) -> None:
    assert map_sport(label) == SportCode(0, 0)
