"""One-pass pruning: exclusion ranges in, laps, statistics and encoder events out."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Mapping, Sequence

from .config import PruningSettings
from .intervals import ExclusionRange, attach_time_bounds, normalize_ranges
from .laps import split_laps
from .messages import OutputEvent
from .samples import Lap, TelemetrySample
from .sports import SportCode, map_sport
from .stats import LapStats, SessionStats, compute_lap_stats, compute_session_stats
from .synthesis import synthesize_events

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivitySummary:
    """Compact caller-facing view of the session statistics."""

    num_laps: int
    num_significant_laps: int
    total_distance: float
    total_ascent: float
    total_descent: float
    total_elapsed_time: float
    total_timer_time: float

    @classmethod
    def from_session(cls, session: SessionStats) -> ActivitySummary:
        return cls(
            num_laps=session.lap_count,
            num_significant_laps=session.significant_lap_count,
            total_distance=session.total_distance,
            total_ascent=session.total_ascent,
            total_descent=session.total_descent,
            total_elapsed_time=session.total_elapsed_time,
            total_timer_time=session.total_timer_time,
        )

    def as_dict(self) -> dict[str, float | int]:
        return {
            "num_laps": self.num_laps,
            "num_significant_laps": self.num_significant_laps,
            "total_distance": self.total_distance,
            "total_ascent": self.total_ascent,
            "total_descent": self.total_descent,
            "total_elapsed_time": self.total_elapsed_time,
            "total_timer_time": self.total_timer_time,
        }


@dataclass(frozen=True)
class PruneResult:
    """Container for one pruning run's outputs."""

    events: list[OutputEvent]
    laps: list[Lap]
    lap_stats: list[LapStats]
    session: SessionStats
    summary: ActivitySummary
    sport: SportCode
    ranges: list[ExclusionRange]


def prune_activity(
    samples: Sequence[TelemetrySample],
    ranges: Sequence[ExclusionRange],
    *,
    activity_type: str | None = None,
    file_ids: Sequence[Mapping[str, Any]] = (),
    device_infos: Sequence[Mapping[str, Any]] = (),
    settings: PruningSettings | None = None,
) -> PruneResult:
    """Remove the excluded samples and rebuild laps, statistics and events.

    Raises `EmptyResultError` when the ranges cover every sample. Nothing is
    returned on failure, and no state is kept between calls.
    """
    settings = settings or PruningSettings()
    sport = map_sport(activity_type)

    merged = normalize_ranges(attach_time_bounds(samples, ranges))
    logger.info(
        "Pruning %d samples with %d ranges (%d after merging)",
        len(samples),
        len(ranges),
        len(merged),
    )

    laps = split_laps(samples, merged)
    lap_stats = [compute_lap_stats(lap, settings) for lap in laps]
    for lap_number, stats in enumerate(lap_stats, start=1):
        logger.debug(
            "Lap %d: %d records, %.1f m, %.1f s, %.1f m descent",
            lap_number,
            len(stats.samples),
            stats.total_distance,
            stats.total_elapsed_time,
            stats.total_descent,
        )

    session = compute_session_stats(lap_stats, settings)
    events = synthesize_events(
        lap_stats,
        session,
        sport,
        file_ids=file_ids,
        device_infos=device_infos,
        settings=settings,
    )

    return PruneResult(
        events=events,
        laps=laps,
        lap_stats=lap_stats,
        session=session,
        summary=ActivitySummary.from_session(session),
        sport=sport,
        ranges=merged,
    )
