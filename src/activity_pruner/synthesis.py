"""Build the ordered output event stream for the encoder."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import pandas as pd

from .config import PruningSettings
from .messages import (
    ActivityWrapper,
    DeviceInfo,
    FileId,
    LapSummary,
    OutputEvent,
    Record,
    SessionSummary,
    TimerEvent,
)
from .sports import SportCode
from .stats import LapStats, SessionStats

logger = logging.getLogger(__name__)


def synthesize_events(
    lap_stats: Sequence[LapStats],
    session: SessionStats,
    sport: SportCode,
    *,
    file_ids: Sequence[Mapping[str, Any]] = (),
    device_infos: Sequence[Mapping[str, Any]] = (),
    settings: PruningSettings = PruningSettings(),
) -> list[OutputEvent]:
    """Emit header, per-lap records and timer events, lap and session summaries.

    Only the first file-id and device-info records are carried over. Record
    distances are rebased so the emitted distance stream never drops at a
    lap boundary.
    """
    events: list[OutputEvent] = []
    if file_ids:
        events.append(FileId(dict(file_ids[0])))
    if device_infos:
        events.append(DeviceInfo(dict(device_infos[0])))

    cumulative_distance = 0.0
    for lap_idx, lap in enumerate(lap_stats):
        next_lap = lap_stats[lap_idx + 1] if lap_idx + 1 < len(lap_stats) else None
        lap_events, cumulative_distance = _lap_events(lap, next_lap, cumulative_distance, settings)
        events.extend(lap_events)

    events.extend(_lap_summary(lap, sport) for lap in lap_stats)
    events.append(_session_summary(session, sport))
    events.append(ActivityWrapper(timestamp=session.end_time, num_sessions=1))

    logger.info(
        "Synthesized %d events for %d laps (%.1f m rebased distance)",
        len(events),
        len(lap_stats),
        cumulative_distance,
    )
    return events


def _lap_events(
    lap: LapStats,
    next_lap: LapStats | None,
    cumulative_distance: float,
    settings: PruningSettings,
) -> tuple[list[OutputEvent], float]:
    events: list[OutputEvent] = [TimerEvent("start", lap.start_time)]

    lap_start_distance = lap.samples[0].distance or 0.0
    rebased = cumulative_distance
    for sample in lap.samples:
        # A sample without distance repeats the previous rebased value.
        if sample.distance is not None:
            rebased = cumulative_distance + sample.distance - lap_start_distance
        events.append(Record(sample=sample, distance=rebased))

    events.append(TimerEvent("stop", lap.end_time))

    if next_lap is not None:
        gap_ms = (pd.Timestamp(next_lap.start_time) - pd.Timestamp(lap.end_time)).total_seconds() * 1000.0
        if gap_ms > settings.pause_gap_threshold_ms:
            # No resume event: the next lap's start event restarts the timer.
            events.append(TimerEvent("pause", lap.end_time))

    return events, cumulative_distance + lap.total_distance


def _lap_summary(lap: LapStats, sport: SportCode) -> LapSummary:
    return LapSummary(
        timestamp=lap.end_time,
        start_time=lap.start_time,
        sport=sport.sport,
        sub_sport=sport.sub_sport,
        **_summary_values(lap),
    )


def _session_summary(session: SessionStats, sport: SportCode) -> SessionSummary:
    return SessionSummary(
        timestamp=session.end_time,
        start_time=session.start_time,
        sport=sport.sport,
        sub_sport=sport.sub_sport,
        num_laps=session.lap_count,
        **_summary_values(session),
    )


def _summary_values(stats: LapStats | SessionStats) -> dict[str, Any]:
    return {
        "total_elapsed_time": stats.total_elapsed_time,
        "total_timer_time": stats.total_timer_time,
        "total_distance": stats.total_distance,
        "avg_speed": stats.avg_speed,
        "max_speed": stats.max_speed,
        "total_ascent": stats.total_ascent,
        "total_descent": stats.total_descent,
        "avg_heart_rate": stats.avg_heart_rate,
        "max_heart_rate": stats.max_heart_rate,
        "min_heart_rate": stats.min_heart_rate,
        "avg_cadence": stats.avg_cadence,
        "max_cadence": stats.max_cadence,
        "avg_power": stats.avg_power,
        "max_power": stats.max_power,
        "normalized_power": stats.normalized_power,
        "total_work": stats.total_work,
        "total_calories": stats.total_calories,
        "avg_temperature": stats.avg_temperature,
    }
