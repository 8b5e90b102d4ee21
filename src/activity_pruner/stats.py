"""Per-lap and whole-session statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
import math
from typing import Callable, Sequence

import numpy as np
import pandas as pd

from .config import PruningSettings
from .errors import EmptyLapError, EmptySessionError
from .samples import Lap, TelemetrySample, samples_frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LapStats:
    """Statistics for one lap. Heart rate, cadence and power are None as a group when absent."""

    start_time: datetime
    end_time: datetime
    total_elapsed_time: float
    total_timer_time: float
    total_distance: float
    total_ascent: float
    total_descent: float
    avg_speed: float
    max_speed: float
    avg_heart_rate: int | None
    max_heart_rate: float | None
    min_heart_rate: float | None
    avg_cadence: int | None
    max_cadence: float | None
    avg_power: int | None
    max_power: float | None
    normalized_power: int | None
    total_work: int | None
    total_calories: int | None
    avg_temperature: int | None
    samples: tuple[TelemetrySample, ...]


@dataclass(frozen=True)
class SessionStats:
    """Whole-activity statistics reduced from the lap statistics."""

    start_time: datetime
    end_time: datetime
    total_elapsed_time: float
    total_timer_time: float
    total_distance: float
    total_ascent: float
    total_descent: float
    avg_speed: float
    max_speed: float
    avg_heart_rate: int | None
    max_heart_rate: float | None
    min_heart_rate: float | None
    avg_cadence: int | None
    max_cadence: float | None
    avg_power: int | None
    max_power: float | None
    normalized_power: int | None
    total_work: int
    total_calories: int
    avg_temperature: int | None
    lap_count: int
    significant_lap_count: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def compute_lap_stats(
    lap: Lap | Sequence[TelemetrySample],
    settings: PruningSettings = PruningSettings(),
) -> LapStats:
    """Summarize one lap from its samples."""
    samples = tuple(lap.samples if isinstance(lap, Lap) else lap)
    if not samples:
        raise EmptyLapError("Cannot calculate stats for empty lap")

    frame = samples_frame(samples)
    start_time = samples[0].timestamp
    end_time = samples[-1].timestamp
    elapsed_s = float((frame["timestamp"].iloc[-1] - frame["timestamp"].iloc[0]).total_seconds())

    distance = frame["distance"].fillna(0.0)
    total_distance = float(distance.iloc[-1] - distance.iloc[0])

    altitude_step = frame["altitude"].fillna(0.0).diff().iloc[1:]
    total_ascent = float(altitude_step.clip(lower=0.0).sum())
    total_descent = float(altitude_step.clip(upper=0.0).abs().sum())

    speeds = frame["speed"].dropna()
    avg_speed = float(speeds.mean()) if not speeds.empty else 0.0
    max_speed = float(speeds.max()) if not speeds.empty else 0.0

    heart_rates = frame["heart_rate"].dropna()
    cadences = frame["cadence"].dropna()
    powers = frame["power"].dropna()
    temperatures = frame["temperature"].dropna()

    avg_power = _rounded_mean(powers)
    normalized_power = None
    if len(powers) > settings.normalized_power_min_samples:
        normalized_power = round_half_up(float(np.mean(powers.to_numpy() ** 4)) ** 0.25)

    total_work = None
    if avg_power is not None and elapsed_s > 0:
        total_work = round_half_up(avg_power * elapsed_s)

    total_calories = None
    if total_work is not None:
        total_calories = round_half_up(total_work / 1000.0 * settings.joules_to_kcal_factor)

    return LapStats(
        start_time=start_time,
        end_time=end_time,
        total_elapsed_time=elapsed_s,
        total_timer_time=elapsed_s,
        total_distance=total_distance,
        total_ascent=total_ascent,
        total_descent=total_descent,
        avg_speed=avg_speed,
        max_speed=max_speed,
        avg_heart_rate=_rounded_mean(heart_rates),
        max_heart_rate=_max_or_none(heart_rates),
        min_heart_rate=_min_or_none(heart_rates),
        avg_cadence=_rounded_mean(cadences),
        max_cadence=_max_or_none(cadences),
        avg_power=avg_power,
        max_power=_max_or_none(powers),
        normalized_power=normalized_power,
        total_work=total_work,
        total_calories=total_calories,
        avg_temperature=_rounded_mean(temperatures),
        samples=samples,
    )


def compute_session_stats(
    laps: Sequence[LapStats],
    settings: PruningSettings = PruningSettings(),
) -> SessionStats:
    """Reduce lap statistics into one session record.

    Averages are weighted by each lap's timer time, using only the laps that
    carry the metric. Temperature is the exception: a plain mean over laps.
    """
    if not laps:
        raise EmptySessionError("Cannot calculate session stats with no laps")

    start_time = laps[0].start_time
    end_time = laps[-1].end_time
    total_elapsed_time = float((pd.Timestamp(end_time) - pd.Timestamp(start_time)).total_seconds())
    total_timer_time = sum(lap.total_timer_time for lap in laps)

    logger.debug(
        "Session over %d laps: elapsed %.1fs, timer %.1fs",
        len(laps),
        total_elapsed_time,
        total_timer_time,
    )

    hr_laps = [lap for lap in laps if lap.avg_heart_rate is not None]
    cadence_laps = [lap for lap in laps if lap.avg_cadence is not None]
    power_laps = [lap for lap in laps if lap.avg_power is not None]
    np_laps = [lap for lap in laps if lap.normalized_power is not None]
    temperature_laps = [lap for lap in laps if lap.avg_temperature is not None]

    avg_temperature = None
    if temperature_laps:
        avg_temperature = round_half_up(
            sum(lap.avg_temperature for lap in temperature_laps) / len(temperature_laps)
        )

    significant_lap_count = sum(
        1 for lap in laps if lap.total_descent > settings.significant_descent_threshold_m
    )

    return SessionStats(
        start_time=start_time,
        end_time=end_time,
        total_elapsed_time=total_elapsed_time,
        total_timer_time=total_timer_time,
        total_distance=sum(lap.total_distance for lap in laps),
        total_ascent=sum(lap.total_ascent for lap in laps),
        total_descent=sum(lap.total_descent for lap in laps),
        avg_speed=_time_weighted_mean(laps, lambda lap: lap.avg_speed),
        max_speed=max(lap.max_speed for lap in laps),
        avg_heart_rate=_rounded_weighted_mean(hr_laps, lambda lap: lap.avg_heart_rate),
        max_heart_rate=max((lap.max_heart_rate for lap in hr_laps), default=None),
        min_heart_rate=min((lap.min_heart_rate for lap in hr_laps), default=None),
        avg_cadence=_rounded_weighted_mean(cadence_laps, lambda lap: lap.avg_cadence),
        max_cadence=max((lap.max_cadence for lap in cadence_laps), default=None),
        avg_power=_rounded_weighted_mean(power_laps, lambda lap: lap.avg_power),
        max_power=max((lap.max_power for lap in power_laps), default=None),
        normalized_power=_rounded_weighted_mean(np_laps, lambda lap: lap.normalized_power),
        total_work=sum(lap.total_work or 0 for lap in laps),
        total_calories=sum(lap.total_calories or 0 for lap in laps),
        avg_temperature=avg_temperature,
        lap_count=len(laps),
        significant_lap_count=significant_lap_count,
    )


def _rounded_mean(values: pd.Series) -> int | None:
    if values.empty:
        return None
    return round_half_up(float(values.mean()))


def _max_or_none(values: pd.Series) -> float | None:
    return None if values.empty else float(values.max())


def _min_or_none(values: pd.Series) -> float | None:
    return None if values.empty else float(values.min())


def _time_weighted_mean(laps: Sequence[LapStats], value: Callable[[LapStats], float]) -> float:
    weight = sum(lap.total_timer_time for lap in laps)
    if weight <= 0:
        # Single-sample laps carry no timer time.
        return sum(value(lap) for lap in laps) / len(laps)
    return sum(value(lap) * lap.total_timer_time for lap in laps) / weight


def _rounded_weighted_mean(
    laps: Sequence[LapStats], value: Callable[[LapStats], float]
) -> int | None:
    if not laps:
        return None
    return round_half_up(_time_weighted_mean(laps, value))
