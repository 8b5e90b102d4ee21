"""Output events handed to the activity encoder, in emission order."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, ClassVar, Literal, Mapping, Union

from .samples import TelemetrySample

TimerKind = Literal["start", "stop", "pause"]

TIMER_EVENT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "start": "start",
        "stop": "stopAll",
        "pause": "stopDisableAll",
    }
)

# Summary attribute -> encoder field name, for fields omitted when None.
OPTIONAL_SUMMARY_FIELDS = (
    ("avg_heart_rate", "avgHeartRate"),
    ("max_heart_rate", "maxHeartRate"),
    ("min_heart_rate", "minHeartRate"),
    ("avg_cadence", "avgCadence"),
    ("max_cadence", "maxCadence"),
    ("avg_power", "avgPower"),
    ("max_power", "maxPower"),
    ("normalized_power", "normalizedPower"),
    ("total_work", "totalWork"),
    ("avg_speed", "avgSpeed"),
    ("max_speed", "maxSpeed"),
    ("total_ascent", "totalAscent"),
    ("total_descent", "totalDescent"),
    ("avg_temperature", "avgTemperature"),
    ("total_calories", "totalCalories"),
)


@dataclass(frozen=True)
class FileId:
    kind: ClassVar[str] = "file_id"
    fields: Mapping[str, Any]

    def to_message(self) -> dict[str, Any]:
        return dict(self.fields)


@dataclass(frozen=True)
class DeviceInfo:
    kind: ClassVar[str] = "device_info"
    fields: Mapping[str, Any]

    def to_message(self) -> dict[str, Any]:
        return dict(self.fields)


@dataclass(frozen=True)
class TimerEvent:
    kind: ClassVar[str] = "timer"
    timer: TimerKind
    timestamp: datetime

    def to_message(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "event": "timer",
            "eventType": TIMER_EVENT_TYPES[self.timer],
            "eventGroup": 0,
        }


@dataclass(frozen=True)
class Record:
    """A kept sample with its distance rebased onto the pruned activity."""

    kind: ClassVar[str] = "record"
    sample: TelemetrySample
    distance: float

    def to_message(self) -> dict[str, Any]:
        return self.sample.as_record(distance=self.distance)


@dataclass(frozen=True)
class _Summary:
    timestamp: datetime
    start_time: datetime
    total_elapsed_time: float
    total_timer_time: float
    total_distance: float
    sport: int
    sub_sport: int
    avg_speed: float | None = None
    max_speed: float | None = None
    total_ascent: float | None = None
    total_descent: float | None = None
    avg_heart_rate: int | None = None
    max_heart_rate: float | None = None
    min_heart_rate: float | None = None
    avg_cadence: int | None = None
    max_cadence: float | None = None
    avg_power: int | None = None
    max_power: float | None = None
    normalized_power: int | None = None
    total_work: int | None = None
    total_calories: int | None = None
    avg_temperature: int | None = None

    def to_message(self) -> dict[str, Any]:
        message: dict[str, Any] = {
            "timestamp": self.timestamp,
            "startTime": self.start_time,
            "totalElapsedTime": self.total_elapsed_time,
            "totalTimerTime": self.total_timer_time,
            "totalDistance": self.total_distance,
            "sport": self.sport,
            "subSport": self.sub_sport,
        }
        for attr, name in OPTIONAL_SUMMARY_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                message[name] = value
        return message


@dataclass(frozen=True)
class LapSummary(_Summary):
    kind: ClassVar[str] = "lap"


@dataclass(frozen=True)
class SessionSummary(_Summary):
    kind: ClassVar[str] = "session"
    num_laps: int = 0

    def to_message(self) -> dict[str, Any]:
        message = super().to_message()
        message["numLaps"] = self.num_laps
        return message


@dataclass(frozen=True)
class ActivityWrapper:
    kind: ClassVar[str] = "activity"
    timestamp: datetime
    num_sessions: int = 1

    def to_message(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp, "numSessions": self.num_sessions}


OutputEvent = Union[
    FileId,
    DeviceInfo,
    TimerEvent,
    Record,
    LapSummary,
    SessionSummary,
    ActivityWrapper,
]
