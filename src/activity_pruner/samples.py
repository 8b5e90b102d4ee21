"""Telemetry sample and lap containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

import pandas as pd

SAMPLE_FIELDS = (
    "distance",
    "altitude",
    "speed",
    "heart_rate",
    "cadence",
    "power",
    "temperature",
    "position_lat",
    "position_long",
)

# Field names used by the activity encoder for each sample attribute.
ENCODER_FIELD_NAMES = {
    "timestamp": "timestamp",
    "distance": "distance",
    "altitude": "altitude",
    "speed": "speed",
    "heart_rate": "heartRate",
    "cadence": "cadence",
    "power": "power",
    "temperature": "temperature",
    "position_lat": "positionLat",
    "position_long": "positionLong",
}


@dataclass(frozen=True)
class TelemetrySample:
    """One timestamped observation from the recording device."""

    timestamp: datetime
    distance: float | None = None
    altitude: float | None = None
    speed: float | None = None
    heart_rate: float | None = None
    cadence: float | None = None
    power: float | None = None
    temperature: float | None = None
    position_lat: float | None = None
    position_long: float | None = None
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def as_record(self, **overrides: Any) -> dict[str, Any]:
        """Encoder-shaped record with the non-null fields only."""
        record: dict[str, Any] = dict(self.extra)
        record["timestamp"] = self.timestamp
        for name in SAMPLE_FIELDS:
            value = getattr(self, name)
            if value is not None:
                record[ENCODER_FIELD_NAMES[name]] = value
        for name, value in overrides.items():
            record[ENCODER_FIELD_NAMES.get(name, name)] = value
        return record


@dataclass(frozen=True)
class Lap:
    """Contiguous run of kept samples, with its position in the source sequence."""

    samples: tuple[TelemetrySample, ...]
    start_index: int
    end_index: int

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def indices(self) -> range:
        return range(self.start_index, self.end_index + 1)


def samples_frame(samples: tuple[TelemetrySample, ...] | list[TelemetrySample]) -> pd.DataFrame:
    """Numeric sample fields as a float frame; missing values become NaN."""
    rows = [[getattr(sample, name) for name in SAMPLE_FIELDS] for sample in samples]
    frame = pd.DataFrame(rows, columns=list(SAMPLE_FIELDS), dtype="object")
    frame = frame.astype(float)
    frame.insert(0, "timestamp", pd.to_datetime([sample.timestamp for sample in samples], utc=True))
    return frame
