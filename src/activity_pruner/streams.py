"""Build telemetry samples from activity streams or tabular exports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np
import pandas as pd

from .samples import SAMPLE_FIELDS, TelemetrySample

logger = logging.getLogger(__name__)

DEGREES_TO_SEMICIRCLES = 2**31 / 180
DEFAULT_PRODUCT_NAME = "Uplift Pruner"

# Stream key -> sample attribute.
STREAM_FIELDS = {
    "distance": "distance",
    "altitude": "altitude",
    "velocity_smooth": "speed",
    "heartrate": "heart_rate",
    "cadence": "cadence",
    "watts": "power",
    "temp": "temperature",
}


@dataclass(frozen=True)
class ActivityInput:
    """Decoded activity: samples plus pass-through header records."""

    samples: list[TelemetrySample]
    activity_type: str | None = None
    file_ids: list[dict[str, Any]] = field(default_factory=list)
    device_infos: list[dict[str, Any]] = field(default_factory=list)
    segment_efforts: list[dict[str, Any]] = field(default_factory=list)
    description: str | None = None


def stream_values(streams: Mapping[str, Any], key: str) -> list[Any]:
    """Stream data for `key`, accepting `{"data": [...]}` or a plain list."""
    value = streams.get(key)
    if value is None:
        return []
    if isinstance(value, Mapping):
        return list(value.get("data") or [])
    if isinstance(value, list):
        return value
    return []


def samples_from_streams(streams: Mapping[str, Any], start_time: datetime) -> list[TelemetrySample]:
    """Convert per-second activity streams into samples offset from `start_time`."""
    times = stream_values(streams, "time")
    if not times:
        raise ValueError("No stream data available")

    columns = {key: stream_values(streams, key) for key in STREAM_FIELDS}
    latlng = stream_values(streams, "latlng")

    samples: list[TelemetrySample] = []
    for i, offset in enumerate(times):
        values: dict[str, Any] = {}
        if i < len(latlng) and latlng[i]:
            lat, lng = latlng[i]
            values["position_lat"] = lat * DEGREES_TO_SEMICIRCLES
            values["position_long"] = lng * DEGREES_TO_SEMICIRCLES
        for key, attr in STREAM_FIELDS.items():
            column = columns[key]
            if i < len(column) and column[i] is not None:
                values[attr] = column[i]
        samples.append(
            TelemetrySample(timestamp=start_time + timedelta(seconds=offset or 0), **values)
        )

    logger.info("Built %d samples from %d streams", len(samples), len(streams))
    return samples


def activity_headers(activity: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """File-id and device-info records describing the rebuilt activity."""
    start_time = pd.Timestamp(activity["start_date"]).to_pydatetime()
    device_name = activity.get("device_name") or DEFAULT_PRODUCT_NAME
    if DEFAULT_PRODUCT_NAME in device_name:
        product_name = device_name
    else:
        product_name = f"{device_name} x {DEFAULT_PRODUCT_NAME}"

    file_id = {
        "type": "activity",
        "manufacturer": "development",
        "productName": product_name,
        "serialNumber": activity.get("id"),
        "timeCreated": start_time,
    }
    device_info = {
        "timestamp": start_time,
        "manufacturer": "development",
        "productName": product_name,
        "serialNumber": activity.get("id"),
        "softwareVersion": 1.0,
    }
    return file_id, device_info


def samples_from_frame(df: pd.DataFrame, *, timestamp_col: str = "timestamp") -> list[TelemetrySample]:
    """Samples from a tabular export, in row order.

    Known sample columns map onto sample fields; other columns ride along in
    `extra`. Rows are never re-sorted.
    """
    if timestamp_col not in df.columns:
        raise ValueError(f"Missing timestamp column: {timestamp_col}")

    timestamps = pd.to_datetime(df[timestamp_col], utc=True, errors="coerce")
    if timestamps.isna().any():
        raise ValueError(f"Unparseable values in `{timestamp_col}`")

    known = [name for name in SAMPLE_FIELDS if name in df.columns]
    extra_cols = [col for col in df.columns if col != timestamp_col and col not in known]

    samples: list[TelemetrySample] = []
    for ts, row in zip(timestamps, df.to_dict(orient="records"), strict=True):
        values = {name: _clean(row[name]) for name in known}
        extra = {col: _clean(row[col]) for col in extra_cols if _clean(row[col]) is not None}
        samples.append(
            TelemetrySample(timestamp=ts.to_pydatetime(), extra=MappingProxyType(extra), **values)
        )
    return samples


def load_samples_csv(csv_path: str | Path) -> list[TelemetrySample]:
    """Load a CSV export with a `timestamp` column into samples."""
    df = pd.read_csv(csv_path)
    return samples_from_frame(df)


def load_activity_json(json_path: str | Path) -> ActivityInput:
    """Load `{activity, streams, segment_efforts}` as fetched from the activity platform."""
    payload = json.loads(Path(json_path).read_text(encoding="utf-8"))
    activity = payload.get("activity") or {}
    if "start_date" not in activity:
        raise ValueError("Activity payload is missing `activity.start_date`")

    file_id, device_info = activity_headers(activity)
    start_time = pd.Timestamp(activity["start_date"]).to_pydatetime()
    samples = samples_from_streams(payload.get("streams") or {}, start_time)

    return ActivityInput(
        samples=samples,
        activity_type=activity.get("sport_type") or activity.get("type"),
        file_ids=[file_id],
        device_infos=[device_info],
        segment_efforts=list(payload.get("segment_efforts") or activity.get("segment_efforts") or []),
        description=activity.get("description"),
    )


def _clean(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and np.isnan(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value
