from __future__ import annotations

from datetime import datetime, timedelta, timezone
import json

import pandas as pd
import pytest

from activity_pruner.selection import parse_efforts, validate_selection
from activity_pruner.streams import (
    DEGREES_TO_SEMICIRCLES,
    activity_headers,
    load_activity_json,
    load_samples_csv,
    samples_from_frame,
    samples_from_streams,
)

T0 = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)


def test_samples_from_streams_maps_fields() -> None:
    streams = {
        "time": {"data": [0, 1, 3]},
        "distance": {"data": [0.0, 4.0, 11.0]},
        "latlng": {"data": [[45.0, -90.0], [45.0001, -90.0001], [45.0002, -90.0002]]},
        "heartrate": [120, 121, 125],
        "watts": {"data": [200, None, 210]},
    }
    samples = samples_from_streams(streams, T0)

    assert [s.timestamp for s in samples] == [T0, T0 + timedelta(seconds=1), T0 + timedelta(seconds=3)]
    assert samples[2].distance == 11.0
    assert samples[0].position_lat == pytest.approx(45.0 * DEGREES_TO_SEMICIRCLES)
    assert samples[0].heart_rate == 120
    assert samples[1].power is None
    assert samples[0].altitude is None


def test_samples_from_streams_requires_time() -> None:
    with pytest.raises(ValueError, match="No stream data"):
        samples_from_streams({"distance": {"data": [1.0]}}, T0)


def test_activity_headers_brand_product_name() -> None:
    file_id, device_info = activity_headers(
        {"id": 42, "start_date": "2025-06-01T08:00:00Z", "device_name": "Edge 530"}
    )
    assert file_id["productName"] == "Edge 530 x Uplift Pruner"
    assert file_id["serialNumber"] == 42
    assert device_info["manufacturer"] == "development"

    file_id, _ = activity_headers({"id": 1, "start_date": "2025-06-01T08:00:00Z"})
    assert file_id["productName"] == "Uplift Pruner"


def test_samples_from_frame_keeps_row_order_and_extras() -> None:
    df = pd.DataFrame(
        {
            "timestamp": ["2025-06-01T08:00:05Z", "2025-06-01T08:00:01Z"],
            "distance": [10.0, None],
            "heart_rate": [130, 131],
            "lap_flag": ["a", "b"],
        }
    )
    samples = samples_from_frame(df)

    assert samples[0].timestamp > samples[1].timestamp
    assert samples[1].distance is None
    assert samples[0].extra["lap_flag"] == "a"


def test_load_samples_csv(tmp_path) -> None:
    csv_path = tmp_path / "records.csv"
    pd.DataFrame(
        {
            "timestamp": pd.date_range("2025-06-01", periods=4, freq="1s", tz="UTC"),
            "distance": [0.0, 1.0, 2.0, 3.0],
            "altitude": [10.0, 11.0, 10.0, 9.0],
        }
    ).to_csv(csv_path, index=False)

    samples = load_samples_csv(csv_path)

    assert len(samples) == 4
    assert samples[3].altitude == 9.0


def test_load_activity_json(tmp_path) -> None:
    payload = {
        "activity": {
            "id": 99,
            "start_date": "2025-06-01T08:00:00Z",
            "sport_type": "MountainBikeRide",
            "description": "Morning laps",
        },
        "streams": {"time": {"data": [0, 1, 2]}, "distance": {"data": [0.0, 5.0, 9.0]}},
        "segment_efforts": [{"start_index": 1, "end_index": 1, "name": "Uplift"}],
    }
    path = tmp_path / "activity.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    activity = load_activity_json(path)

    assert len(activity.samples) == 3
    assert activity.activity_type == "MountainBikeRide"
    assert activity.file_ids[0]["serialNumber"] == 99
    assert activity.segment_efforts[0]["name"] == "Uplift"
    assert activity.description == "Morning laps"


def test_validate_selection_accepts_valid_request() -> None:
    request = validate_selection({"activity_id": "123", "selected_segments": [0, 2], "action": "upload"})

    assert request.format == "fit"
    assert request.selected_segments == [0, 2]


@pytest.mark.parametrize(
    "body",
    [
        {"activity_id": "12a", "selected_segments": [0], "action": "download"},
        {"activity_id": "12", "selected_segments": [], "action": "download"},
        {"activity_id": "12", "selected_segments": [-1], "action": "download"},
        {"activity_id": "12", "selected_segments": list(range(101)), "action": "download"},
        {"activity_id": "12", "selected_segments": [0], "action": "delete"},
    ],
)
def test_validate_selection_rejects_bad_requests(body: dict) -> None:
    with pytest.raises(ValueError, match="Invalid selection request"):
        validate_selection(body)


def test_parse_efforts_rejects_reversed_bounds() -> None:
    assert parse_efforts([{"start_index": 2, "end_index": 5}])[0].end_index == 5
    with pytest.raises(ValueError):
        parse_efforts([{"start_index": 5, "end_index": 2}])
