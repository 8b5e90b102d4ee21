from __future__ import annotations

from datetime import datetime, timedelta, timezone
import json

import pandas as pd

from activity_pruner.describe import (
    format_distance,
    format_elevation,
    format_time,
    generate_activity_description,
)
from activity_pruner.export import lap_table, load_results, write_results
from activity_pruner.intervals import ExclusionRange
from activity_pruner.pipeline import ActivitySummary, prune_activity
from activity_pruner.samples import TelemetrySample

T0 = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)


def _result():
    samples = [
        TelemetrySample(
            timestamp=T0 + timedelta(seconds=i),
            distance=float(i) * 3,
            altitude=200.0 - i,
            power=180.0,
        )
        for i in range(80)
    ]
    return prune_activity(samples, [ExclusionRange(20, 29), ExclusionRange(60, 64)], activity_type="ride")


def test_format_helpers() -> None:
    assert format_time(45) == "45s"
    assert format_time(125) == "2m 5s"
    assert format_time(3725) == "1h 2m"
    assert format_distance(12345.0) == "12.35 km"
    assert format_distance(1609.34, use_imperial=True) == "1.00 mi"
    assert format_elevation(100.5) == "101 m"
    assert format_elevation(100.0, use_imperial=True) == "328 ft"


def test_generate_activity_description() -> None:
    summary = ActivitySummary(
        num_laps=3,
        num_significant_laps=2,
        total_distance=15200.0,
        total_ascent=12.0,
        total_descent=850.4,
        total_elapsed_time=7200.0,
        total_timer_time=3600.0,
    )
    text = generate_activity_description(summary, original_description="  Bike park day \n")

    assert text.splitlines() == [
        "Bike park day",
        "",
        "3 laps, 15.20 km, 12 m ascent, 850 m descent",
        "",
        "Processed with Uplift Pruner: https://uplift-pruner.rbritton.dev",
    ]
    assert generate_activity_description(summary).startswith("3 laps")


def test_lap_table_has_one_row_per_lap() -> None:
    result = _result()
    table = lap_table(result.lap_stats)

    assert table["lap"].tolist() == [1, 2, 3]
    assert table["record_count"].tolist() == [20, 30, 15]
    assert table["total_distance"].sum() == result.session.total_distance


def test_write_results_roundtrip(tmp_path) -> None:
    result = _result()
    paths = write_results(result, tmp_path, input_path=tmp_path / "activity.json", description="x")

    assert set(paths) == {"events", "laps", "summary"}
    summary = load_results(tmp_path)
    assert summary["stats"]["num_laps"] == 3
    assert summary["excluded_ranges"] == [
        {"start_index": 20, "end_index": 29},
        {"start_index": 60, "end_index": 64},
    ]
    assert summary["sport"] == {"sport": 2, "sub_sport": 0}

    events = json.loads(paths["events"].read_text(encoding="utf-8"))
    assert events[0]["kind"] == "timer"
    assert events[-1] == {"kind": "activity", "timestamp": result.session.end_time.isoformat(), "numSessions": 1}
    assert len(pd.read_csv(paths["laps"])) == 3
