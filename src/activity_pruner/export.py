"""Write pruning outputs: ordered events, lap table, and summary contract."""

from __future__ import annotations

from datetime import datetime
import json
from pathlib import Path
from typing import Any, Sequence

import numpy as np
import pandas as pd

from .pipeline import PruneResult
from .stats import LapStats

LAP_TABLE_COLUMNS = (
    "start_time",
    "end_time",
    "total_elapsed_time",
    "total_timer_time",
    "total_distance",
    "total_ascent",
    "total_descent",
    "avg_speed",
    "max_speed",
    "avg_heart_rate",
    "max_heart_rate",
    "min_heart_rate",
    "avg_cadence",
    "max_cadence",
    "avg_power",
    "max_power",
    "normalized_power",
    "total_work",
    "total_calories",
    "avg_temperature",
)


def lap_table(lap_stats: Sequence[LapStats]) -> pd.DataFrame:
    """One row per lap, without the owned samples."""
    rows: list[dict[str, object]] = []
    for lap_number, lap in enumerate(lap_stats, start=1):
        record: dict[str, object] = {"lap": lap_number, "record_count": len(lap.samples)}
        record.update({column: getattr(lap, column) for column in LAP_TABLE_COLUMNS})
        rows.append(record)
    return pd.DataFrame(rows, columns=["lap", "record_count", *LAP_TABLE_COLUMNS])


def event_messages(result: PruneResult) -> list[dict[str, Any]]:
    """Encoder messages in emission order, tagged with their event kind."""
    return [{"kind": event.kind, **event.to_message()} for event in result.events]


def write_results(
    result: PruneResult,
    output_dir: str | Path,
    *,
    input_path: str | Path | None = None,
    description: str | None = None,
) -> dict[str, Path]:
    """Write `events.json`, `laps.csv` and `summary.json`."""
    root = Path(output_dir)
    root.mkdir(parents=True, exist_ok=True)

    events_path = root / "events.json"
    events_path.write_text(
        json.dumps(_jsonify_obj(event_messages(result)), indent=2) + "\n",
        encoding="utf-8",
    )

    laps_path = root / "laps.csv"
    lap_table(result.lap_stats).to_csv(laps_path, index=False)

    summary_path = root / "summary.json"
    summary = {
        "input_path": input_path,
        "sport": {"sport": result.sport.sport, "sub_sport": result.sport.sub_sport},
        "excluded_ranges": [
            {"start_index": exclusion.start_index, "end_index": exclusion.end_index}
            for exclusion in result.ranges
        ],
        "stats": result.summary.as_dict(),
        "description": description,
        "artifacts": {
            "events": events_path.name,
            "laps": laps_path.name,
        },
    }
    summary_path.write_text(json.dumps(_jsonify_obj(summary), indent=2) + "\n", encoding="utf-8")

    return {"events": events_path, "laps": laps_path, "summary": summary_path}


def load_results(output_dir: str | Path) -> dict[str, Any]:
    """Load `summary.json` from an output directory."""
    summary_path = Path(output_dir) / "summary.json"
    if not summary_path.exists():
        raise FileNotFoundError(f"Missing pruning summary at {summary_path}")
    return json.loads(summary_path.read_text(encoding="utf-8"))


def _jsonify_obj(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _jsonify_obj(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonify_obj(item) for item in value]
    if isinstance(value, (pd.Timestamp, datetime)):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, float) and np.isnan(value):
        return None
    return value
