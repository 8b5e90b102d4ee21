"""Activity pruning package: cut sample ranges and rebuild laps and summaries."""

from .config import (
    ActivityPrunerConfig,
    PathSettings,
    PruningSettings,
    clear_config_cache,
    default_project_config,
    find_project_root,
    resolve_input_file,
    resolve_output_dir,
)
from .describe import (
    format_distance,
    format_elevation,
    format_time,
    generate_activity_description,
)
from .errors import (
    EmptyLapError,
    EmptyResultError,
    EmptySessionError,
    InvalidRangeError,
    PruningError,
)
from .export import lap_table, load_results, write_results
from .intervals import (
    ExclusionRange,
    attach_time_bounds,
    normalize_ranges,
    ranges_from_efforts,
)
from .laps import split_laps
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
from .pipeline import ActivitySummary, PruneResult, prune_activity
from .samples import Lap, TelemetrySample
from .selection import SegmentEffort, SelectionRequest, validate_selection
from .sports import SportCode, map_sport
from .stats import LapStats, SessionStats, compute_lap_stats, compute_session_stats
from .streams import (
    ActivityInput,
    load_activity_json,
    load_samples_csv,
    samples_from_frame,
    samples_from_streams,
)
from .synthesis import synthesize_events

__all__ = [
    "ActivityInput",
    "ActivityPrunerConfig",
    "ActivitySummary",
    "ActivityWrapper",
    "DeviceInfo",
    "EmptyLapError",
    "EmptyResultError",
    "EmptySessionError",
    "ExclusionRange",
    "FileId",
    "InvalidRangeError",
    "Lap",
    "LapStats",
    "LapSummary",
    "OutputEvent",
    "PathSettings",
    "PruneResult",
    "PruningError",
    "PruningSettings",
    "Record",
    "SegmentEffort",
    "SelectionRequest",
    "SessionStats",
    "SessionSummary",
    "SportCode",
    "TelemetrySample",
    "TimerEvent",
    "attach_time_bounds",
    "clear_config_cache",
    "compute_lap_stats",
    "compute_session_stats",
    "default_project_config",
    "find_project_root",
    "format_distance",
    "format_elevation",
    "format_time",
    "generate_activity_description",
    "lap_table",
    "load_activity_json",
    "load_results",
    "load_samples_csv",
    "map_sport",
    "normalize_ranges",
    "prune_activity",
    "ranges_from_efforts",
    "resolve_input_file",
    "resolve_output_dir",
    "samples_from_frame",
    "samples_from_streams",
    "split_laps",
    "synthesize_events",
    "validate_selection",
    "write_results",
]
