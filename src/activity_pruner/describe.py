"""Human-readable text for a pruned activity."""

from __future__ import annotations

import math

from .pipeline import ActivitySummary
from .stats import round_half_up

METERS_TO_MILES = 0.000621371
METERS_TO_FEET = 3.28084
ATTRIBUTION = "Processed with Uplift Pruner: https://uplift-pruner.rbritton.dev"


def format_time(seconds: float) -> str:
    hours = math.floor(seconds / 3600)
    minutes = math.floor((seconds % 3600) / 60)
    secs = math.floor(seconds % 60)

    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_distance(meters: float, use_imperial: bool = False) -> str:
    if use_imperial:
        return f"{meters * METERS_TO_MILES:.2f} mi"
    return f"{meters / 1000:.2f} km"


def format_elevation(meters: float, use_imperial: bool = False) -> str:
    if use_imperial:
        return f"{round_half_up(meters * METERS_TO_FEET)} ft"
    return f"{round_half_up(meters)} m"


def generate_activity_description(
    summary: ActivitySummary,
    use_imperial: bool = False,
    original_description: str | None = None,
) -> str:
    """Activity description: original text, a one-line stats summary, attribution."""
    lines: list[str] = []
    if original_description and original_description.strip():
        lines.append(original_description.strip())
        lines.append("")

    lines.append(
        f"{summary.num_laps} laps, "
        f"{format_distance(summary.total_distance, use_imperial)}, "
        f"{format_elevation(summary.total_ascent, use_imperial)} ascent, "
        f"{format_elevation(summary.total_descent, use_imperial)} descent"
    )
    lines.append("")
    lines.append(ATTRIBUTION)
    return "\n".join(lines)
