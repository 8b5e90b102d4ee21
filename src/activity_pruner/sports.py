"""Activity-type label to (sport, sub_sport) enumeration lookup."""

from __future__ import annotations

from types import MappingProxyType
from typing import NamedTuple


class SportCode(NamedTuple):
    sport: int
    sub_sport: int


UNKNOWN_SPORT = SportCode(0, 0)

SPORT_CODES = MappingProxyType(
    {
        # Cycling
        "ride": SportCode(2, 0),
        "mountainbikeride": SportCode(2, 8),
        "gravelride": SportCode(2, 46),
        "ebikeride": SportCode(21, 0),
        "emountainbikeride": SportCode(21, 8),
        "velomobile": SportCode(2, 0),
        "virtualride": SportCode(2, 10),
        "handcycle": SportCode(2, 14),
        "cycling": SportCode(2, 0),
        "biking": SportCode(2, 0),
        # Running
        "run": SportCode(1, 0),
        "trailrun": SportCode(1, 3),
        "virtualrun": SportCode(1, 10),
        "running": SportCode(1, 0),
        "treadmillrun": SportCode(1, 1),
        # Walking and hiking
        "walk": SportCode(11, 0),
        "walking": SportCode(11, 0),
        "hike": SportCode(17, 0),
        "hiking": SportCode(17, 0),
        # Swimming
        "swim": SportCode(5, 0),
        "swimming": SportCode(5, 0),
        "openwater": SportCode(5, 2),
        "pool": SportCode(5, 0),
        # Winter sports
        "alpineski": SportCode(13, 0),
        "backcountryski": SportCode(13, 2),
        "downhillski": SportCode(13, 0),
        "skiing": SportCode(13, 0),
        "nordicski": SportCode(12, 0),
        "crosscountryskiing": SportCode(12, 0),
        "rollerski": SportCode(12, 0),
        "snowboard": SportCode(14, 0),
        "snowboarding": SportCode(14, 0),
        "snowshoe": SportCode(35, 0),
        "snowshoeing": SportCode(35, 0),
        "iceskate": SportCode(33, 0),
        "iceskating": SportCode(33, 0),
    }
)


def map_sport(activity_type: str | None) -> SportCode:
    """Look up an activity-type label; unknown labels map to (0, 0)."""
    if not activity_type:
        return UNKNOWN_SPORT
    return SPORT_CODES.get(activity_type.lower(), UNKNOWN_SPORT)
