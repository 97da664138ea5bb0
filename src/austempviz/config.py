"""
Compile-time settings for the temperature viewer.

Runner scripts override these by passing a `ViewerConfig` built from their
own constants; nothing here is read from the environment.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import NamedTuple, Tuple


class YearMonth(NamedTuple):
    year: int
    month: int


# -----------------------------
# Date window
# -----------------------------
START = YearMonth(2000, 1)
END = YearMonth(2024, 6)

# -----------------------------
# Colour scale (°C)
# -----------------------------
MIN_TEMP = 0.0
MAX_TEMP = 35.0
CMAP = "cool"                      # cyan to magenta
MISSING_COLOUR = "lightgrey"       # regions with no temperature for the month

# -----------------------------
# Animation
# -----------------------------
INTERVAL_MS = 300                  # one month per tick
TRANSITION_MS = 200                # zoom step duration
END_POLICIES = ("stop", "clamp", "wrap")
END_POLICY = "stop"

# -----------------------------
# Map
# -----------------------------
MAP_CRS = "EPSG:3857"              # web Mercator
POSTCODE_FIELD = "POA_CODE"
ZOOM_EXTENT = (1.0, 8.0)
ZOOM_IN_FACTOR = 1.2
ZOOM_OUT_FACTOR = 0.8

# -----------------------------
# Comparison traces / pins
# -----------------------------
TRACE_COLOURS = ("#b74e32", "#b38b00")
DEFAULT_POSTCODES = ("2000", "3000")


@dataclass(frozen=True)
class ViewerConfig:
    start: YearMonth = START
    end: YearMonth = END
    min_temp: float = MIN_TEMP
    max_temp: float = MAX_TEMP
    cmap: str = CMAP
    missing_colour: str = MISSING_COLOUR
    interval_ms: int = INTERVAL_MS
    transition_ms: int = TRANSITION_MS
    end_policy: str = END_POLICY
    map_crs: str = MAP_CRS
    postcode_field: str = POSTCODE_FIELD
    zoom_extent: Tuple[float, float] = ZOOM_EXTENT
    trace_colours: Tuple[str, str] = TRACE_COLOURS
    default_postcodes: Tuple[str, str] = DEFAULT_POSTCODES
    figsize: Tuple[float, float] = (13, 7)
    total_months: int = field(init=False)

    def __post_init__(self):
        # local imports keep config importable from timeindex and regions
        from .regions import city_for_postcode
        from .timeindex import months_between

        if self.end_policy not in END_POLICIES:
            raise ValueError(f"end_policy must be one of {END_POLICIES}, got {self.end_policy!r}")
        if self.min_temp >= self.max_temp:
            raise ValueError("min_temp must be below max_temp")
        unknown = [pc for pc in self.default_postcodes if city_for_postcode(pc) is None]
        if unknown:
            raise ValueError(f"default_postcodes must be city postcodes (see regions.CITIES), got {unknown}")
        total = months_between(self.start.year, self.start.month, self.end.year, self.end.month)
        if total <= 0:
            raise ValueError(f"Empty date window: {self.start} .. {self.end}")
        object.__setattr__(self, "total_months", total)
