#!/usr/bin/env python3
# examples/explore_temperatures.py

from __future__ import annotations

import warnings

from austempviz.config import ViewerConfig, YearMonth
from austempviz.io import DataLoadError
from austempviz.plot import bullet, ensure_paths_exist, info
from austempviz.plots.viewer import launch

# -----------------------------------------------------------------------------
# User inputs (EDIT FOR YOUR PROJECT)
# -----------------------------------------------------------------------------
BOUNDARIES = "data/raw_data/regions/au-postcodes-Visvalingam-5.geojson"
RECORDS    = "data/aggregated_data/postcodes_with_monthly_temperatures_From20000101.csv"

# -----------------------------
# Window / animation
# -----------------------------
START = YearMonth(2000, 1)
END   = YearMonth(2024, 6)

# What happens when play reaches the last month:
#   "stop"  -> rewind to the first month and stop
#   "clamp" -> stay on the last month and stop
#   "wrap"  -> keep looping
END_POLICY = "stop"

# Comparison cities (postcodes) shown on the line plot and as pins
CITY_1 = "2000"   # Sydney
CITY_2 = "3000"   # Melbourne


# -----------------------------------------------------------------------------
# Runner
# -----------------------------------------------------------------------------
def main():
    if not warnings.filters:
        warnings.filterwarnings("default")

    info("Australian postcode temperatures: interactive viewer")
    ensure_paths_exist([BOUNDARIES, RECORDS])

    config = ViewerConfig(
        start=START,
        end=END,
        end_policy=END_POLICY,
        default_postcodes=(CITY_1, CITY_2),
    )
    try:
        launch(BOUNDARIES, RECORDS, config=config, show=True, verbose=True)
    except DataLoadError as e:
        bullet(f"[error] {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
