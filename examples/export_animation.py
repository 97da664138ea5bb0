#!/usr/bin/env python3
# examples/export_animation.py

from __future__ import annotations

import warnings

from austempviz.config import ViewerConfig, YearMonth
from austempviz.grouping import group_by_month
from austempviz.io import filter_window, load_boundaries, load_records
from austempviz.plot import bullet, info, kv, print_boundaries_summary, print_records_summary
from austempviz.plots.animate import animate_choropleth
from austempviz.utils import file_prefix

# -----------------------------------------------------------------------------
# User inputs (EDIT FOR YOUR PROJECT)
# -----------------------------------------------------------------------------
BOUNDARIES = "data/raw_data/regions/au-postcodes-Visvalingam-5.geojson"
RECORDS    = "data/aggregated_data/postcodes_with_monthly_temperatures_From20000101.csv"
FIG_DIR    = "figures/"

START = YearMonth(2020, 1)
END   = YearMonth(2023, 12)

# One frame every EVERY months (1 = every month)
EVERY = 1

# Colour limits: None -> fixed 0..35 °C scale; ROBUST=True -> 5th..95th percentiles
CLIM   = None
ROBUST = False

POSTCODES = ["6000", "0800"]   # Perth, Darwin


def main():
    if not warnings.filters:
        warnings.filterwarnings("default")

    config = ViewerConfig(start=START, end=END)

    info("[animate] loading inputs")
    regions = load_boundaries(BOUNDARIES, postcode_field=config.postcode_field, crs=config.map_crs)
    records = load_records(RECORDS)
    print_boundaries_summary(regions)
    windowed = filter_window(records, config.start, config.end)
    print_records_summary(windowed, group_by_month(windowed))

    info("[animate] rendering GIF")
    kv("Months", config.total_months)
    kv("Frame step", EVERY)
    path = animate_choropleth(
        regions, records,
        config=config,
        postcodes=POSTCODES,
        every=EVERY,
        clim=CLIM,
        robust=ROBUST,
        prefix=file_prefix(RECORDS),
        figures_root=FIG_DIR,
        verbose=True,
    )
    bullet(f"• {path}")


if __name__ == "__main__":
    main()
