# austempviz/plot.py

"""
Console helpers for the runner scripts.

This module centralizes:
- pretty printing (hr, info, bullet, kv)
- record-set and boundary summaries
- input path checks

Keep these functions generic so any example script can reuse them.
"""

from __future__ import annotations
from typing import Any, Sequence
import os
import textwrap
import pandas as pd
import geopandas as gpd

from .grouping import MonthBuckets
from .timeindex import format_label


# ---------------------------
# Pretty printing utilities
# ---------------------------
def hr(char: str = "=", width: int = 78) -> str:
    """Horizontal rule."""
    return char * width


def info(title: str) -> None:
    """Section header."""
    print()
    print(hr("="))
    print(title)
    print(hr("-"))


def bullet(msg: str, indent: int = 2) -> None:
    """Indented, wrapped bullet text."""
    pad = " " * indent
    for line in textwrap.dedent(str(msg)).rstrip().splitlines():
        print(pad + line)


def kv(label: str, value: Any) -> None:
    """Key: Value printing with basic alignment."""
    print(f"  - {label:<18} {value}")


# ---------------------------
# Input summaries
# ---------------------------
def ensure_paths_exist(paths: Sequence[str]) -> bool:
    """Warn (do not fail) for missing input files; True when all exist."""
    ok = True
    for path in paths:
        if not os.path.exists(path):
            bullet(f"[warn] input not found: {path}")
            ok = False
    return ok


def print_records_summary(records: pd.DataFrame, buckets: MonthBuckets | None = None) -> None:
    """Rows, postcodes, time coverage and (optionally) bucket counts."""
    kv("Records", len(records))
    if records.empty:
        kv("Time coverage", "no records")
        return
    kv("Postcodes", records["Postcode"].nunique())
    first = records.sort_values(["Year", "Month"]).iloc[0]
    last = records.sort_values(["Year", "Month"]).iloc[-1]
    kv("Time start", format_label(int(first["Year"]), int(first["Month"])))
    kv("Time end", format_label(int(last["Year"]), int(last["Month"])))
    kv("Avg_temp range", f"{records['Avg_temp'].min():.1f} .. {records['Avg_temp'].max():.1f} °C")
    if buckets is not None:
        sizes = [len(b) for b in buckets.values()]
        kv("Month buckets", len(buckets))
        if sizes:
            kv("Rows per bucket", f"{min(sizes)} .. {max(sizes)}")


def print_boundaries_summary(regions: gpd.GeoDataFrame) -> None:
    kv("Polygons", len(regions))
    kv("Postcodes", regions["postcode"].nunique() if "postcode" in regions else "n/a")
    kv("CRS", regions.crs.to_string() if regions.crs is not None else "undefined")
