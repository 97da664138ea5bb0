"""I/O helpers.

Implement:
 - load_boundaries(path, postcode_field, crs) -> gpd.GeoDataFrame
 - load_records(path) -> pd.DataFrame          # Postcode, Year, Month, Avg_temp
 - filter_window(records, start, end) -> pd.DataFrame
 - to_cube(records) -> xr.DataArray            # dims (time, postcode)
"""

from __future__ import annotations
from pathlib import Path
from typing import Optional, Union
import warnings
import numpy as np
import pandas as pd
import xarray as xr
import geopandas as gpd

from .config import START, END, POSTCODE_FIELD, YearMonth
from .timeindex import in_window

RECORD_COLUMNS = ["Postcode", "Year", "Month", "Avg_temp"]

PathLike = Union[str, Path]


class DataLoadError(RuntimeError):
    """A boundary or record file could not be loaded. Fatal at startup."""


# --------------------------
# Boundaries
# --------------------------
def load_boundaries(
    path: PathLike,
    *,
    postcode_field: str = POSTCODE_FIELD,
    crs: Optional[str] = None,
) -> gpd.GeoDataFrame:
    """
    Read the postcode polygons and return one row per single polygon.

    Multi-part postcodes are exploded so every row maps to exactly one
    drawn patch; the postcode is kept as text in a ``postcode`` column.
    Empty geometries are dropped. If `crs` is given the frame is projected.
    """
    try:
        gdf = gpd.read_file(path)
    except Exception as e:
        raise DataLoadError(f"Could not read boundaries from {str(path)!r}: {e}") from e
    return prepare_boundaries(gdf, postcode_field=postcode_field, crs=crs)


def prepare_boundaries(
    gdf: gpd.GeoDataFrame,
    *,
    postcode_field: str = POSTCODE_FIELD,
    crs: Optional[str] = None,
) -> gpd.GeoDataFrame:
    if postcode_field not in gdf.columns:
        raise DataLoadError(
            f"Boundary data has no {postcode_field!r} field (columns: {list(gdf.columns)})"
        )
    out = gpd.GeoDataFrame(
        {"postcode": gdf[postcode_field].to_numpy()},
        geometry=gdf.geometry.to_numpy(),
        crs=gdf.crs,
    )
    out = out[out.geometry.notna() & ~out.geometry.is_empty]
    out = out[out.geom_type.isin(["Polygon", "MultiPolygon"])]
    out = out.explode(index_parts=False).reset_index(drop=True)
    out["postcode"] = out["postcode"].astype(str).str.strip()
    if crs is not None:
        if out.crs is None:
            # GeoJSON without a crs member is lon/lat
            out = out.set_crs("EPSG:4326")
        out = out.to_crs(crs)
    return out


# --------------------------
# Temperature records
# --------------------------
def load_records(path: PathLike) -> pd.DataFrame:
    """
    Read the monthly temperature table.

    All fields arrive as text; Year/Month/Avg_temp are coerced to numbers and
    rows that fail coercion (or have a month outside 1-12) are dropped with a
    warning. Postcodes stay text so leading zeros survive (``"0800"``).
    """
    try:
        raw = pd.read_csv(path, dtype=str, keep_default_na=False)
    except Exception as e:
        raise DataLoadError(f"Could not read records from {str(path)!r}: {e}") from e
    return coerce_records(raw)


def coerce_records(raw: pd.DataFrame) -> pd.DataFrame:
    missing = [c for c in RECORD_COLUMNS if c not in raw.columns]
    if missing:
        raise DataLoadError(f"Record data is missing columns: {missing}")

    df = pd.DataFrame({
        "Postcode": raw["Postcode"].astype(str).str.strip(),
        "Year": pd.to_numeric(raw["Year"], errors="coerce"),
        "Month": pd.to_numeric(raw["Month"], errors="coerce"),
        "Avg_temp": pd.to_numeric(raw["Avg_temp"], errors="coerce"),
    }, index=raw.index)

    ok = (
        df[["Year", "Month", "Avg_temp"]].notna().all(axis=1)
        & df["Month"].between(1, 12)
        & (df["Year"] % 1 == 0)
        & (df["Month"] % 1 == 0)
        & (df["Postcode"] != "")
    )
    n_bad = int((~ok).sum())
    if n_bad:
        warnings.warn(f"Dropped {n_bad} temperature row(s) with unparseable or out-of-range fields")
    df = df[ok].copy()
    df["Year"] = df["Year"].astype(int)
    df["Month"] = df["Month"].astype(int)
    df["Avg_temp"] = df["Avg_temp"].astype(float)
    return df.reset_index(drop=True)


# --------------------------
# Time filtering
# --------------------------
def filter_window(
    records: pd.DataFrame,
    start: YearMonth = START,
    end: YearMonth = END,
) -> pd.DataFrame:
    """Keep records whose (Year, Month) lies in [start, end], both ends inclusive."""
    mask = in_window(records["Year"].to_numpy(), records["Month"].to_numpy(), start, end)
    return records[mask]


# --------------------------
# Cube for trace extraction
# --------------------------
def to_cube(records: pd.DataFrame) -> xr.DataArray:
    """
    Pivot records into a (time, postcode) DataArray of Avg_temp.

    Postcodes become text labels so they match the map regions. Gaps are
    NaN. Duplicate (postcode, month) rows keep the last value.
    """
    if records.empty:
        return xr.DataArray(
            np.empty((0, 0)),
            dims=("time", "postcode"),
            coords={"time": pd.DatetimeIndex([]), "postcode": np.array([], dtype=object)},
            name="Avg_temp",
        )
    time = pd.to_datetime(pd.DataFrame({
        "year": records["Year"], "month": records["Month"], "day": 1,
    }))
    s = pd.Series(
        records["Avg_temp"].to_numpy(),
        index=pd.MultiIndex.from_arrays([time, records["Postcode"].astype(str)], names=["time", "postcode"]),
        name="Avg_temp",
    )
    if s.index.has_duplicates:
        warnings.warn(f"{int(s.index.duplicated().sum())} duplicate postcode/month rows; keeping the last")
        s = s[~s.index.duplicated(keep="last")]
    return s.sort_index().to_xarray()
