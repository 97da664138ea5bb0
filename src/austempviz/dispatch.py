"""
Frame derivation: everything the views need for one month offset.

`derive_frame` is a pure function of (offset, buckets, cube, selection,
start). Drawing code consumes the returned `Frame` and never reaches back
into the record set.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Mapping, Optional, Sequence, Tuple
import math
import numpy as np
import pandas as pd
import xarray as xr

from .config import START, YearMonth
from .grouping import MonthBuckets, bucket_for
from .timeindex import (
    format_label, month_start, offset_to_year_month,
    season_of, slider_class, slider_colour,
)


@dataclass(frozen=True, eq=False)
class Trace:
    """Ordered (date, Avg_temp) points for one postcode."""
    postcode: str
    dates: pd.DatetimeIndex
    temps: np.ndarray

    def __len__(self) -> int:
        return len(self.temps)

    @property
    def empty(self) -> bool:
        return len(self.temps) == 0

    def points(self) -> list:
        return list(zip(self.dates, self.temps.tolist()))


@dataclass(frozen=True, eq=False)
class Frame:
    offset: int
    year: int
    month: int
    label: str
    bucket: pd.DataFrame
    average: Optional[float]
    temperatures: Dict[str, float]
    traces: Tuple[Trace, ...]
    start_date: pd.Timestamp
    end_date: pd.Timestamp
    season: str
    slider_class: str
    slider_colour: str

    def temperature_for(self, postcode: str) -> float:
        """Exact value for `postcode`, else the fallback average, else NaN."""
        temp = self.temperatures.get(postcode)
        if temp is not None:
            return temp
        return self.average if self.average is not None else math.nan


@dataclass(frozen=True)
class Reconciliation:
    added: Tuple[Hashable, ...]
    removed: Tuple[Hashable, ...]
    updated: Tuple[Hashable, ...]


def fallback_average(bucket: pd.DataFrame) -> Optional[float]:
    """Mean Avg_temp of the bucket; None when there is nothing to average."""
    if bucket.empty:
        return None
    avg = bucket["Avg_temp"].mean()
    return None if pd.isna(avg) else float(avg)


def postcode_trace(
    cube: xr.DataArray,
    postcode: Optional[str],
    start_date: pd.Timestamp,
    end_date: pd.Timestamp,
) -> Trace:
    """
    Points for `postcode` from `start_date` through `end_date` inclusive.

    Unknown postcodes (or None) give an empty trace.
    """
    pc = "" if postcode is None else str(postcode)
    if postcode is None or cube.sizes.get("postcode", 0) == 0 or pc not in cube["postcode"].values:
        return Trace(pc, pd.DatetimeIndex([]), np.array([], dtype=float))
    series = cube.sel(postcode=pc).sel(time=slice(start_date, end_date)).dropna("time")
    return Trace(
        pc,
        pd.DatetimeIndex(series["time"].values),
        np.asarray(series.values, dtype=float),
    )


def derive_frame(
    offset: int,
    buckets: MonthBuckets,
    cube: xr.DataArray,
    selection: Sequence[Optional[str]] = (),
    start: YearMonth = START,
) -> Frame:
    """
    Resolve the month for `offset`, its bucket, the fallback average, the
    per-postcode temperatures and up to two comparison traces.
    """
    year, month = offset_to_year_month(offset, start)
    label = format_label(year, month)
    bucket = bucket_for(buckets, label)
    temps = dict(zip(bucket["Postcode"].astype(str), bucket["Avg_temp"].astype(float)))

    start_date = month_start(start.year, start.month)
    end_date = month_start(year, month)
    traces = tuple(postcode_trace(cube, pc, start_date, end_date) for pc in list(selection)[:2])

    return Frame(
        offset=int(offset),
        year=year,
        month=month,
        label=label,
        bucket=bucket,
        average=fallback_average(bucket),
        temperatures=temps,
        traces=traces,
        start_date=start_date,
        end_date=end_date,
        season=season_of(month),
        slider_class=slider_class(month),
        slider_colour=slider_colour(month),
    )


def region_temperatures(region_codes: Iterable[str], frame: Frame) -> np.ndarray:
    """Temperature per region in the given order; NaN where nothing applies."""
    return np.array([frame.temperature_for(str(pc)) for pc in region_codes], dtype=float)


def describe_region(postcode: str, frame: Frame) -> str:
    """Tooltip text for a region."""
    temp = frame.temperature_for(str(postcode))
    shown = "n/a" if math.isnan(temp) else f"{temp:.1f}°C"
    return f"Postcode: {postcode}\nTemperature: {shown}"


def reconcile(current: Mapping[Hashable, object], desired: Mapping[Hashable, object]) -> Reconciliation:
    """
    Diff two keyed entity sets.

    Keys only in `desired` are added, keys only in `current` removed, and
    shared keys whose value changed are updated. Output keeps the key order
    of the mapping each key came from.
    """
    added = tuple(k for k in desired if k not in current)
    removed = tuple(k for k in current if k not in desired)
    updated = tuple(k for k in desired if k in current and current[k] != desired[k])
    return Reconciliation(added, removed, updated)
