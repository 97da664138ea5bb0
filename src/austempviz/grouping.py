"""
Month buckets: the filtered records partitioned by canonical month label.
"""

from __future__ import annotations
from typing import Dict
import pandas as pd

from .io import RECORD_COLUMNS
from .timeindex import format_label

MonthBuckets = Dict[str, pd.DataFrame]


def group_by_month(records: pd.DataFrame) -> MonthBuckets:
    """
    Partition `records` into ``{"Jan 2000": <rows for Jan 2000>, ...}``.

    Buckets keep the original row index and row order, keys run in calendar
    order, and months with no rows get no key.
    """
    buckets: MonthBuckets = {}
    if records.empty:
        return buckets
    for (year, month), rows in records.groupby(["Year", "Month"], sort=True):
        buckets[format_label(int(year), int(month))] = rows
    return buckets


def bucket_for(buckets: MonthBuckets, label: str) -> pd.DataFrame:
    """Bucket for `label`, or an empty frame with the record columns."""
    rows = buckets.get(label)
    if rows is None:
        return pd.DataFrame({
            "Postcode": pd.Series(dtype=str),
            "Year": pd.Series(dtype=int),
            "Month": pd.Series(dtype=int),
            "Avg_temp": pd.Series(dtype=float),
        })[RECORD_COLUMNS]
    return rows
