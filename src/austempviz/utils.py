from __future__ import annotations
"""
Utilities.
"""

from pathlib import Path
import inspect
from typing import Iterable, Optional, Tuple
import os
import numpy as np


def file_prefix(path: str) -> str:
    """Stem used in output filenames, e.g. 'monthly_temps' for '.../monthly_temps.csv'."""
    return Path(os.path.normpath(path)).stem


PLOT_SUBDIR_ENV = "AUSTEMPVIZ_PLOT_SUBDIR"


def _plotting_module() -> Optional[str]:
    """Stem of the nearest `austempviz.plots.*` module on the call stack (e.g. 'animate')."""
    for info in inspect.stack():
        mod = inspect.getmodule(info.frame)
        if mod is not None and mod.__name__.startswith("austempviz.plots.") and getattr(mod, "__file__", None):
            return Path(mod.__file__).stem
    return None


def _subfolder() -> Optional[str]:
    # an empty override means "no sub-folder"
    override = os.environ.get(PLOT_SUBDIR_ENV)
    if override is not None:
        return override.strip() or None
    return _plotting_module()


def out_dir(prefix: str, figures_root: str) -> str:
    """
    Folder that exported animations for `prefix` are written to, created on demand.

    Layout is ``<figures_root>/<prefix>/<sub>/``, where ``<sub>`` is the name of
    the exporting module under `austempviz.plots` (GIFs land in ``animate/``).
    Set AUSTEMPVIZ_PLOT_SUBDIR to choose another ``<sub>``, or to an empty string
    to write straight into ``<figures_root>/<prefix>/``.
    """
    sub = _subfolder()
    path = os.path.join(figures_root, prefix, sub) if sub else os.path.join(figures_root, prefix)
    os.makedirs(path, exist_ok=True)
    return path


def robust_clims(a: Iterable[float], q: Tuple[float, float] = (5, 95)) -> tuple[float, float]:
    """
    Robust color limits from percentiles; handles NaNs and constant arrays.
    """
    arr = np.asarray(list(a) if not isinstance(a, np.ndarray) else a, dtype=float).ravel()
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return 0.0, 1.0
    lo, hi = np.nanpercentile(arr, q)
    if lo == hi:
        hi = lo + (abs(lo) if lo != 0 else 1.0)
    return float(lo), float(hi)


def window_tag(start, end) -> str:
    """Filename-safe label for a (year, month) window, e.g. '200001-202406'."""
    return f"{start[0]:04d}{start[1]:02d}-{end[0]:04d}{end[1]:02d}"


def resolve_clim(
    values: Optional[Iterable[float]],
    clim: Optional[Tuple[float, float]],
    robust_q: Tuple[float, float] = (5, 95),
) -> Tuple[float, float]:
    """Explicit `clim` wins; otherwise robust percentiles of `values`."""
    if clim is not None:
        lo, hi = clim
        if lo >= hi:
            raise ValueError(f"clim must be (low, high) with low < high, got {clim}")
        return float(lo), float(hi)
    return robust_clims(values if values is not None else [], robust_q)
