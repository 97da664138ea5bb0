from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
import os
import pandas as pd
import geopandas as gpd
import matplotlib.animation as animation
from matplotlib.figure import Figure

from ..config import ViewerConfig
from ..dispatch import derive_frame
from ..grouping import group_by_month
from ..io import filter_window, to_cube
from ..regions import pins_for
from ..timeindex import offset_to_year_month
from ..utils import out_dir, resolve_clim, robust_clims, window_tag
from .scene import TemperatureScene


def _vprint(verbose: bool, *args, **kwargs):
    if verbose:
        print(*args, **kwargs)


def _frame_offsets(total: int, offsets: Optional[Sequence[int]], every: int) -> List[int]:
    if offsets is not None:
        out = [int(o) for o in offsets]
        bad = [o for o in out if not 0 <= o < total]
        if bad:
            raise ValueError(f"offsets outside [0, {total - 1}]: {bad}")
        if not out:
            raise ValueError("offsets is empty; nothing to animate.")
        return out
    if every < 1:
        raise ValueError("every must be >= 1")
    return list(range(0, total, every))


def animate_choropleth(
    regions: gpd.GeoDataFrame,
    records: pd.DataFrame,
    *,
    config: Optional[ViewerConfig] = None,
    postcodes: Optional[Sequence[str]] = None,
    offsets: Optional[Sequence[int]] = None,
    every: int = 1,
    clim: Optional[Tuple[float, float]] = None,
    robust: bool = False,
    robust_q: Tuple[float, float] = (5, 95),
    prefix: str = "temperatures",
    figures_root: str = "",
    interval_ms: Optional[int] = None,
    fps: int = 4,
    dpi: int = 100,
    verbose: bool = True,
) -> str:
    """
    Render the monthly choropleth + comparison traces to an animated GIF.

    Frames are month offsets from ``config.start``: every `every`-th month of
    the window, or exactly `offsets` when given. Each frame goes through the
    same `derive_frame` / `TemperatureScene.draw` path as the live viewer.

    Colour limits
    -------------
    Priority: `clim` > robust percentiles of the windowed Avg_temp (when
    `robust=True`) > ``(config.min_temp, config.max_temp)``.

    Parameters
    ----------
    regions : GeoDataFrame
        Prepared boundaries (see `io.prepare_boundaries`) in ``config.map_crs``.
    records : DataFrame
        Coerced records (see `io.load_records`).
    postcodes : sequence of str, optional
        Up to two postcodes to trace; defaults to ``config.default_postcodes``.
    prefix : str, default "temperatures"
        Filename stem and output sub-folder under `figures_root`.
    figures_root : str, default ""
        Output root; if empty, the current working directory is used.
    interval_ms : int, optional
        Delay between frames used by `FuncAnimation`; defaults to ``config.interval_ms``.
    fps : int, default 4
        Frame rate for writing the GIF with Pillow.

    Returns
    -------
    str
        Full path of the saved GIF.
    """
    cfg = config or ViewerConfig()
    filtered = filter_window(records, cfg.start, cfg.end)
    if filtered.empty:
        raise ValueError(f"No records between {cfg.start} and {cfg.end}; nothing to animate.")
    buckets = group_by_month(filtered)
    cube = to_cube(filtered)
    selection = list(postcodes) if postcodes is not None else list(cfg.default_postcodes)
    frames = _frame_offsets(cfg.total_months, offsets, every)

    if clim is None and robust:
        clim_eff = robust_clims(filtered["Avg_temp"].to_numpy(), robust_q)
    else:
        clim_eff = resolve_clim(None, clim if clim is not None else (cfg.min_temp, cfg.max_temp))
    _vprint(verbose, f"[animate] {len(frames)} frames, colour limits {clim_eff[0]:.1f}..{clim_eff[1]:.1f} °C")

    fig = Figure(figsize=cfg.figsize)
    scene = TemperatureScene(regions, config=cfg, fig=fig, clim=clim_eff)
    pins = pins_for(selection, cfg.map_crs, cfg.trace_colours)

    def update(i):
        frame = derive_frame(frames[i], buckets, cube, selection, cfg.start)
        scene.draw(frame, pins)
        return []

    ani = animation.FuncAnimation(
        fig, update, frames=len(frames),
        interval=interval_ms if interval_ms is not None else cfg.interval_ms, blit=False,
    )

    first = offset_to_year_month(frames[0], cfg.start)
    last = offset_to_year_month(frames[-1], cfg.start)
    sel_tag = "-".join(pc for pc in selection if pc) or "none"
    fname = f"{prefix}__Choropleth__{sel_tag}__{window_tag(first, last)}__Anim.gif"
    outdir = out_dir(prefix, figures_root) if figures_root else os.getcwd()
    path = os.path.join(outdir, fname)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    ani.save(path, writer=animation.PillowWriter(fps=fps), dpi=dpi)
    _vprint(verbose, f"[animate] saved: {path}")
    return path
