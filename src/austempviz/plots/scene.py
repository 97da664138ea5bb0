# austempviz/plots/scene.py
from __future__ import annotations

from typing import Dict, Optional, Tuple
import numpy as np
import geopandas as gpd

import matplotlib.pyplot as plt
import matplotlib.dates as mdates
from matplotlib.cm import ScalarMappable
from matplotlib.colors import Normalize
from matplotlib.ticker import FuncFormatter

from ..config import ViewerConfig
from ..dispatch import Frame, describe_region, reconcile, region_temperatures
from ..regions import Pin, ZoomState, city_for_postcode, map_extent
from ..timeindex import format_label


def _month_tick(value, _pos=None) -> str:
    d = mdates.num2date(value)
    return format_label(d.year, d.month)


def _degrees_tick(value, _pos=None) -> str:
    return f"{value:g} °C"


class TemperatureScene:
    """
    The drawn surface: postcode map, colour legend, comparison line plot,
    city pins and the date label.

    Holds matplotlib artists only. `draw(frame, pins)` pushes one derived
    frame onto them; it does not read any cursor or selection state.
    """

    def __init__(
        self,
        regions: gpd.GeoDataFrame,
        *,
        config: Optional[ViewerConfig] = None,
        fig: Optional[plt.Figure] = None,
        clim: Optional[Tuple[float, float]] = None,
        title: str = "Average monthly temperature by postcode",
    ):
        self.config = config or ViewerConfig()
        cfg = self.config
        if regions.empty:
            raise ValueError("No regions to draw")
        self.regions = regions
        self.codes = regions["postcode"].astype(str).to_numpy()
        self.fig = fig if fig is not None else plt.figure(figsize=cfg.figsize)
        self.frame: Optional[Frame] = None

        # --- layout -----------------------------------------------------
        self.ax_map = self.fig.add_axes([0.02, 0.22, 0.52, 0.72])
        self.ax_legend = self.fig.add_axes([0.58, 0.34, 0.012, 0.52])
        self.ax_line = self.fig.add_axes([0.65, 0.34, 0.32, 0.52])

        # --- map ----------------------------------------------------------
        lo, hi = clim if clim is not None else (cfg.min_temp, cfg.max_temp)
        self.norm = Normalize(vmin=lo, vmax=hi)
        self.cmap = plt.get_cmap(cfg.cmap).with_extremes(bad=cfg.missing_colour)
        regions.plot(ax=self.ax_map, color=cfg.missing_colour, edgecolor="white", linewidth=0.1)
        self.collection = self.ax_map.collections[-1]
        if len(self.collection.get_paths()) != len(regions):
            raise ValueError(
                f"Drawn patches ({len(self.collection.get_paths())}) do not match regions ({len(regions)}); "
                "pass boundaries through io.prepare_boundaries first."
            )
        self.collection.set_cmap(self.cmap)
        self.collection.set_norm(self.norm)
        self.collection.set_array(np.ma.masked_invalid(np.full(len(regions), np.nan)))
        self.ax_map.set_axis_off()
        self.ax_map.set_title(title)
        self.extent = map_extent(regions)
        self.apply_view(ZoomState(scale_extent=cfg.zoom_extent))

        # --- legend -------------------------------------------------------
        cbar = self.fig.colorbar(ScalarMappable(norm=self.norm, cmap=self.cmap), cax=self.ax_legend)
        cbar.ax.yaxis.set_ticks_position("left")
        cbar.ax.yaxis.set_major_formatter(FuncFormatter(_degrees_tick))

        # --- line plot ----------------------------------------------------
        self.ax_line.set_ylim(lo, hi)
        self.ax_line.yaxis.set_major_formatter(FuncFormatter(_degrees_tick))
        self.ax_line.xaxis.set_major_locator(mdates.AutoDateLocator(minticks=2, maxticks=7))
        self.ax_line.xaxis.set_major_formatter(FuncFormatter(_month_tick))
        self.ax_line.tick_params(axis="x", labelrotation=40, labelsize=8)
        self.ax_line.grid(True, lw=0.3, alpha=0.5)
        self.lines: Dict[int, plt.Line2D] = {}
        self.line_keys: Dict[int, str] = {}

        # --- pins, labels, tooltip ---------------------------------------
        self.pins: Dict[int, Tuple[Pin, plt.Line2D]] = {}
        self.date_label = self.fig.text(0.28, 0.16, "", ha="center", va="center", fontsize=14)
        self.season_label = self.fig.text(0.28, 0.125, "", ha="center", va="center", fontsize=9, color="0.35")
        self.tooltip = self.ax_map.annotate(
            "", xy=(0, 0), xytext=(10, 10), textcoords="offset points",
            bbox=dict(boxstyle="round", fc="white", alpha=0.9), fontsize=8,
        )
        self.tooltip.set_visible(False)

    # ------------------------------------------------------------------
    def apply_view(self, zoom: ZoomState) -> None:
        xlim, ylim = zoom.limits(self.extent)
        self.ax_map.set_xlim(*xlim)
        self.ax_map.set_ylim(*ylim)

    def draw(self, frame: Frame, pins: Optional[Dict[int, Pin]] = None) -> None:
        values = region_temperatures(self.codes, frame)
        self.collection.set_array(np.ma.masked_invalid(values))
        self._draw_traces(frame)
        if pins is not None:
            self._draw_pins(pins)
        self.date_label.set_text(frame.label)
        self.season_label.set_text(frame.season)
        self.frame = frame

    def _draw_traces(self, frame: Frame) -> None:
        desired = {slot: tr for slot, tr in enumerate(frame.traces)}
        diff = reconcile(self.line_keys, {slot: tr.postcode for slot, tr in desired.items()})
        colours = self.config.trace_colours
        for slot in diff.removed:
            self.lines.pop(slot).remove()
            self.line_keys.pop(slot)
        for slot in diff.added:
            (line,) = self.ax_line.plot([], [], color=colours[slot % len(colours)], lw=2)
            self.lines[slot] = line
        for slot, tr in desired.items():
            self.line_keys[slot] = tr.postcode
            line = self.lines[slot]
            line.set_data(mdates.date2num(tr.dates.to_numpy()), tr.temps)
            city = city_for_postcode(tr.postcode)
            line.set_label(city.name if city is not None else tr.postcode)

        x0 = mdates.date2num(frame.start_date.to_datetime64())
        x1 = mdates.date2num(frame.end_date.to_datetime64())
        if x1 <= x0:
            x1 = x0 + 31
        self.ax_line.set_xlim(x0, x1)
        if self.lines:
            self.ax_line.legend(loc="upper left", fontsize=8, frameon=False)

    def _draw_pins(self, pins: Dict[int, Pin]) -> None:
        current = {slot: pin for slot, (pin, _) in self.pins.items()}
        diff = reconcile(current, pins)
        for slot in diff.removed:
            _, artist = self.pins.pop(slot)
            artist.remove()
        for slot in diff.added:
            pin = pins[slot]
            (artist,) = self.ax_map.plot(
                [pin.x], [pin.y], marker="o", ms=9, color=pin.colour,
                mec="white", mew=1.0, ls="none", zorder=5,
            )
            self.pins[slot] = (pin, artist)
        for slot in diff.updated:
            pin = pins[slot]
            _, artist = self.pins[slot]
            artist.set_data([pin.x], [pin.y])
            artist.set_color(pin.colour)
            self.pins[slot] = (pin, artist)

    # ------------------------------------------------------------------
    def hover_text(self, event) -> Optional[str]:
        """Tooltip text for the pin or region under a mouse event, if any."""
        if event.inaxes is not self.ax_map:
            return None
        for pin, artist in self.pins.values():
            hit, _ = artist.contains(event)
            if hit:
                return pin.city
        if self.frame is None:
            return None
        hit, info = self.collection.contains(event)
        if not hit or len(info.get("ind", [])) == 0:
            return None
        return describe_region(self.codes[int(info["ind"][0])], self.frame)

    def show_tooltip(self, event) -> bool:
        """Update the tooltip for `event`; returns True when it changed."""
        text = self.hover_text(event)
        was_visible = self.tooltip.get_visible()
        if text is None:
            self.tooltip.set_visible(False)
            return was_visible
        self.tooltip.xy = (event.xdata, event.ydata)
        self.tooltip.set_text(text)
        self.tooltip.set_visible(True)
        return True

