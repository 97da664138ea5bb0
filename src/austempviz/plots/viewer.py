from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import pandas as pd
import geopandas as gpd

import matplotlib.pyplot as plt
from matplotlib.widgets import Button, RadioButtons, Slider

from ..config import ViewerConfig, ZOOM_IN_FACTOR, ZOOM_OUT_FACTOR
from ..cursor import AnimationCursor, TimerFactory
from ..dispatch import Frame, derive_frame
from ..grouping import group_by_month
from ..io import DataLoadError, filter_window, load_boundaries, load_records, to_cube
from ..regions import CITIES, ZoomState, city_for_postcode, pins_for
from ..timeindex import format_label
from .scene import TemperatureScene


# --- helpers ---------------------------------------------------------------
def _vprint(verbose: bool, *args, **kwargs):
    if verbose:
        print(*args, **kwargs)


_ZOOM_STEPS = 5


@dataclass
class ViewerState:
    """Everything the controller mutates. One instance per viewer."""
    cursor: AnimationCursor
    selection: List[Optional[str]]
    zoom: ZoomState
    frame: Optional[Frame] = None
    drag: Optional[Tuple[float, float, ZoomState, float, float]] = field(default=None, repr=False)


class TemperatureViewer:
    """
    Interactive choropleth + comparison plot driven by one month cursor.

    Controls
    --------
    - Play/Pause, Reset time buttons -> cursor.toggle() / cursor.reset()
    - month slider -> cursor.scrub()
    - Zoom in / Zoom out / Reset zoom buttons, mouse drag pans the map
    - two city selectors -> comparison traces and pins

    Each cursor change re-derives the frame and redraws the scene.

    Parameters
    ----------
    regions : GeoDataFrame
        Output of `io.load_boundaries` / `io.prepare_boundaries`, already in
        `config.map_crs`.
    records : DataFrame
        Output of `io.load_records`; filtered to the configured window here.
    timer_factory : callable, optional
        ``interval_ms -> timer``; defaults to ``fig.canvas.new_timer``.
    """

    def __init__(
        self,
        regions: gpd.GeoDataFrame,
        records: pd.DataFrame,
        *,
        config: Optional[ViewerConfig] = None,
        fig: Optional[plt.Figure] = None,
        timer_factory: Optional[TimerFactory] = None,
        verbose: bool = False,
    ):
        self.config = cfg = config or ViewerConfig()
        self.verbose = verbose

        filtered = filter_window(records, cfg.start, cfg.end)
        self.buckets = group_by_month(filtered)
        self.cube = to_cube(filtered)
        _vprint(verbose, f"[viewer] {len(filtered)} records in {len(self.buckets)} monthly buckets "
                         f"({len(records) - len(filtered)} outside the window)")

        self.scene = TemperatureScene(regions, config=cfg, fig=fig)
        self.fig = self.scene.fig
        if timer_factory is None:
            canvas = self.fig.canvas

            def timer_factory(ms: int):
                return canvas.new_timer(interval=ms)

        self._timer_factory = timer_factory
        self._view_timer = None
        self._syncing = False

        cursor = AnimationCursor(
            cfg.total_months,
            timer_factory=timer_factory,
            interval_ms=cfg.interval_ms,
            end_policy=cfg.end_policy,
            verbose=verbose,
        )
        self.state = ViewerState(
            cursor=cursor,
            selection=list(cfg.default_postcodes[:2]),
            zoom=ZoomState(scale_extent=cfg.zoom_extent),
        )
        self._build_widgets()
        cursor.subscribe(self._on_cursor)
        self._connect_mouse()
        self.render()

    # --- convenience -----------------------------------------------------
    @property
    def cursor(self) -> AnimationCursor:
        return self.state.cursor

    @property
    def frame(self) -> Optional[Frame]:
        return self.state.frame

    # --- widgets ---------------------------------------------------------
    def _build_widgets(self) -> None:
        fig, cfg = self.fig, self.config
        ax_slider = fig.add_axes([0.06, 0.075, 0.44, 0.03])
        # a one-month window still needs a non-degenerate axis
        self.slider = Slider(
            ax_slider, "", 0, max(cfg.total_months - 1, 1),
            valinit=0, valstep=1, color="0.6",
        )
        self.slider.valtext.set_visible(False)
        if cfg.total_months == 1:
            self.slider.set_active(False)
        self.slider.on_changed(self._on_slide)

        self.btn_play = Button(fig.add_axes([0.06, 0.01, 0.08, 0.045]), "Play")
        self.btn_reset = Button(fig.add_axes([0.15, 0.01, 0.10, 0.045]), "Reset time")
        self.btn_zoom_in = Button(fig.add_axes([0.32, 0.01, 0.05, 0.045]), "+")
        self.btn_zoom_out = Button(fig.add_axes([0.38, 0.01, 0.05, 0.045]), "−")
        self.btn_zoom_reset = Button(fig.add_axes([0.44, 0.01, 0.08, 0.045]), "Reset zoom")
        self.btn_play.on_clicked(lambda _e: self.cursor.toggle())
        self.btn_reset.on_clicked(lambda _e: self.cursor.reset())
        self.btn_zoom_in.on_clicked(lambda _e: self.zoom(ZOOM_IN_FACTOR))
        self.btn_zoom_out.on_clicked(lambda _e: self.zoom(ZOOM_OUT_FACTOR))
        self.btn_zoom_reset.on_clicked(lambda _e: self.reset_zoom())

        names = [c.name for c in CITIES]
        self.city_selectors: List[RadioButtons] = []
        for slot, x0 in enumerate((0.65, 0.82)):
            ax = fig.add_axes([x0, 0.02, 0.14, 0.24])
            ax.set_title(f"City {slot + 1}", fontsize=9, color=cfg.trace_colours[slot % len(cfg.trace_colours)])
            city = city_for_postcode(self.state.selection[slot]) if slot < len(self.state.selection) else None
            active = names.index(city.name) if city is not None else 0
            radio = RadioButtons(ax, names, active=active)
            radio.on_clicked(lambda label, slot=slot: self._on_city(slot, label))
            self.city_selectors.append(radio)

    def _connect_mouse(self) -> None:
        canvas = self.fig.canvas
        self._cids = [
            canvas.mpl_connect("motion_notify_event", self._on_motion),
            canvas.mpl_connect("button_press_event", self._on_press),
            canvas.mpl_connect("button_release_event", self._on_release),
        ]

    # --- event handlers --------------------------------------------------
    def _on_cursor(self, _cursor: AnimationCursor) -> None:
        self.render()

    def _on_slide(self, val) -> None:
        if self._syncing:
            return
        self.cursor.scrub(int(round(val)))

    def _on_city(self, slot: int, label: str) -> None:
        city = next((c for c in CITIES if c.name == label), None)
        self.select(slot, city.postcode if city is not None else None)

    def _on_press(self, event) -> None:
        if event.inaxes is not self.scene.ax_map or event.button != 1:
            return
        toolbar = getattr(self.fig.canvas, "toolbar", None)
        if toolbar is not None and getattr(toolbar, "mode", ""):
            return
        ax = self.scene.ax_map
        x0, x1 = ax.get_xlim()
        y0, y1 = ax.get_ylim()
        # data units per pixel at press time
        dpx = (x1 - x0) / max(ax.bbox.width, 1.0)
        dpy = (y1 - y0) / max(ax.bbox.height, 1.0)
        self.state.drag = (event.x, event.y, self.state.zoom, dpx, dpy)

    def _on_release(self, _event) -> None:
        self.state.drag = None

    def _on_motion(self, event) -> None:
        if self.state.drag is not None and event.x is not None:
            px, py, zoom0, dpx, dpy = self.state.drag
            self.state.zoom = zoom0.pan_by(-(event.x - px) * dpx, -(event.y - py) * dpy, self.scene.extent)
            self.scene.apply_view(self.state.zoom)
            self.fig.canvas.draw_idle()
            return
        if self.scene.show_tooltip(event):
            self.fig.canvas.draw_idle()

    # --- state transitions not owned by the cursor -----------------------
    def select(self, slot: int, postcode: Optional[str]) -> Frame:
        """Choose the postcode for comparison slot 0 or 1 and redraw."""
        if slot not in (0, 1):
            raise ValueError(f"slot must be 0 or 1, got {slot}")
        while len(self.state.selection) <= slot:
            self.state.selection.append(None)
        self.state.selection[slot] = None if postcode is None else str(postcode)
        _vprint(self.verbose, f"[viewer] city {slot + 1} -> {postcode}")
        return self.render()

    def zoom(self, factor: float) -> ZoomState:
        self.state.zoom = self.state.zoom.zoom_by(factor)
        self._transition_view(self.state.zoom)
        return self.state.zoom

    def reset_zoom(self) -> ZoomState:
        self.state.zoom = self.state.zoom.reset()
        self._transition_view(self.state.zoom)
        return self.state.zoom

    def _transition_view(self, target: ZoomState) -> None:
        """Ease the map limits to `target` over config.transition_ms."""
        if self._view_timer is not None:
            self._view_timer.stop()
            self._view_timer = None
        ax = self.scene.ax_map
        (tx0, tx1), (ty0, ty1) = target.limits(self.scene.extent)
        if self.config.transition_ms <= 0:
            self.scene.apply_view(target)
            self.fig.canvas.draw_idle()
            return

        (sx0, sx1), (sy0, sy1) = ax.get_xlim(), ax.get_ylim()
        step = [0]
        timer = self._timer_factory(max(self.config.transition_ms // _ZOOM_STEPS, 1))

        def _advance():
            step[0] += 1
            f = min(step[0] / _ZOOM_STEPS, 1.0)
            ax.set_xlim(sx0 + (tx0 - sx0) * f, sx1 + (tx1 - sx1) * f)
            ax.set_ylim(sy0 + (ty0 - sy0) * f, sy1 + (ty1 - sy1) * f)
            self.fig.canvas.draw_idle()
            if f >= 1.0:
                timer.stop()
                timer.remove_callback(_advance)
                if self._view_timer is timer:
                    self._view_timer = None

        timer.add_callback(_advance)
        self._view_timer = timer
        timer.start()

    # --- render ----------------------------------------------------------
    def render(self) -> Frame:
        """Derive the frame for the current offset and push it to every view."""
        cfg = self.config
        frame = derive_frame(
            self.cursor.offset, self.buckets, self.cube, self.state.selection, cfg.start,
        )
        pins = pins_for(self.state.selection, cfg.map_crs, cfg.trace_colours)
        self.scene.draw(frame, pins)

        self._syncing = True
        try:
            self.slider.set_val(frame.offset)
        finally:
            self._syncing = False
        self.slider.poly.set_facecolor(frame.slider_colour)
        self.btn_play.label.set_text("Pause" if self.cursor.running else "Play")

        self.state.frame = frame
        self.fig.canvas.draw_idle()
        return frame

    def close(self) -> None:
        self.cursor.pause()
        if self._view_timer is not None:
            self._view_timer.stop()
            self._view_timer = None
        for cid in self._cids:
            self.fig.canvas.mpl_disconnect(cid)
        plt.close(self.fig)


def launch(
    boundaries_path: str,
    records_path: str,
    *,
    config: Optional[ViewerConfig] = None,
    show: bool = True,
    verbose: bool = True,
) -> TemperatureViewer:
    """
    Open the viewer for a boundary file and a record table.

    The figure shows a loading indicator until both files are in. If either
    load fails the indicator stays up and `DataLoadError` propagates.
    """
    cfg = config or ViewerConfig()
    _vprint(verbose, f"[viewer] The period is from {format_label(*cfg.start)} to {format_label(*cfg.end)} "
                     f"- spanning a total of {cfg.total_months} months.")
    fig = plt.figure(figsize=cfg.figsize)
    loading = fig.text(
        0.5, 0.5, "Loading data…", ha="center", va="center", fontsize=16,
        bbox=dict(boxstyle="round", fc="white", alpha=0.95),
    )
    fig.canvas.draw_idle()
    try:
        regions = load_boundaries(boundaries_path, postcode_field=cfg.postcode_field, crs=cfg.map_crs)
        records = load_records(records_path)
    except DataLoadError as e:
        _vprint(verbose, f"[viewer] load failed: {e}")
        if show:
            plt.show()
        raise

    _vprint(verbose, f"[viewer] loaded {len(regions)} region polygons, {len(records)} records")
    viewer = TemperatureViewer(regions, records, config=cfg, fig=fig, verbose=verbose)
    loading.set_visible(False)
    if show:
        plt.show()
    return viewer
