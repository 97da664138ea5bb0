# shared fixtures: small synthetic boundaries/records and a controllable timer
# so tests stay headless, fast and deterministic

import matplotlib

matplotlib.use("Agg")

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import MultiPolygon, box

from austempviz.config import ViewerConfig, YearMonth
from austempviz.io import prepare_boundaries


class FakeTimer:
    # same surface as matplotlib's TimerBase; fire() plays the event loop
    def __init__(self, interval):
        self.interval = interval
        self.callbacks = []
        self.started = False
        self.stopped = False

    def add_callback(self, func, *args, **kwargs):
        self.callbacks.append(func)
        return func

    def remove_callback(self, func, *args, **kwargs):
        if func in self.callbacks:
            self.callbacks.remove(func)

    def start(self, interval=None):
        self.started = True
        self.stopped = False

    def stop(self):
        self.started = False
        self.stopped = True

    def fire(self, n=1):
        # deliberately ignores started/stopped: a queued tick may still arrive
        for _ in range(n):
            for cb in list(self.callbacks):
                cb()


class TimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval):
        t = FakeTimer(interval)
        self.timers.append(t)
        return t

    @property
    def last(self):
        return self.timers[-1]


@pytest.fixture
def timers():
    return TimerFactory()


def _rows(postcode, temps, start=(2000, 1)):
    year, month = start
    out = []
    for t in temps:
        out.append({"Postcode": postcode, "Year": year, "Month": month, "Avg_temp": float(t)})
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return out


@pytest.fixture
def records():
    # Sydney and Melbourne for Jan-Mar 2000, Brisbane only in Jan and Mar,
    # nothing at all for Apr 2000; one row outside the window on each side
    rows = (
        _rows("2000", [18.0, 19.0, 17.5])
        + _rows("3000", [14.0, 15.0, 13.0])
        + [{"Postcode": "4000", "Year": 2000, "Month": 1, "Avg_temp": 25.0},
           {"Postcode": "4000", "Year": 2000, "Month": 3, "Avg_temp": 24.0}]
        + _rows("2000", [20.0], start=(2000, 5))
        + [{"Postcode": "2000", "Year": 1999, "Month": 12, "Avg_temp": 21.0},
           {"Postcode": "2000", "Year": 2001, "Month": 1, "Avg_temp": 22.0}]
    )
    return pd.DataFrame(rows, columns=["Postcode", "Year", "Month", "Avg_temp"])


@pytest.fixture
def raw_boundaries():
    # lon/lat squares; 4000 is a two-part multipolygon, 9999 has no records
    return gpd.GeoDataFrame(
        {"POA_CODE": ["2000", "3000", "4000", "9999"]},
        geometry=[
            box(151.0, -34.0, 151.4, -33.7),
            box(144.8, -37.9, 145.1, -37.7),
            MultiPolygon([box(152.9, -27.6, 153.1, -27.4), box(153.2, -27.6, 153.3, -27.5)]),
            box(130.0, -25.0, 131.0, -24.0),
        ],
        crs="EPSG:4326",
    )


@pytest.fixture
def regions(raw_boundaries):
    return prepare_boundaries(raw_boundaries, crs="EPSG:3857")


@pytest.fixture
def small_config():
    return ViewerConfig(start=YearMonth(2000, 1), end=YearMonth(2000, 12), transition_ms=0)
