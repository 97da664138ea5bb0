
from __future__ import annotations
"""
Region helpers: the comparison cities, their map pins, and the pan/zoom
state of the map view.
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence, Tuple
import numpy as np
import geopandas as gpd
from pyproj import Transformer
from shapely.geometry import box

from .config import MAP_CRS, TRACE_COLOURS, ZOOM_EXTENT


@dataclass(frozen=True)
class City:
    postcode: str
    name: str
    lon: float
    lat: float


CITIES: Tuple[City, ...] = (
    City("2000", "Sydney", 151.2093, -33.8688),
    City("3000", "Melbourne", 144.9631, -37.8136),
    City("4000", "Brisbane", 153.0251, -27.4698),
    City("6000", "Perth", 115.8605, -31.9505),
    City("5000", "Adelaide", 138.6007, -34.9285),
    City("2600", "Canberra", 149.1300, -35.2809),
    City("7000", "Hobart", 147.3272, -42.8821),
    City("0800", "Darwin", 130.8456, -12.4634),
)

_BY_POSTCODE: Dict[str, City] = {c.postcode: c for c in CITIES}


def city_for_postcode(postcode: Optional[str]) -> Optional[City]:
    if postcode is None:
        return None
    return _BY_POSTCODE.get(str(postcode))


def project_points(lonlat: Sequence[Tuple[float, float]], crs: str = MAP_CRS) -> np.ndarray:
    """Project (lon, lat) pairs from EPSG:4326 into `crs`; returns an (N, 2) array."""
    pts = np.asarray(lonlat, dtype=float).reshape(-1, 2)
    if pts.size == 0:
        return pts
    tr = Transformer.from_crs("EPSG:4326", crs, always_xy=True)
    x, y = tr.transform(pts[:, 0], pts[:, 1])
    return np.column_stack([np.atleast_1d(x), np.atleast_1d(y)])


@dataclass(frozen=True)
class Pin:
    slot: int
    city: str
    x: float
    y: float
    colour: str


def pins_for(
    selection: Sequence[Optional[str]],
    crs: str = MAP_CRS,
    colours: Sequence[str] = TRACE_COLOURS,
) -> Dict[int, Pin]:
    """
    Pins keyed by selection slot (0, 1). Postcodes that are not one of the
    known cities get no pin.
    """
    cities = [(slot, city_for_postcode(pc)) for slot, pc in enumerate(list(selection)[:2])]
    cities = [(slot, c) for slot, c in cities if c is not None]
    if not cities:
        return {}
    xy = project_points([(c.lon, c.lat) for _, c in cities], crs)
    return {
        slot: Pin(slot, c.name, float(x), float(y), colours[slot % len(colours)])
        for (slot, c), (x, y) in zip(cities, xy)
    }


def map_extent(regions: gpd.GeoDataFrame, pad: float = 0.03) -> Tuple[float, float, float, float]:
    """Padded (xmin, ymin, xmax, ymax) of the region layer."""
    if regions.empty:
        return (0.0, 0.0, 1.0, 1.0)
    xmin, ymin, xmax, ymax = regions.total_bounds
    dx = (xmax - xmin) * pad or 1.0
    dy = (ymax - ymin) * pad or 1.0
    return tuple(box(xmin - dx, ymin - dy, xmax + dx, ymax + dy).bounds)


@dataclass(frozen=True)
class ZoomState:
    """
    Scale and centre of the map view relative to its initial extent.

    `center` is None while the view is centred on the extent.
    """
    scale: float = 1.0
    center: Optional[Tuple[float, float]] = None
    scale_extent: Tuple[float, float] = ZOOM_EXTENT

    def zoom_by(self, factor: float) -> "ZoomState":
        if factor <= 0:
            raise ValueError(f"Zoom factor must be positive, got {factor}")
        lo, hi = self.scale_extent
        return replace(self, scale=float(min(max(self.scale * factor, lo), hi)))

    def pan_by(self, dx: float, dy: float, extent: Tuple[float, float, float, float]) -> "ZoomState":
        cx, cy = self._center(extent)
        return replace(self, center=(cx + dx, cy + dy))

    def reset(self) -> "ZoomState":
        return ZoomState(scale_extent=self.scale_extent)

    def limits(self, extent: Tuple[float, float, float, float]) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """(xlim, ylim) for the axes."""
        xmin, ymin, xmax, ymax = extent
        cx, cy = self._center(extent)
        hw = (xmax - xmin) / 2.0 / self.scale
        hh = (ymax - ymin) / 2.0 / self.scale
        return (cx - hw, cx + hw), (cy - hh, cy + hh)

    def _center(self, extent) -> Tuple[float, float]:
        if self.center is not None:
            return self.center
        xmin, ymin, xmax, ymax = extent
        return ((xmin + xmax) / 2.0, (ymin + ymax) / 2.0)
