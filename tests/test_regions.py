# city lookup, pin projection and the pan/zoom state

import pytest

from austempviz.regions import (
    ZoomState,
    city_for_postcode,
    map_extent,
    pins_for,
    project_points,
)


def test_city_lookup():
    assert city_for_postcode("0800").name == "Darwin"
    assert city_for_postcode("2000").name == "Sydney"
    assert city_for_postcode("9999") is None
    assert city_for_postcode(None) is None


def test_project_points_to_mercator():
    xy = project_points([(0.0, 0.0), (151.2093, -33.8688)], "EPSG:3857")
    assert xy.shape == (2, 2)
    assert xy[0, 0] == pytest.approx(0.0, abs=1e-6)
    assert xy[0, 1] == pytest.approx(0.0, abs=1e-6)
    # Sydney is east of Greenwich and south of the equator
    assert xy[1, 0] > 0 and xy[1, 1] < 0


def test_project_points_empty():
    assert project_points([]).shape == (0, 2)


def test_pins_for_selection():
    pins = pins_for(["2000", "7000"], colours=("red", "blue"))
    assert sorted(pins) == [0, 1]
    assert pins[0].city == "Sydney" and pins[0].colour == "red"
    assert pins[1].city == "Hobart" and pins[1].colour == "blue"


def test_pins_skip_unknown_postcodes():
    pins = pins_for(["9999", "3000"])
    assert list(pins) == [1]
    assert pins[1].city == "Melbourne"
    assert pins_for([None, None]) == {}


def test_zoom_is_clamped():
    z = ZoomState()
    for _ in range(20):
        z = z.zoom_by(1.2)
    assert z.scale == 8.0
    for _ in range(20):
        z = z.zoom_by(0.8)
    assert z.scale == 1.0
    with pytest.raises(ValueError):
        z.zoom_by(0)


def test_zoom_limits_and_reset():
    extent = (0.0, 0.0, 100.0, 50.0)
    z = ZoomState()
    assert z.limits(extent) == ((0.0, 100.0), (0.0, 50.0))
    z2 = z.zoom_by(2.0)
    assert z2.limits(extent) == ((25.0, 75.0), (12.5, 37.5))
    panned = z2.pan_by(10.0, -5.0, extent)
    assert panned.limits(extent) == ((35.0, 85.0), (7.5, 32.5))
    assert panned.reset() == ZoomState()


def test_map_extent_pads_bounds(regions):
    xmin, ymin, xmax, ymax = map_extent(regions)
    bxmin, bymin, bxmax, bymax = regions.total_bounds
    assert xmin < bxmin and ymin < bymin
    assert xmax > bxmax and ymax > bymax
