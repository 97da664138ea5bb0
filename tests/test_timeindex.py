# month offset arithmetic, labels and the slider/season lookups

import numpy as np
import pandas as pd
import pytest

from austempviz.config import ViewerConfig, YearMonth
from austempviz.timeindex import (
    InvalidMonthError,
    format_label,
    in_window,
    month_start,
    months_between,
    offset_to_year_month,
    season_of,
    slider_class,
    slider_colour,
    year_month_to_offset,
)

START = YearMonth(2000, 1)


def test_offset_zero_is_start():
    assert offset_to_year_month(0, START) == (2000, 1)
    assert offset_to_year_month(0, YearMonth(2010, 7)) == (2010, 7)


def test_offset_wraps_years():
    assert offset_to_year_month(11, START) == (2000, 12)
    assert offset_to_year_month(12, START) == (2001, 1)
    # last month of the default window, several years in
    assert offset_to_year_month(293, START) == (2024, 6)
    # a start that is not January crosses the year earlier
    assert offset_to_year_month(2, YearMonth(2000, 11)) == (2001, 1)


def test_offset_is_monotonic():
    months = [offset_to_year_month(i, START) for i in range(300)]
    assert all(a < b for a, b in zip(months, months[1:]))


def test_negative_offset_rejected():
    with pytest.raises(ValueError):
        offset_to_year_month(-1, START)


def test_offset_round_trip_through_inverse():
    for i in (0, 1, 11, 12, 150, 293):
        y, m = offset_to_year_month(i, START)
        assert year_month_to_offset(y, m, START) == i


def test_format_label():
    assert format_label(2000, 1) == "Jan 2000"
    assert format_label(2024, 12) == "Dec 2024"


@pytest.mark.parametrize("month", [0, 13, -1, 1.5])
def test_format_label_rejects_bad_month(month):
    with pytest.raises(InvalidMonthError):
        format_label(2000, month)


def test_invalid_month_is_a_value_error():
    assert issubclass(InvalidMonthError, ValueError)


def test_months_between():
    assert months_between(2000, 1, 2024, 6) == 294
    assert months_between(2000, 1, 2000, 1) == 1
    assert months_between(2000, 11, 2001, 2) == 4


def test_in_window_is_inclusive():
    start, end = YearMonth(2000, 1), YearMonth(2024, 6)
    assert in_window(2000, 1, start, end)
    assert in_window(2024, 6, start, end)
    assert not in_window(1999, 12, start, end)
    assert not in_window(2024, 7, start, end)
    # later month in an earlier year is still inside
    assert in_window(2023, 12, start, end)


def test_month_start():
    assert month_start(2000, 2) == pd.Timestamp("2000-02-01")


def test_seasons_and_slider_lookups():
    assert season_of(1) == "Summer"
    assert season_of(4) == "Autumn"
    assert season_of(7) == "Winter"
    assert season_of(10) == "Spring"
    assert slider_class(3) == "ui-slider-range-Mar"
    assert slider_colour(1).startswith("#")
    with pytest.raises(InvalidMonthError):
        slider_colour(13)


def test_viewer_config_window():
    assert ViewerConfig().total_months == 294
    assert ViewerConfig(start=YearMonth(2000, 1), end=YearMonth(2000, 3)).total_months == 3


def test_viewer_config_rejects_bad_values():
    with pytest.raises(ValueError):
        ViewerConfig(end_policy="bounce")
    with pytest.raises(ValueError):
        ViewerConfig(start=YearMonth(2001, 1), end=YearMonth(2000, 1))
    with pytest.raises(ValueError):
        ViewerConfig(min_temp=10, max_temp=5)


def test_window_helpers_on_arrays():
    years = np.array([1999, 2000, 2024, 2024])
    months = np.array([12, 1, 6, 7])
    assert year_month_to_offset(years, months, START).tolist() == [-1, 0, 293, 294]
    assert in_window(years, months, START, YearMonth(2024, 6)).tolist() == [False, True, True, False]


def test_viewer_config_rejects_unknown_default_city():
    with pytest.raises(ValueError, match="9999"):
        ViewerConfig(default_postcodes=("2000", "9999"))
    assert ViewerConfig(default_postcodes=("0800", "7000")).default_postcodes == ("0800", "7000")
