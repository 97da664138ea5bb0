# GIF export goes through the same frame derivation and scene as the viewer

import os

import pytest

from austempviz.config import ViewerConfig, YearMonth
from austempviz.plots.animate import animate_choropleth


def test_animate_writes_gif(tmp_path, monkeypatch, regions, records, small_config):
    monkeypatch.setenv("AUSTEMPVIZ_PLOT_SUBDIR", "")
    path = animate_choropleth(
        regions, records, config=small_config, offsets=[0, 1, 3],
        prefix="demo", figures_root=str(tmp_path), dpi=40, verbose=False,
    )
    assert os.path.exists(path)
    assert os.path.dirname(path) == os.path.join(str(tmp_path), "demo")
    assert os.path.basename(path) == "demo__Choropleth__2000-3000__200001-200004__Anim.gif"


def test_animate_default_subfolder(tmp_path, monkeypatch, regions, records):
    monkeypatch.delenv("AUSTEMPVIZ_PLOT_SUBDIR", raising=False)
    cfg = ViewerConfig(start=YearMonth(2000, 1), end=YearMonth(2000, 2))
    path = animate_choropleth(
        regions, records, config=cfg, postcodes=["4000"], robust=True,
        prefix="demo", figures_root=str(tmp_path), dpi=40, verbose=False,
    )
    # output lands in a folder named after the plotting module
    assert os.path.basename(os.path.dirname(path)) == "animate"
    assert "__4000__" in os.path.basename(path)


def test_animate_rejects_bad_offsets(regions, records, small_config):
    with pytest.raises(ValueError):
        animate_choropleth(regions, records, config=small_config, offsets=[0, 12], verbose=False)
    with pytest.raises(ValueError):
        animate_choropleth(regions, records, config=small_config, every=0, verbose=False)


def test_animate_empty_window(regions, records):
    cfg = ViewerConfig(start=YearMonth(2010, 1), end=YearMonth(2010, 6))
    with pytest.raises(ValueError, match="No records"):
        animate_choropleth(regions, records, config=cfg, verbose=False)
