# output folders for exported animations and colour-limit helpers

import os

import numpy as np
import pytest

from austempviz.utils import file_prefix, out_dir, resolve_clim, robust_clims, window_tag


def test_out_dir_override(tmp_path, monkeypatch):
    monkeypatch.setenv("AUSTEMPVIZ_PLOT_SUBDIR", "gifs")
    path = out_dir("temps", str(tmp_path))
    assert path == os.path.join(str(tmp_path), "temps", "gifs")
    assert os.path.isdir(path)


def test_out_dir_empty_override_disables_subfolder(tmp_path, monkeypatch):
    monkeypatch.setenv("AUSTEMPVIZ_PLOT_SUBDIR", "  ")
    assert out_dir("temps", str(tmp_path)) == os.path.join(str(tmp_path), "temps")


def test_out_dir_outside_plots_has_no_subfolder(tmp_path, monkeypatch):
    monkeypatch.delenv("AUSTEMPVIZ_PLOT_SUBDIR", raising=False)
    assert out_dir("temps", str(tmp_path)) == os.path.join(str(tmp_path), "temps")


def test_file_prefix_and_window_tag():
    assert file_prefix("data/monthly_temps.csv") == "monthly_temps"
    assert window_tag((2000, 1), (2024, 6)) == "200001-202406"


def test_clim_helpers():
    assert robust_clims([np.nan, 5.0, 5.0]) == (5.0, 10.0)
    assert robust_clims([]) == (0.0, 1.0)
    assert resolve_clim(None, (0, 35)) == (0.0, 35.0)
    with pytest.raises(ValueError):
        resolve_clim(None, (10, 5))
