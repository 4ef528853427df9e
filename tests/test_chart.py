import os
import subprocess
import sys

import matplotlib.pyplot as plt
import pytest

from dtakit.chart import LinearChart
from dtakit.plotting import AxesChart
from dtakit.schema import Viewport

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def test_linear_chart_mapping():
    chart = LinearChart(Viewport(600.0, 620.0, 0.0, 10.0), width=400, height=200)
    assert chart.pixel_for_value("x", 610.0) == pytest.approx(200.0)
    assert chart.pixel_for_value("y", 10.0) == pytest.approx(0.0)
    assert chart.pixel_for_value("y", 0.0) == pytest.approx(200.0)
    assert chart.value_for_pixel("x", 100.0) == pytest.approx(605.0)
    assert chart.value_for_pixel("y", 50.0) == pytest.approx(7.5)
    with pytest.raises(ValueError):
        chart.pixel_for_value("z", 1.0)


def test_linear_chart_zero_span_maps_to_origin():
    chart = LinearChart(Viewport(610.0, 610.0, 1.0, 1.0))
    assert chart.pixel_for_value("x", 610.0) == 0.0
    assert chart.pixel_for_value("y", 1.0) == 0.0


def test_axes_chart_follows_axis_limits():
    fig, ax = plt.subplots(figsize=(4, 3), dpi=100)
    try:
        chart = AxesChart(ax)
        chart.set_viewport(Viewport(600.0, 620.0, -1.0, 1.0))
        assert chart.viewport() == Viewport(600.0, 620.0, -1.0, 1.0)

        assert chart.pixel_for_value("x", 600.0) == pytest.approx(0.0, abs=1e-6)
        assert chart.pixel_for_value("x", 620.0) == pytest.approx(ax.bbox.width)
        assert chart.pixel_for_value("y", 1.0) == pytest.approx(0.0, abs=1e-6)
        assert chart.value_for_pixel("x", ax.bbox.width / 2) == pytest.approx(610.0)
        assert chart.value_for_pixel("y", ax.bbox.height) == pytest.approx(-1.0)
    finally:
        plt.close(fig)


def test_core_import_does_not_load_matplotlib():
    code = (
        "import sys; import dtakit; "
        "sys.exit(1 if any(m.startswith('matplotlib') for m in sys.modules) else 0)"
    )
    result = subprocess.run([sys.executable, "-c", code], cwd=ROOT)
    assert result.returncode == 0
