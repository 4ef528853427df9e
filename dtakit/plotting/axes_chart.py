"""Chart capability backed by a live matplotlib axes."""

from __future__ import annotations

from matplotlib.axes import Axes

from ..chart import check_axis
from ..schema import Viewport


class AxesChart:
    """Adapter exposing a matplotlib :class:`~matplotlib.axes.Axes` as a chart.

    Pixels are measured from the left/top edge of the axes bounding box, so
    values line up with :class:`dtakit.chart.LinearChart`.
    """

    def __init__(self, ax: Axes):
        self.ax = ax

    def viewport(self) -> Viewport:
        x0, x1 = self.ax.get_xlim()
        y0, y1 = self.ax.get_ylim()
        return Viewport(float(x0), float(x1), float(y0), float(y1))

    def set_viewport(self, viewport: Viewport) -> None:
        self.ax.set_xlim(viewport.x_min, viewport.x_max)
        self.ax.set_ylim(viewport.y_min, viewport.y_max)

    def pixel_for_value(self, axis: str, value: float) -> float:
        check_axis(axis)
        bbox = self.ax.bbox
        if axis == "x":
            y_ref = self.ax.get_ylim()[0]
            disp_x, _ = self.ax.transData.transform((value, y_ref))
            return float(disp_x - bbox.x0)
        x_ref = self.ax.get_xlim()[0]
        _, disp_y = self.ax.transData.transform((x_ref, value))
        return float(bbox.y1 - disp_y)

    def value_for_pixel(self, axis: str, pixel: float) -> float:
        check_axis(axis)
        bbox = self.ax.bbox
        inverse = self.ax.transData.inverted()
        if axis == "x":
            value, _ = inverse.transform((bbox.x0 + pixel, bbox.y0))
            return float(value)
        _, value = inverse.transform((bbox.x0, bbox.y1 - pixel))
        return float(value)
