"""Chart capability consumed by the session: viewport bounds and pixel mapping.

The core never touches a plotting library directly. A chart is anything that
reports its current data-space :class:`~dtakit.schema.Viewport` and converts
between data values and pixels on one axis. Pixels are measured from the
left/top edge of the plotting area, as a mouse event would report them.
"""

from __future__ import annotations

from typing import Protocol

from .schema import Viewport


class ChartCapability(Protocol):
    def viewport(self) -> Viewport:
        ...

    def set_viewport(self, viewport: Viewport) -> None:
        ...

    def pixel_for_value(self, axis: str, value: float) -> float:
        ...

    def value_for_pixel(self, axis: str, pixel: float) -> float:
        ...


def check_axis(axis: str) -> None:
    if axis not in ("x", "y"):
        raise ValueError(f"Unknown axis '{axis}'. Expected 'x' or 'y'.")


class LinearChart:
    """Headless chart with linear scales over a fixed pixel area.

    Args:
        viewport: Initial data-space viewport.
        width: Plot area width in pixels.
        height: Plot area height in pixels.
    """

    def __init__(self, viewport: Viewport, width: float = 800.0, height: float = 400.0):
        if width <= 0 or height <= 0:
            raise ValueError("Chart pixel area must be positive.")
        self._viewport = viewport
        self.width = float(width)
        self.height = float(height)

    def viewport(self) -> Viewport:
        return self._viewport

    def set_viewport(self, viewport: Viewport) -> None:
        self._viewport = viewport

    def pixel_for_value(self, axis: str, value: float) -> float:
        check_axis(axis)
        vp = self._viewport
        if axis == "x":
            span = vp.x_max - vp.x_min
            return 0.0 if span == 0 else (value - vp.x_min) / span * self.width
        span = vp.y_max - vp.y_min
        return 0.0 if span == 0 else (vp.y_max - value) / span * self.height

    def value_for_pixel(self, axis: str, pixel: float) -> float:
        check_axis(axis)
        vp = self._viewport
        if axis == "x":
            return vp.x_min + pixel / self.width * (vp.x_max - vp.x_min)
        return vp.y_max - pixel / self.height * (vp.y_max - vp.y_min)

