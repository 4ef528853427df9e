"""Keep the trace and derivative viewports X-synchronized and Y-autoscaled.

Both charts share one temperature axis. Whenever the main chart is panned or
zoomed, its X bounds are copied to the derivative chart and each chart's Y
bounds are recomputed from the points of its own series that fall inside the
new X range. Recomputation always starts from the stored point arrays, so
repeated gestures cannot accumulate drift.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from .config import CONFIG, AnalysisConfig
from .schema import Viewport

logger = logging.getLogger(__name__)


def _xy_arrays(points: Sequence) -> Tuple[np.ndarray, np.ndarray]:
    if len(points) == 0:
        empty = np.empty(0, dtype=float)
        return empty, empty
    arr = np.asarray([(p[0], p[1]) for p in points], dtype=float)
    return arr[:, 0], arr[:, 1]


def visible_y_range(
    points: Sequence,
    x_min: float,
    x_max: float,
    padding_percent: float = CONFIG.chart_padding_percent,
) -> Optional[Tuple[float, float]]:
    """Padded Y range of the points whose ``x`` lies in ``[x_min, x_max]``.

    Returns:
        tuple[float, float] | None: ``(min - pad, max + pad)`` with
        ``pad = (max - min) * padding_percent``, or ``None`` when nothing is
        visible or every visible point has the same ``y``.
    """
    xs, ys = _xy_arrays(points)
    mask = (xs >= x_min) & (xs <= x_max)
    if not np.any(mask):
        return None

    visible = ys[mask]
    lo = float(np.min(visible))
    hi = float(np.max(visible))
    if not hi > lo:
        return None

    pad = (hi - lo) * padding_percent
    return lo - pad, hi + pad


def rescale_y(
    viewport: Viewport,
    points: Sequence,
    config: AnalysisConfig = CONFIG,
) -> Viewport:
    """Autoscale ``viewport``'s Y bounds to the points inside its X bounds.

    The previous Y bounds are kept when no point is visible or the visible
    points are flat.
    """
    y_range = visible_y_range(
        points, viewport.x_min, viewport.x_max, config.chart_padding_percent
    )
    if y_range is None:
        logger.debug(
            "No Y rescale for X range [%.3f, %.3f]; keeping previous bounds",
            viewport.x_min,
            viewport.x_max,
        )
        return viewport
    return viewport.with_y(*y_range)


def sync_viewports(
    main: Viewport,
    derivative: Viewport,
    x_min: float,
    x_max: float,
    curve_points: Sequence,
    derivative_points: Sequence,
    config: AnalysisConfig = CONFIG,
) -> Tuple[Viewport, Viewport]:
    """Propagate new X bounds to both charts and autoscale each Y axis.

    Args:
        main: Current main-chart viewport.
        derivative: Current derivative-chart viewport.
        x_min: New lower X bound reported by the main chart.
        x_max: New upper X bound reported by the main chart.
        curve_points: Stored main-curve points; tangent segments are not
            included.
        derivative_points: Stored derivative points.
        config: Supplies ``chart_padding_percent``.

    Returns:
        tuple[Viewport, Viewport]: Updated ``(main, derivative)`` viewports.
    """
    new_main = rescale_y(main.with_x(x_min, x_max), curve_points, config)
    new_derivative = rescale_y(
        derivative.with_x(x_min, x_max), derivative_points, config
    )
    return new_main, new_derivative


def full_viewport(points: Sequence, config: AnalysisConfig = CONFIG) -> Viewport:
    """Viewport covering every point, with padded Y bounds.

    A flat series gets a unit-high band around its value so the viewport
    still has area. Used when a dataset is loaded or the zoom is reset.

    Raises:
        ValueError: If ``points`` is empty.
    """
    xs, ys = _xy_arrays(points)
    if xs.size == 0:
        raise ValueError("Cannot build a viewport for an empty series.")

    x_lo, x_hi = float(np.min(xs)), float(np.max(xs))
    y_range = visible_y_range(points, x_lo, x_hi, config.chart_padding_percent)
    if y_range is None:
        y = float(ys[0])
        y_range = (y - 0.5, y + 0.5)
    return Viewport(x_lo, x_hi, y_range[0], y_range[1])
