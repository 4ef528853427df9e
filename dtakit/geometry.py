"""Tangent construction, viewport clipping, and tangent intersection.

A tangent is the line ``y = slope * (x - x0) + y0`` through a point of the
main curve. Its slope comes from a derivative point: both ``dSignal/dt`` and
``dT/dt`` are known there, so ``dSignal/dT = (dSignal/dt) / (dT/dt)``.

For rendering, the infinite line is cut to the main chart's viewport widened
horizontally by ``tangent_span_percent`` on each side, so the segment always
spans the full visible width whatever the zoom or pan.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from .config import CONFIG, AnalysisConfig
from .errors import GeometryDegenerate
from .schema import (
    CurvePoint,
    DerivativePoint,
    Intersection,
    Point,
    Segment,
    TangentParams,
    Viewport,
)

logger = logging.getLogger(__name__)


def slope_from_derivative_point(point: DerivativePoint) -> Optional[float]:
    """Convert a derivative point into a tangent slope against temperature.

    Returns:
        float | None: ``point.y / point.temp_gradient``, or ``None`` when the
        temperature gradient is zero or the result is not finite.
    """
    grad = float(point.temp_gradient)
    if grad == 0.0 or not math.isfinite(grad):
        return None
    slope = float(point.y) / grad
    return slope if math.isfinite(slope) else None


def nearest_curve_point(curve_points: Sequence[CurvePoint], x: float) -> CurvePoint:
    """Return the curve point whose temperature is closest to ``x``.

    Ties go to the earliest point.

    Raises:
        ValueError: If ``curve_points`` is empty.
    """
    if len(curve_points) == 0:
        raise ValueError("No curve points to anchor a tangent on.")
    xs = np.asarray([p[0] for p in curve_points], dtype=float)
    idx = int(np.argmin(np.abs(xs - float(x))))
    return curve_points[idx]


def tangent_from_derivative_point(
    derivative_point: DerivativePoint, curve_points: Sequence[CurvePoint]
) -> Optional[TangentParams]:
    """Build tangent parameters from a derivative point.

    The anchor is the main-curve point nearest in temperature, so the tangent
    touches the curve the user is reading rather than the derivative curve.
    """
    slope = slope_from_derivative_point(derivative_point)
    if slope is None:
        return None
    anchor = nearest_curve_point(curve_points, derivative_point.x)
    return TangentParams(slope=slope, x0=float(anchor.x), y0=float(anchor.y))


def tangent_equation(params: TangentParams) -> str:
    """Readable form of the line, e.g. ``y = 2.000000 × (T - 610.00) + 16.0000``."""
    return (
        f"y = {params.slope:.6f} × (T - {params.x0:.2f}) + {params.y0:.4f}"
    )


def _dedupe_sorted(candidates: List[Point], tol: float) -> List[Point]:
    unique: List[Point] = []
    for p in candidates:
        if not any(abs(q.x - p.x) < tol and abs(q.y - p.y) < tol for q in unique):
            unique.append(p)
    unique.sort(key=lambda p: p.x)
    return unique


def clip_tangent_to_viewport(
    params: TangentParams, viewport: Viewport, config: AnalysisConfig = CONFIG
) -> Segment:
    """Clip a tangent line to the horizontally widened viewport.

    Args:
        params: Line slope and anchor point.
        viewport: Current main-chart viewport.
        config: Supplies ``tangent_span_percent``, ``slope_epsilon`` and
            ``point_dedup_tolerance``.

    Returns:
        tuple[Point, Point]: Segment endpoints ordered by ``x``. Always two
        points, also for zero-width or zero-height viewports.

    Note:
        When the line misses the widened rectangle entirely, both ends of the
        widened X range are evaluated and each is clamped onto the nearer Y
        bound by solving back for ``x``. The result then lies on the line but
        not inside the rectangle.
    """
    slope = float(params.slope)
    x0 = float(params.x0)
    y0 = float(params.y0)

    x_min, x_max = sorted((float(viewport.x_min), float(viewport.x_max)))
    y_min, y_max = sorted((float(viewport.y_min), float(viewport.y_max)))

    padding = (x_max - x_min) * config.tangent_span_percent
    ext_min = x_min - padding
    ext_max = x_max + padding

    if abs(slope) < config.slope_epsilon:
        return (Point(ext_min, y0), Point(ext_max, y0))

    def y_at(x: float) -> float:
        return slope * (x - x0) + y0

    def x_at(y: float) -> float:
        return (y - y0) / slope + x0

    candidates: List[Point] = []

    y_left = y_at(ext_min)
    if y_min <= y_left <= y_max:
        candidates.append(Point(ext_min, y_left))

    y_right = y_at(ext_max)
    if y_min <= y_right <= y_max:
        candidates.append(Point(ext_max, y_right))

    x_top = x_at(y_max)
    if ext_min <= x_top <= ext_max:
        candidates.append(Point(x_top, y_max))

    x_bottom = x_at(y_min)
    if ext_min <= x_bottom <= ext_max:
        candidates.append(Point(x_bottom, y_min))

    unique = _dedupe_sorted(candidates, config.point_dedup_tolerance)
    if len(unique) >= 2:
        return (unique[0], unique[-1])

    logger.info("Fallback: tangent lies entirely outside the visible area")

    start_x, end_x = ext_min, ext_max
    start_y, end_y = y_left, y_right

    if start_y < y_min:
        start_y, start_x = y_min, x_at(y_min)
    elif start_y > y_max:
        start_y, start_x = y_max, x_at(y_max)

    if end_y < y_min:
        end_y, end_x = y_min, x_at(y_min)
    elif end_y > y_max:
        end_y, end_x = y_max, x_at(y_max)

    return (Point(start_x, start_y), Point(end_x, end_y))


def segment_is_visible(segment: Segment, viewport: Viewport) -> bool:
    """Return ``True`` when any part of the segment's Y range meets the viewport."""
    lo = min(segment[0].y, segment[1].y)
    hi = max(segment[0].y, segment[1].y)
    y_min, y_max = sorted((viewport.y_min, viewport.y_max))
    return hi >= y_min and lo <= y_max


def calculate_intersection(
    tangent1: TangentParams,
    tangent2: TangentParams,
    config: AnalysisConfig = CONFIG,
    strict: bool = False,
) -> Optional[Intersection]:
    """Solve two tangents for their crossing point.

    Args:
        tangent1: First tangent.
        tangent2: Second tangent.
        config: Supplies ``slope_epsilon``.
        strict: Raise instead of returning ``None`` for parallel tangents.

    Returns:
        Point | None: The intersection, or ``None`` when the slopes differ by
        less than ``slope_epsilon``.

    Raises:
        GeometryDegenerate: Only when ``strict`` is set and the tangents are
            parallel or coincident.
    """
    m1, x1, y1 = float(tangent1.slope), float(tangent1.x0), float(tangent1.y0)
    m2, x2, y2 = float(tangent2.slope), float(tangent2.x0), float(tangent2.y0)

    if abs(m1 - m2) < config.slope_epsilon:
        logger.info("Tangents are parallel, no intersection")
        if strict:
            raise GeometryDegenerate("Tangents are parallel; no transition point.")
        return None

    x = (m1 * x1 - m2 * x2 + y2 - y1) / (m1 - m2)
    y = m1 * (x - x1) + y1
    return Intersection(x, y)
