"""Session state for one loaded trace: curves, viewports and tangent slots.

A :class:`Session` is owned by the caller and passed explicitly to every
operation; nothing here keeps process-wide state. Loading a dataset replaces
the session contents wholesale. Tangent slots follow a small state machine:

- ``select_slot(i)`` makes slot ``i`` active without touching data;
- ``draw_tangent`` clips a new tangent to the current main viewport and
  overwrites the active slot;
- ``clear_slot(i)`` / ``clear_all`` empty one or both slots.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .chart import ChartCapability
from .config import CONFIG, AnalysisConfig
from .data_processing import (
    calculate_derivatives,
    detect_header,
    ingest_rows,
    parse_csv,
)
from .errors import ComputationError, DTAError, IngestError, ValidationError
from .geometry import (
    calculate_intersection,
    clip_tangent_to_viewport,
    tangent_equation,
    tangent_from_derivative_point,
)
from .schema import (
    CurvePoint,
    DerivativePoint,
    Intersection,
    Sample,
    TangentParams,
    TangentSlot,
    Viewport,
)
from .viewport import full_viewport, sync_viewports

logger = logging.getLogger(__name__)

SLOT_COUNT = 2


@dataclass
class LoadResult:
    """Structured outcome of loading a dataset into a session.

    Attributes:
        ok: Whether curves were computed and the session is ready.
        reason: Human-readable failure reason (empty on success).
        error_type: Name of the failure class, e.g. ``"ValidationError"``.
        warnings: Notes about rows skipped during cleaning.
        valid_count: Samples retained.
        invalid_count: Rows dropped as malformed.
        duplicate_count: Rows dropped for non-increasing time.
        derivative_count: Derivative points computed.
    """

    ok: bool
    reason: str = ""
    error_type: str = ""
    warnings: List[str] = field(default_factory=list)
    valid_count: int = 0
    invalid_count: int = 0
    duplicate_count: int = 0
    derivative_count: int = 0


@dataclass
class Session:
    """Everything the analysis needs for the dataset currently loaded."""

    config: AnalysisConfig = CONFIG
    samples: Tuple[Sample, ...] = ()
    curve_points: Tuple[CurvePoint, ...] = ()
    derivative_points: Tuple[DerivativePoint, ...] = ()
    slots: List[Optional[TangentSlot]] = field(
        default_factory=lambda: [None] * SLOT_COUNT
    )
    active_index: int = 0
    main_viewport: Optional[Viewport] = None
    derivative_viewport: Optional[Viewport] = None
    source_name: str = ""
    demo_running: bool = False

    @property
    def is_data_loaded(self) -> bool:
        return len(self.curve_points) >= 2 and len(self.derivative_points) > 0

    @property
    def active_slot(self) -> Optional[TangentSlot]:
        return self.slots[self.active_index]


def reset_session(session: Session) -> Session:
    """Drop all data, tangents and viewports; select slot 0."""
    session.samples = ()
    session.curve_points = ()
    session.derivative_points = ()
    session.slots = [None] * SLOT_COUNT
    session.active_index = 0
    session.main_viewport = None
    session.derivative_viewport = None
    session.source_name = ""
    session.demo_running = False
    return session


def _failure(exc: DTAError, warnings: Sequence[str] = ()) -> LoadResult:
    result = LoadResult(
        ok=False,
        reason=str(exc),
        error_type=type(exc).__name__,
        warnings=list(warnings),
    )
    if isinstance(exc, ValidationError):
        result.valid_count = exc.valid_count
        result.invalid_count = exc.invalid_count
        result.duplicate_count = exc.duplicate_count
    if isinstance(exc, ComputationError):
        result.derivative_count = exc.derivative_count
    logger.error("Load failed (%s): %s", result.error_type, result.reason)
    return result


def load_rows(
    session: Session,
    rows: Sequence[Sequence],
    source_name: str = "",
    x_convention: str | None = None,
    smooth: bool = False,
) -> LoadResult:
    """Replace the session dataset with curves computed from raw rows.

    The session is reset first, so a failed load leaves it empty.

    Args:
        session: Session to populate.
        rows: Raw rows, optionally starting with a header row.
        source_name: Label for the data source (file or sample name).
        x_convention: Derivative X placement, see
            :func:`dtakit.data_processing.calculate_derivatives`.
        smooth: Smooth the signal before differentiating.

    Returns:
        LoadResult: Success flag, reason, warnings and row counts.
    """
    reset_session(session)
    config = session.config
    warnings: List[str] = []

    try:
        has_header, _ = detect_header(rows)
        data_rows = rows[1:] if has_header else rows
        if len(data_rows) and len(data_rows[0]) < 3:
            raise IngestError(
                "Invalid format: 3 columns are required (Time, Temperature, DTA)"
            )

        ingest = ingest_rows(rows, config=config)
        warnings = list(ingest.warnings)
        curves = calculate_derivatives(
            ingest.samples, config=config, x_convention=x_convention, smooth=smooth
        )
    except DTAError as exc:
        return _failure(exc, warnings)

    session.samples = ingest.samples
    session.curve_points = curves.curve_points
    session.derivative_points = curves.derivative_points
    session.source_name = source_name
    _apply_full_viewports(session)

    logger.info(
        "Loaded %s: %d points, %d derivative points, T %.2f..%.2f",
        source_name or "dataset",
        len(session.curve_points),
        len(session.derivative_points),
        session.curve_points[0].x,
        session.curve_points[-1].x,
    )
    return LoadResult(
        ok=True,
        warnings=warnings,
        valid_count=len(ingest.samples),
        invalid_count=ingest.invalid_count,
        duplicate_count=ingest.duplicate_count,
        derivative_count=len(session.derivative_points),
    )


def load_csv(
    session: Session,
    filepath_or_buffer,
    source_name: str | None = None,
    x_convention: str | None = None,
    smooth: bool = False,
) -> LoadResult:
    """Parse a CSV source and load it with :func:`load_rows`."""
    name = source_name if source_name is not None else str(filepath_or_buffer)
    logger.info("Loading file %s", name)
    try:
        rows = parse_csv(filepath_or_buffer)
    except IngestError as exc:
        reset_session(session)
        return _failure(exc)
    return load_rows(
        session, rows, source_name=name, x_convention=x_convention, smooth=smooth
    )


def _apply_full_viewports(session: Session) -> None:
    main = full_viewport(session.curve_points, session.config)
    deriv = full_viewport(session.derivative_points, session.config)
    session.main_viewport, session.derivative_viewport = sync_viewports(
        main,
        deriv,
        main.x_min,
        main.x_max,
        session.curve_points,
        session.derivative_points,
        session.config,
    )


def _check_index(index: int) -> int:
    if index not in range(SLOT_COUNT):
        raise ValueError(f"Tangent slot index must be 0 or 1, got {index!r}")
    return int(index)


def select_slot(session: Session, index: int) -> Session:
    """Make ``index`` the slot that the next tangent overwrites."""
    session.active_index = _check_index(index)
    logger.info("Switched to %s", session.config.tangent_names[session.active_index])
    return session


def draw_tangent(
    session: Session,
    slope: float,
    x0: float,
    y0: float,
    viewport: Viewport | None = None,
) -> Optional[TangentSlot]:
    """Store a tangent in the active slot, clipped to the main viewport.

    Args:
        session: Session with loaded data.
        slope: Tangent slope against temperature.
        x0: Anchor temperature on the main curve.
        y0: Anchor signal value on the main curve.
        viewport: Viewport to clip against; defaults to the session's current
            main viewport.

    Returns:
        TangentSlot | None: The stored slot, or ``None`` when no data is loaded.
    """
    if not session.is_data_loaded:
        logger.warning("Cannot draw a tangent: no data loaded")
        return None

    bounds = viewport if viewport is not None else session.main_viewport
    params = TangentParams(float(slope), float(x0), float(y0))
    segment = clip_tangent_to_viewport(params, bounds, session.config)
    slot = TangentSlot(params=params, segment=segment)

    index = session.active_index
    session.slots[index] = slot
    logger.info(
        "Built %s: %s",
        session.config.tangent_names[index],
        tangent_equation(params),
    )

    point = intersection(session)
    if point is not None:
        logger.info("Transition temperature: %.2f °C", point.x)
    return slot


def clear_slot(session: Session, index: int) -> Session:
    """Empty one tangent slot."""
    session.slots[_check_index(index)] = None
    logger.info("Removed %s", session.config.tangent_names[index])
    return session


def clear_all(session: Session) -> Session:
    """Empty both tangent slots; the active index is kept."""
    session.slots = [None] * SLOT_COUNT
    logger.info("Removed all tangents")
    return session


def intersection(session: Session) -> Optional[Intersection]:
    """Crossing point of the two stored tangents, if both exist and differ."""
    first, second = session.slots
    if first is None or second is None:
        return None
    return calculate_intersection(first.params, second.params, session.config)


def build_tangent_at_derivative_point(
    session: Session,
    point: DerivativePoint,
    index: int | None = None,
) -> Optional[TangentSlot]:
    """Draw a tangent from a derivative point, anchored on the main curve.

    Args:
        session: Session with loaded data.
        point: Derivative point supplying ``dSignal/dt`` and ``dT/dt``.
        index: Slot to select first; the active slot is used when omitted.

    Returns:
        TangentSlot | None: ``None`` when the temperature gradient is zero.
    """
    if index is not None:
        select_slot(session, index)

    if not session.is_data_loaded:
        return None

    params = tangent_from_derivative_point(point, session.curve_points)
    if params is None:
        logger.warning(
            "Cannot build a tangent at T=%.2f: temperature gradient is zero",
            point.x,
        )
        return None

    return draw_tangent(session, params.slope, params.x0, params.y0)


def derivative_point_near(
    session: Session, temperature: float
) -> Optional[DerivativePoint]:
    """Derivative point whose temperature is closest to ``temperature``."""
    if not session.derivative_points:
        return None
    xs = np.asarray([p.x for p in session.derivative_points], dtype=float)
    return session.derivative_points[int(np.argmin(np.abs(xs - float(temperature))))]


def nearest_derivative_point(
    session: Session, chart: ChartCapability, pixel_x: float
) -> Tuple[Optional[DerivativePoint], float]:
    """Derivative point closest to ``pixel_x`` horizontally, with its distance."""
    if not session.derivative_points:
        return None, float("inf")
    pixels = np.asarray(
        [chart.pixel_for_value("x", p.x) for p in session.derivative_points],
        dtype=float,
    )
    distances = np.abs(pixels - float(pixel_x))
    idx = int(np.argmin(distances))
    return session.derivative_points[idx], float(distances[idx])


def handle_derivative_click(
    session: Session,
    chart: ChartCapability,
    pixel_x: float,
    pixel_y: float | None = None,
) -> Optional[TangentSlot]:
    """Turn a click on the derivative chart into a tangent on the main curve.

    The click selects the derivative point nearest in horizontal pixels.
    Clicks farther than ``tolerance_pixels`` from any point, clicks during the
    demo, and clicks before data is loaded are ignored.

    Args:
        session: Session with loaded data.
        chart: Derivative chart, used for value-to-pixel conversion.
        pixel_x: Click X in pixels from the plot area's left edge.
        pixel_y: Click Y in pixels; logged only.

    Returns:
        TangentSlot | None: The tangent drawn into the active slot, if any.
    """
    if not session.is_data_loaded or session.demo_running:
        return None

    point, distance = nearest_derivative_point(session, chart, pixel_x)
    if point is None or distance > session.config.tolerance_pixels:
        logger.info(
            "Click outside tolerance (x=%.1f, y=%s, distance=%.1f px, tolerance=%.1f px)",
            pixel_x,
            "n/a" if pixel_y is None else f"{pixel_y:.1f}",
            distance,
            session.config.tolerance_pixels,
        )
        return None

    logger.info(
        "Derivative click at T=%.2f: dDTA/dt=%.6f, dT/dt=%.6f",
        point.x,
        point.y,
        point.temp_gradient,
    )
    return build_tangent_at_derivative_point(session, point)


def reclip_tangents(session: Session) -> Session:
    """Recompute every stored segment from its params and the main viewport."""
    if session.main_viewport is None:
        return session
    for i, slot in enumerate(session.slots):
        if slot is not None:
            segment = clip_tangent_to_viewport(
                slot.params, session.main_viewport, session.config
            )
            session.slots[i] = TangentSlot(params=slot.params, segment=segment)
    return session


def sync_zoom(session: Session, x_min: float, x_max: float) -> Session:
    """Apply new main-chart X bounds to both charts after a pan or zoom."""
    if not session.is_data_loaded:
        return session
    session.main_viewport, session.derivative_viewport = sync_viewports(
        session.main_viewport,
        session.derivative_viewport,
        x_min,
        x_max,
        session.curve_points,
        session.derivative_points,
        session.config,
    )
    return reclip_tangents(session)


def reset_zoom(session: Session) -> Session:
    """Restore both viewports to the full data extent."""
    if not session.is_data_loaded:
        return session
    logger.info("Reset chart zoom")
    _apply_full_viewports(session)
    return reclip_tangents(session)
