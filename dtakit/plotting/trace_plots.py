"""Render a session as the main DTA chart above its derivative chart.

Both panels use the session viewports as axis limits, so the figure shows
exactly what an interactive view would show after zooming. Long series are
decimated before drawing. Tangents are drawn from their stored, already
clipped segments; nothing here recomputes geometry.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from ..decimation import decimate
from ..schema import COLUMNS, Viewport
from ..session import Session, intersection
from .style import (
    COLORS,
    STYLE,
    TANGENT_COLORS,
    clean_axis,
    save_figure_bundle,
    set_global_style,
)

logger = logging.getLogger(__name__)


def _apply_viewport(ax: Axes, viewport: Optional[Viewport]) -> None:
    if viewport is None:
        return
    if viewport.x_max > viewport.x_min:
        ax.set_xlim(viewport.x_min, viewport.x_max)
    if viewport.y_max > viewport.y_min:
        ax.set_ylim(viewport.y_min, viewport.y_max)


def _plot_series(ax: Axes, points, color: str, label: str, session: Session) -> None:
    if not points:
        return
    data = np.asarray([(p[0], p[1]) for p in points], dtype=float)
    x, y = decimate(
        data[:, 0],
        data[:, 1],
        samples=session.config.decimation_samples,
        threshold=session.config.decimation_threshold,
    )
    ax.plot(x, y, color=color, linewidth=STYLE.LINEWIDTH, label=label)


def draw_main_panel(ax: Axes, session: Session) -> None:
    """Draw the DTA curve, stored tangent segments and their intersection."""
    _plot_series(ax, session.curve_points, COLORS["curve"], "DTA curve", session)

    for index, slot in enumerate(session.slots):
        if slot is None:
            continue
        (x1, y1), (x2, y2) = slot.segment
        ax.plot(
            [x1, x2],
            [y1, y2],
            linestyle="--",
            color=TANGENT_COLORS[index],
            linewidth=STYLE.LINEWIDTH_TANGENT,
            label=session.config.tangent_names[index],
        )

    point = intersection(session)
    if point is not None:
        ax.plot(
            [point.x],
            [point.y],
            marker="o",
            linestyle="none",
            color=COLORS["intersection"],
            label=f"Transition {point.x:.1f} °C",
        )

    _apply_viewport(ax, session.main_viewport)
    ax.set_ylabel(COLUMNS.signal)
    ax.set_title(session.source_name or "DTA trace")
    clean_axis(ax)
    ax.legend(loc="best")


def draw_derivative_panel(
    ax: Axes,
    session: Session,
    highlights: Iterable[Tuple[float, float]] = (),
) -> None:
    """Draw the derivative curve with optional highlighted temperature bands."""
    _plot_series(
        ax, session.derivative_points, COLORS["derivative"], COLUMNS.derivative, session
    )
    for lo, hi in highlights:
        ax.axvspan(lo, hi, color=COLORS["highlight"], alpha=STYLE.ALPHA_HIGHLIGHT)
    ax.axhline(0.0, color="0.6", linewidth=0.8)

    _apply_viewport(ax, session.derivative_viewport)
    ax.set_xlabel(COLUMNS.temperature)
    ax.set_ylabel(COLUMNS.derivative)
    clean_axis(ax)


def create_session_figure(
    session: Session, highlights: Iterable[Tuple[float, float]] = ()
) -> Tuple[Figure, Tuple[Axes, Axes]]:
    """Build the two-panel figure without saving it."""
    set_global_style()
    fig, (ax_main, ax_deriv) = plt.subplots(
        2, 1, figsize=STYLE.FIGSIZE_SESSION, sharex=False
    )
    draw_main_panel(ax_main, session)
    draw_derivative_panel(ax_deriv, session, highlights=highlights)
    fig.tight_layout()
    return fig, (ax_main, ax_deriv)


def plot_session(
    session: Session,
    output_dir: str = "output",
    filename: str = "dta_tangents.png",
    highlights: Iterable[Tuple[float, float]] = (),
) -> str:
    """Render ``session`` and save it as a PNG/PDF/SVG bundle.

    Args:
        session: Session with loaded data.
        output_dir: Directory for the figure files.
        filename: PNG file name; PDF and SVG share its stem.
        highlights: Temperature bands to shade on the derivative panel.

    Returns:
        str: Path of the PNG file.

    Raises:
        ValueError: If the session holds no data.
    """
    if not session.is_data_loaded:
        raise ValueError("Cannot plot a session without loaded data.")

    os.makedirs(output_dir, exist_ok=True)
    fig, _ = create_session_figure(session, highlights=highlights)
    try:
        path = save_figure_bundle(fig, os.path.join(output_dir, filename))
    finally:
        plt.close(fig)
    logger.info("Saved figure to %s", path)
    return path
