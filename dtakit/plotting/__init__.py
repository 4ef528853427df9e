"""
Figures for DTA sessions.

Plotting functions receive a loaded :class:`~dtakit.session.Session` and only
render what it already holds: curves, viewports and clipped tangent segments.
No analysis is performed here.

Modules:
    trace_plots:
        Two-panel figure with the DTA curve and tangents above the derivative
        curve, each limited to its session viewport.

    style:
        Shared rcParams, colors and multi-format figure export.

    axes_chart:
        Chart capability over a matplotlib axes, for click handling on a
        rendered figure.
"""

from .axes_chart import AxesChart
from .style import apply_global_style, save_figure_bundle
from .trace_plots import create_session_figure, plot_session

__all__ = [
    "AxesChart",
    "apply_global_style",
    "create_session_figure",
    "plot_session",
    "save_figure_bundle",
]
