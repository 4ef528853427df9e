"""Central configuration for trace analysis, tangent geometry and the demo."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DemoConfig:
    """Timing and targets for the guided walkthrough.

    Attributes:
        step_delay: Pause after informational steps, in seconds.
        highlight_duration: How long a highlighted temperature band stays up.
        click_delay: Pause before a simulated click on the derivative chart.
        zoom_range: Temperature window the demo zooms into (deg C).
        first_target: Temperature nearest to which tangent 1 is anchored.
        highlight_half_width: Half width of the highlighted band (deg C).
    """

    step_delay: float = 2.0
    highlight_duration: float = 1.5
    click_delay: float = 0.8
    zoom_range: tuple[float, float] = (590.0, 670.0)
    first_target: float = 610.0
    highlight_half_width: float = 10.0


@dataclass(frozen=True)
class AnalysisConfig:
    """Container for every tunable constant used by the analysis core.

    Attributes:
        tolerance_pixels: Maximum horizontal pixel distance between a click on
            the derivative chart and the nearest derivative point.
        chart_padding_percent: Fraction of the visible Y span added above and
            below when autoscaling a chart.
        tangent_span_percent: Fraction of the X span by which a tangent is
            extended past both viewport edges.
        min_data_points: Minimum number of cleaned samples required.
        min_derivative_points: Minimum number of derivative points required.
        slope_epsilon: Slopes (or slope differences) below this magnitude are
            treated as zero.
        point_dedup_tolerance: Coordinate tolerance when merging clip
            candidates.
        decimation_samples: Target point count after decimation.
        decimation_threshold: Series longer than this are decimated before
            rendering.
        derivative_x_convention: ``"midpoint"`` places a derivative point at
            the mean temperature of its interval, ``"left"`` at the left
            sample's temperature.
    """

    tolerance_pixels: float = 10.0
    chart_padding_percent: float = 0.05
    tangent_span_percent: float = 0.15
    min_data_points: int = 3
    min_derivative_points: int = 2
    slope_epsilon: float = 1e-10
    point_dedup_tolerance: float = 1e-6
    decimation_samples: int = 1500
    decimation_threshold: int = 3000
    derivative_x_convention: str = "midpoint"
    tangent_names: tuple[str, str] = ("Tangent 1", "Tangent 2")
    demo: DemoConfig = field(default_factory=DemoConfig)


CONFIG = AnalysisConfig()

TOLERANCE_PIXELS = CONFIG.tolerance_pixels
CHART_PADDING_PERCENT = CONFIG.chart_padding_percent
TANGENT_SPAN_PERCENT = CONFIG.tangent_span_percent
MIN_DATA_POINTS = CONFIG.min_data_points
MIN_DERIVATIVE_POINTS = CONFIG.min_derivative_points
SLOPE_EPSILON = CONFIG.slope_epsilon
POINT_DEDUP_TOLERANCE = CONFIG.point_dedup_tolerance

HINTS: tuple[str, ...] = (
    "1. Study the derivative chart. Look for the region where the signal "
    "changes sharply: that is the thermal event.",
    "2. Draw the first tangent BEFORE the peak, where the curve has not yet "
    "left the baseline.",
    "3. Click on the baseline, where the derivative is still flat.",
    "4. Now switch to Tangent 2 and draw the second tangent.",
    "5. Click near the derivative extremum to build the second tangent.",
    "6. Done! The tangent intersection is the phase transition temperature.",
)
