"""Define the plain data values exchanged between the core and its callers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import NamedTuple, Tuple


class Sample(NamedTuple):
    """One cleaned measurement row: ``(time, temperature, signal)``."""

    time: float
    temperature: float
    signal: float


class Point(NamedTuple):
    """A data-space point. Curve points use ``x = temperature, y = signal``."""

    x: float
    y: float


CurvePoint = Point
Intersection = Point
Segment = Tuple[Point, Point]


class DerivativePoint(NamedTuple):
    """Rate of change of the signal for one sample interval.

    Attributes:
        x: Temperature representing the interval (see
            ``AnalysisConfig.derivative_x_convention``).
        y: dSignal/dTime over the interval.
        temp_gradient: dTemperature/dTime over the interval.
    """

    x: float
    y: float
    temp_gradient: float


@dataclass(frozen=True)
class TangentParams:
    """A line ``y = slope * (x - x0) + y0`` anchored on the main curve."""

    slope: float
    x0: float
    y0: float

    def y_at(self, x: float) -> float:
        return self.slope * (x - self.x0) + self.y0


@dataclass(frozen=True)
class Viewport:
    """Visible data-space rectangle of one chart."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def with_x(self, x_min: float, x_max: float) -> "Viewport":
        return replace(self, x_min=float(x_min), x_max=float(x_max))

    def with_y(self, y_min: float, y_max: float) -> "Viewport":
        return replace(self, y_min=float(y_min), y_max=float(y_max))


@dataclass
class TangentSlot:
    """Stored tangent: its parameters plus the segment currently rendered."""

    params: TangentParams
    segment: Segment


@dataclass(frozen=True)
class TraceColumns:
    """Standardized column labels for exported tables.

    Attributes:
        time: Elapsed time of the measurement.
        temperature: Sample temperature (deg C); the X axis of both charts.
        signal: DTA signal of the main curve.
        derivative: dSignal/dTime of the derivative curve.
        temp_gradient: dTemperature/dTime, used to convert a time derivative
            into a tangent slope against temperature.
    """

    time: str = "Time"
    temperature: str = "Temperature (°C)"
    signal: str = "DTA Signal"
    derivative: str = "dDTA/dt"
    temp_gradient: str = "dT/dt"


COLUMNS = TraceColumns()
