import pytest

from dtakit.data_processing import calculate_derivatives, curve_frame, derivative_frame
from dtakit.errors import ComputationError
from dtakit.samples import generate_melting_trace
from dtakit.schema import COLUMNS, Sample

SCENARIO_A = [
    Sample(0.0, 600.0, 10.0),
    Sample(1.0, 605.0, 12.0),
    Sample(2.0, 610.0, 20.0),
    Sample(3.0, 615.0, 22.0),
]


def test_scenario_a_counts_and_first_pair():
    result = calculate_derivatives(SCENARIO_A)
    assert len(result.curve_points) == 4
    assert len(result.derivative_points) == 3

    first = result.derivative_points[0]
    assert first.y == pytest.approx(2.0)
    assert first.temp_gradient == pytest.approx(5.0)
    assert first.x == pytest.approx(602.5)


def test_curve_points_are_temperature_signal_pairs():
    result = calculate_derivatives(SCENARIO_A)
    assert [tuple(p) for p in result.curve_points] == [
        (600.0, 10.0),
        (605.0, 12.0),
        (610.0, 20.0),
        (615.0, 22.0),
    ]


def test_left_convention_uses_left_sample_temperature():
    result = calculate_derivatives(SCENARIO_A, x_convention="left")
    assert [p.x for p in result.derivative_points] == [600.0, 605.0, 610.0]


def test_unknown_convention_rejected():
    with pytest.raises(ValueError):
        calculate_derivatives(SCENARIO_A, x_convention="right")


def test_too_few_derivative_points_raises():
    with pytest.raises(ComputationError) as excinfo:
        calculate_derivatives(SCENARIO_A[:2])
    assert excinfo.value.derivative_count == 1


def test_smoothing_changes_derivative_only():
    frame = generate_melting_trace(noise=0.05, seed=3)
    samples = [Sample(*row) for row in frame.values.tolist()]

    raw = calculate_derivatives(samples)
    smoothed = calculate_derivatives(samples, smooth=True)

    assert raw.curve_points == smoothed.curve_points
    assert len(raw.derivative_points) == len(smoothed.derivative_points)
    raw_spread = max(p.y for p in raw.derivative_points) - min(
        p.y for p in raw.derivative_points
    )
    smooth_spread = max(p.y for p in smoothed.derivative_points) - min(
        p.y for p in smoothed.derivative_points
    )
    assert smooth_spread < raw_spread


def test_frames_use_standard_columns():
    result = calculate_derivatives(SCENARIO_A)
    curve = curve_frame(result.curve_points)
    deriv = derivative_frame(result.derivative_points)
    assert list(curve.columns) == [COLUMNS.temperature, COLUMNS.signal]
    assert list(deriv.columns) == [
        COLUMNS.temperature,
        COLUMNS.derivative,
        COLUMNS.temp_gradient,
    ]
    assert len(deriv) == 3
