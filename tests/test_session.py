import pytest

from dtakit.chart import LinearChart
from dtakit.geometry import clip_tangent_to_viewport
from dtakit.samples import write_sample_csv
from dtakit.schema import DerivativePoint, TangentParams
from dtakit.session import (
    Session,
    build_tangent_at_derivative_point,
    clear_all,
    clear_slot,
    draw_tangent,
    handle_derivative_click,
    intersection,
    load_csv,
    load_rows,
    reset_zoom,
    select_slot,
    sync_zoom,
)

SCENARIO_A_ROWS = [
    ["Time", "Temperature", "DTA"],
    [0.0, 600.0, 10.0],
    [1.0, 605.0, 12.0],
    [2.0, 610.0, 20.0],
    [3.0, 615.0, 22.0],
]


@pytest.fixture
def session():
    s = Session()
    result = load_rows(s, SCENARIO_A_ROWS, source_name="scenario A")
    assert result.ok
    return s


def test_load_populates_curves_and_synced_viewports(session):
    assert session.is_data_loaded
    assert len(session.curve_points) == 4
    assert len(session.derivative_points) == 3
    assert session.main_viewport.x_min == 600.0
    assert session.main_viewport.x_max == 615.0
    assert session.derivative_viewport.x_min == session.main_viewport.x_min
    assert session.derivative_viewport.x_max == session.main_viewport.x_max
    assert session.main_viewport.y_min == pytest.approx(9.4)
    assert session.main_viewport.y_max == pytest.approx(22.6)


def test_load_reports_counts_and_warnings():
    rows = SCENARIO_A_ROWS + [[4.0, 616.0, 21.0], ["bad", 1.0, 2.0], [5.0, 620.0, 23.0]]
    result = load_rows(Session(), rows)
    assert result.ok
    assert result.valid_count == 6
    assert result.invalid_count == 1
    assert result.duplicate_count == 0
    assert result.derivative_count == 5
    assert result.warnings == ["Skipped 1 rows with invalid data"]


def test_two_rows_fail_with_validation_error():
    s = Session()
    result = load_rows(s, [[0.0, 600.0, 10.0], [1.0, 605.0, 12.0]])
    assert not result.ok
    assert result.error_type == "ValidationError"
    assert result.valid_count == 2
    assert not s.is_data_loaded


def test_two_column_input_fails_with_ingest_error():
    result = load_rows(Session(), [[0.0, 600.0], [1.0, 605.0], [2.0, 610.0]])
    assert not result.ok
    assert result.error_type == "IngestError"
    assert "3 columns" in result.reason


def test_failed_load_clears_previous_data(session):
    result = load_rows(session, [[0.0, 1.0, 2.0]])
    assert not result.ok
    assert not session.is_data_loaded
    assert session.slots == [None, None]


def test_load_csv_from_file(tmp_path):
    path = write_sample_csv(str(tmp_path / "sample.csv"))
    s = Session()
    result = load_csv(s, path)
    assert result.ok
    assert s.source_name == path
    assert result.derivative_count == len(s.curve_points) - 1


def test_load_csv_missing_file():
    result = load_csv(Session(), "does/not/exist.csv")
    assert not result.ok
    assert result.error_type == "IngestError"


def test_slot_state_machine(session):
    assert session.active_index == 0
    draw_tangent(session, 1.0, 600.0, 10.0)
    assert session.slots[0] is not None and session.slots[1] is None

    select_slot(session, 1)
    assert session.slots[0] is not None
    draw_tangent(session, -1.0, 615.0, 22.0)
    draw_tangent(session, -1.0, 620.0, 10.0)
    assert session.slots[1].params == TangentParams(-1.0, 620.0, 10.0)

    point = intersection(session)
    assert point.x == pytest.approx(610.0)
    assert point.y == pytest.approx(20.0)

    clear_slot(session, 1)
    assert session.slots[1] is None
    assert intersection(session) is None
    assert session.active_index == 1

    clear_all(session)
    assert session.slots == [None, None]

    with pytest.raises(ValueError):
        select_slot(session, 2)


def test_draw_without_data_is_ignored():
    assert draw_tangent(Session(), 1.0, 0.0, 0.0) is None


def test_drawn_segment_is_clipped_to_main_viewport(session):
    slot = draw_tangent(session, 1.6, 605.0, 12.0)
    expected = clip_tangent_to_viewport(slot.params, session.main_viewport)
    assert slot.segment == expected


def test_click_within_tolerance_builds_tangent(session):
    chart = LinearChart(session.derivative_viewport, width=800, height=400)
    slot = handle_derivative_click(session, chart, 405.0, 120.0)
    assert slot is not None
    assert slot.params.slope == pytest.approx(1.6)
    assert (slot.params.x0, slot.params.y0) == (605.0, 12.0)
    assert session.slots[0] is slot


def test_click_outside_tolerance_is_ignored(session):
    chart = LinearChart(session.derivative_viewport, width=800, height=400)
    assert handle_derivative_click(session, chart, 260.0) is None
    assert session.slots == [None, None]


def test_click_ignored_while_demo_runs(session):
    chart = LinearChart(session.derivative_viewport, width=800, height=400)
    session.demo_running = True
    assert handle_derivative_click(session, chart, 400.0) is None


def test_zero_temperature_gradient_builds_nothing(session):
    point = DerivativePoint(600.0, 1.0, 0.0)
    assert build_tangent_at_derivative_point(session, point, index=1) is None
    assert session.slots == [None, None]
    assert session.active_index == 1


def test_zoom_sync_reclips_tangents(session):
    slot = draw_tangent(session, 1.6, 605.0, 12.0)
    sync_zoom(session, 604.0, 611.0)

    assert session.derivative_viewport.x_min == 604.0
    assert session.derivative_viewport.x_max == 611.0
    reclipped = session.slots[0]
    assert reclipped.params == slot.params
    assert reclipped.segment == clip_tangent_to_viewport(
        slot.params, session.main_viewport
    )

    sync_zoom(session, 604.0, 611.0)
    assert session.slots[0].segment == reclipped.segment


def test_reset_zoom_restores_full_extent(session):
    sync_zoom(session, 604.0, 611.0)
    reset_zoom(session)
    assert session.main_viewport.x_min == 600.0
    assert session.main_viewport.x_max == 615.0
    assert session.derivative_viewport.x_max == 615.0
