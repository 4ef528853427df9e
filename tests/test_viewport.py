import pytest

from dtakit.schema import Point, Viewport
from dtakit.viewport import full_viewport, rescale_y, sync_viewports, visible_y_range

CURVE = [Point(float(x), float(x) * 2.0) for x in range(600, 621)]
DERIV = [Point(float(x) + 0.5, 1.0 if x < 610 else -1.0) for x in range(600, 620)]


def test_visible_range_is_padded():
    lo, hi = visible_y_range(CURVE, 605.0, 615.0, 0.05)
    assert lo == pytest.approx(1210.0 - 1.0)
    assert hi == pytest.approx(1230.0 + 1.0)


def test_sync_copies_x_and_autoscales_each_chart():
    main = Viewport(600.0, 620.0, 0.0, 2000.0)
    deriv = Viewport(600.0, 620.0, -5.0, 5.0)
    new_main, new_deriv = sync_viewports(main, deriv, 605.0, 615.0, CURVE, DERIV)

    assert (new_main.x_min, new_main.x_max) == (605.0, 615.0)
    assert (new_deriv.x_min, new_deriv.x_max) == (605.0, 615.0)
    assert new_main.y_min == pytest.approx(1209.0)
    assert new_deriv.y_min == pytest.approx(-1.1)
    assert new_deriv.y_max == pytest.approx(1.1)


def test_empty_or_flat_window_keeps_previous_y():
    main = Viewport(600.0, 620.0, 3.0, 7.0)
    assert rescale_y(main.with_x(700.0, 710.0), CURVE) == Viewport(700.0, 710.0, 3.0, 7.0)
    flat = rescale_y(main.with_x(601.0, 605.0), DERIV)
    assert (flat.y_min, flat.y_max) == (3.0, 7.0)


def test_sync_is_repeatable():
    main = Viewport(600.0, 620.0, 0.0, 2000.0)
    deriv = Viewport(600.0, 620.0, -5.0, 5.0)
    once = sync_viewports(main, deriv, 602.0, 611.0, CURVE, DERIV)
    twice = sync_viewports(*once, 602.0, 611.0, CURVE, DERIV)
    assert once == twice


def test_full_viewport():
    vp = full_viewport(CURVE)
    assert (vp.x_min, vp.x_max) == (600.0, 620.0)
    assert vp.y_min < 1200.0 and vp.y_max > 1240.0

    flat = full_viewport([Point(1.0, 2.0), Point(3.0, 2.0)])
    assert (flat.y_min, flat.y_max) == (1.5, 2.5)

    with pytest.raises(ValueError):
        full_viewport([])
