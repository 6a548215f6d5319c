"""Tests for viewport to page coordinate mapping."""
import pytest
from PyQt5.QtCore import QRectF

from inkstamp.core.geometry import (
    DragSession,
    PageRect,
    denormalize_point,
    normalize_point,
)

RECT = PageRect(left=40.0, top=120.0, width=794.0, height=1123.0)


@pytest.mark.parametrize("client_x, client_y", [
    (40.0, 120.0),
    (834.0, 1243.0),
    (437.0, 681.5),
    (41.25, 1242.9),
])
def test_round_trip_inside_rect(client_x, client_y):
    x, y = normalize_point(client_x, client_y, RECT)
    back_x, back_y = denormalize_point(x, y, RECT)
    assert back_x == pytest.approx(client_x)
    assert back_y == pytest.approx(client_y)


def test_outside_points_are_clamped():
    assert normalize_point(0, 0, RECT) == (0.0, 0.0)
    assert normalize_point(5000, 5000, RECT) == (1.0, 1.0)


def test_degenerate_rect_does_not_fail():
    assert normalize_point(10, 10, PageRect(0, 0, 0, 0)) == (0.0, 0.0)


def test_qrect_adapter():
    rect = PageRect.from_qrect(QRectF(10, 20, 300, 400))
    assert rect == PageRect(10, 20, 300, 400)
    assert rect.to_qrect() == QRectF(10, 20, 300, 400)


def test_drag_uses_rect_of_each_move():
    drag = DragSession()
    assert drag.move(1, 100, 100, RECT) is None

    drag.begin("ann", page=1)
    before = drag.move(1, 200, 300, PageRect(0, 0, 400, 600))
    reflowed = drag.move(1, 200, 300, PageRect(150, 0, 200, 600))
    assert before == (0.5, 0.5)
    assert reflowed == (0.25, 0.5)

    assert drag.move(2, 200, 300, RECT) is None

    drag.end()
    assert not drag.active
