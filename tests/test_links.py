"""Tests for markup_view.links — directional navigation between links."""

import pytest

from markup_view.links import Absolute, LinkHandler, Relative
from markup_view.models import XY, Link, Rect


def _handler(*positions, focus=0):
    handler = LinkHandler()
    for i, (x, y) in enumerate(positions):
        handler.push(Link(position=XY(x, y), width=3, target=f"link{i}"))
    handler.focus = focus
    return handler


class TestPush:
    def test_returns_increasing_indices(self):
        handler = LinkHandler()
        indices = [handler.push(Link(XY(i, 0), 1, str(i))) for i in range(4)]
        assert indices == [0, 1, 2, 3]

    def test_default_focus(self):
        handler = _handler((0, 0), (5, 0))
        assert handler.focus == 0
        assert handler.focused_link.target == "link0"


class TestEmptyHandler:
    @pytest.mark.parametrize("direction", list(Absolute))
    def test_move_focus_fails(self, direction):
        handler = LinkHandler()
        assert handler.move_focus(direction) is False
        assert handler.focus == 0

    def test_take_focus_fails(self):
        handler = LinkHandler()
        assert handler.take_focus(Relative.FRONT) is False
        assert handler.take_focus(Absolute.DOWN) is False

    def test_important_area_is_degenerate(self):
        assert LinkHandler().important_area() == Rect(0, 0, 0, 0)

    def test_no_focused_link(self):
        assert LinkHandler().focused_link is None


class TestTakeFocus:
    def test_front(self):
        handler = _handler((0, 0), (0, 1), (0, 2), focus=1)
        assert handler.take_focus(Relative.FRONT) is True
        assert handler.focus == 0

    def test_back(self):
        handler = _handler((0, 0), (0, 1), (0, 2))
        assert handler.take_focus(Relative.BACK) is True
        assert handler.focus == 2

    @pytest.mark.parametrize("direction", [Absolute.UP, Absolute.LEFT, Absolute.NONE])
    def test_absolute_towards_start(self, direction):
        handler = _handler((0, 0), (0, 1), focus=1)
        assert handler.take_focus(direction) is True
        assert handler.focus == 0

    @pytest.mark.parametrize("direction", [Absolute.DOWN, Absolute.RIGHT])
    def test_absolute_towards_end(self, direction):
        handler = _handler((0, 0), (0, 1))
        assert handler.take_focus(direction) is True
        assert handler.focus == 1


class TestHorizontal:
    def test_right_on_same_row(self):
        handler = _handler((0, 0), (5, 0))
        assert handler.move_focus(Absolute.RIGHT) is True
        assert handler.focus == 1

    def test_left_on_same_row(self):
        handler = _handler((0, 0), (5, 0), focus=1)
        assert handler.move_focus(Absolute.LEFT) is True
        assert handler.focus == 0

    def test_left_on_first_link(self):
        handler = _handler((0, 0), (5, 0))
        assert handler.move_focus(Absolute.LEFT) is False
        assert handler.focus == 0

    def test_right_on_last_link(self):
        handler = _handler((0, 0), (5, 0), focus=1)
        assert handler.move_focus(Absolute.RIGHT) is False
        assert handler.focus == 1

    def test_right_does_not_change_row(self):
        handler = _handler((0, 0), (5, 0), (0, 1), focus=1)
        assert handler.move_focus(Absolute.RIGHT) is False
        assert handler.focus == 1

    def test_left_does_not_change_row(self):
        handler = _handler((0, 0), (5, 0), (0, 1), focus=2)
        assert handler.move_focus(Absolute.LEFT) is False
        assert handler.focus == 2

    def test_none_fails(self):
        handler = _handler((0, 0), (5, 0))
        assert handler.move_focus(Absolute.NONE) is False
        assert handler.focus == 0


class TestVertical:
    def test_down_skips_rows_without_links(self):
        handler = _handler((0, 0), (0, 2))
        assert handler.move_focus(Absolute.DOWN) is True
        assert handler.focus == 1

    def test_down_skips_links_on_same_row(self):
        handler = _handler((0, 0), (5, 0), (9, 0), (2, 1))
        assert handler.move_focus(Absolute.DOWN) is True
        assert handler.focus == 3

    def test_up_from_top_row(self):
        handler = _handler((0, 0), (5, 0), (0, 1), focus=1)
        assert handler.move_focus(Absolute.UP) is False
        assert handler.focus == 1

    def test_down_from_bottom_row(self):
        handler = _handler((0, 0), (0, 1), (5, 1), focus=1)
        assert handler.move_focus(Absolute.DOWN) is False
        assert handler.focus == 1

    def test_down_lands_on_first_link_of_next_row(self):
        # The link at column 20 on row 1 is closer by column, but the first
        # link of the row comes first in the scan.
        handler = _handler((0, 0), (20, 0), (0, 1), (20, 1), focus=1)
        assert handler.move_focus(Absolute.DOWN) is True
        assert handler.focus == 2

    def test_up_lands_on_last_link_of_previous_row(self):
        handler = _handler((0, 0), (20, 0), (0, 1), focus=2)
        assert handler.move_focus(Absolute.UP) is True
        assert handler.focus == 1

    def test_up_from_first_link_of_row(self):
        handler = _handler((0, 0), (10, 0), (0, 1), (10, 1), focus=2)
        assert handler.move_focus(Absolute.UP) is True
        assert handler.focus == 1


class TestThreeRowScenario:
    def test_down_down_up(self):
        # Row 0 and row 2 contain one link each, row 1 has none.
        handler = _handler((4, 0), (2, 2))
        assert handler.focus == 0

        assert handler.move_focus(Absolute.DOWN) is True
        assert handler.focus == 1

        assert handler.move_focus(Absolute.DOWN) is False
        assert handler.focus == 1

        assert handler.move_focus(Absolute.UP) is True
        assert handler.focus == 0


class TestImportantArea:
    def test_focused_link_area(self):
        handler = _handler((0, 0), (7, 3), focus=1)
        assert handler.important_area() == Rect(7, 3, 3, 1)


class TestRelative:
    @pytest.mark.parametrize("direction, expected", [
        (Absolute.UP, Relative.FRONT),
        (Absolute.LEFT, Relative.FRONT),
        (Absolute.NONE, Relative.FRONT),
        (Absolute.DOWN, Relative.BACK),
        (Absolute.RIGHT, Relative.BACK),
        (Relative.FRONT, Relative.FRONT),
        (Relative.BACK, Relative.BACK),
    ])
    def test_from_direction(self, direction, expected):
        assert Relative.from_direction(direction) is expected
