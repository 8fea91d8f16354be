"""Keyboard navigation between the links of a rendered document.

Links are kept in the order they were registered while the document was
built: row by row, left to right within a row.  Horizontal movement only
steps to the neighbouring index if it lies on the same row.  Vertical
movement scans the list from the focused link and stops at the first link
on another row, so it lands on the link closest by index, not the one
closest by column.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from markup_view.models import XY, Link, Rect


class Absolute(Enum):
    """A direction on screen."""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    NONE = "none"


class Relative(Enum):
    """A direction in reading order."""
    FRONT = "front"
    BACK = "back"

    @classmethod
    def from_direction(cls, direction: Direction) -> Relative:
        if isinstance(direction, Relative):
            return direction
        if direction in (Absolute.DOWN, Absolute.RIGHT):
            return cls.BACK
        return cls.FRONT


Direction = Union[Absolute, Relative]


class LinkHandler:
    """The ordered links of one document and the index of the focused link."""

    def __init__(self) -> None:
        self.links: list[Link] = []
        self.focus = 0

    def __len__(self) -> int:
        return len(self.links)

    @property
    def focused_link(self) -> Optional[Link]:
        if not self.links:
            return None
        return self.links[self.focus]

    def push(self, link: Link) -> int:
        self.links.append(link)
        return len(self.links) - 1

    def take_focus(self, direction: Direction) -> bool:
        """Focus the first or last link, depending on where focus comes from."""
        if not self.links:
            return False
        if Relative.from_direction(direction) is Relative.FRONT:
            self.focus = 0
        else:
            self.focus = len(self.links) - 1
        return True

    def move_focus(self, direction: Absolute) -> bool:
        if direction is Absolute.LEFT:
            return self._move_horizontal(Relative.FRONT)
        if direction is Absolute.RIGHT:
            return self._move_horizontal(Relative.BACK)
        if direction is Absolute.UP:
            return self._move_vertical(Relative.FRONT)
        if direction is Absolute.DOWN:
            return self._move_vertical(Relative.BACK)
        return False

    def _move_horizontal(self, direction: Relative) -> bool:
        if not self.links:
            return False

        if direction is Relative.FRONT:
            new_focus = self.focus - 1
        else:
            new_focus = self.focus + 1
        if not 0 <= new_focus < len(self.links):
            return False

        if self.links[new_focus].position.y != self.links[self.focus].position.y:
            return False
        self.focus = new_focus
        return True

    def _move_vertical(self, direction: Relative) -> bool:
        if not self.links:
            return False

        y = self.links[self.focus].position.y
        if direction is Relative.FRONT:
            candidates = range(self.focus - 1, -1, -1)
            found = next((i for i in candidates if self.links[i].position.y < y), None)
        else:
            candidates = range(self.focus + 1, len(self.links))
            found = next((i for i in candidates if self.links[i].position.y > y), None)

        if found is None:
            return False
        self.focus = found
        return True

    def important_area(self) -> Rect:
        """Area of the focused link, or an empty rectangle if there are no links."""
        link = self.focused_link
        if link is None:
            return Rect.zero()
        return Rect.from_size(link.position, XY(link.width, 1))
