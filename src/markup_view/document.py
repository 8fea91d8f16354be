"""Document builder: turns renderer output into lines and registered links."""

from __future__ import annotations

from typing import Iterable

from rich.cells import cell_len

from markup_view.links import LinkHandler
from markup_view.models import XY, Element, Link, RenderedElement


class RenderedDocument:
    """A rendered hypertext document that consists of lines of styled text and links.

    The constraint is only recorded so the view can decide whether a cached
    document can be reused for a new layout request.  It is *not* enforced
    here: fitting the content into it is the renderer's job.
    """

    def __init__(self, constraint: XY):
        self._lines: list[list[RenderedElement]] = []
        self._link_handler = LinkHandler()
        self._size = XY(0, 0)
        self._constraint = XY(*constraint)

    @property
    def lines(self) -> list[list[RenderedElement]]:
        return self._lines

    @property
    def link_handler(self) -> LinkHandler:
        return self._link_handler

    @property
    def size(self) -> XY:
        return self._size

    @property
    def constraint(self) -> XY:
        return self._constraint

    def push_line(self, elements: Iterable[Element]) -> None:
        """Append one rendered row, registering the links it contains."""
        y = len(self._lines)
        x = 0
        line: list[RenderedElement] = []
        for element in elements:
            width = cell_len(element.text)
            link_idx = None
            if element.link_target is not None:
                link_idx = self._link_handler.push(
                    Link(position=XY(x, y), width=width, target=element.link_target)
                )
            x += width
            line.append(RenderedElement(element.text, element.style, link_idx))
        self._lines.append(line)
        self._size = self._size.stack_vertical(XY(x, 1))
