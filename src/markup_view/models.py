"""Data types shared by the document model, the link handler and the view."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from rich.style import Style


class XY(NamedTuple):
    """A pair of cell counts, used for sizes, positions and constraints."""
    x: int
    y: int

    def stack_vertical(self, other: XY) -> XY:
        """Size of ``self`` with ``other`` placed below it."""
        return XY(max(self.x, other.x), self.y + other.y)


class Rect(NamedTuple):
    """A screen rectangle in character cells."""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_size(cls, position: XY, size: XY) -> Rect:
        return cls(position.x, position.y, size.x, size.y)

    @classmethod
    def zero(cls) -> Rect:
        return cls(0, 0, 0, 0)


@dataclass
class Element:
    """A piece of renderer output: text, style and an optional link target."""
    text: str
    style: Style = field(default_factory=Style.null)
    link_target: Optional[str] = None

    @classmethod
    def plain(cls, text: str) -> Element:
        return cls(text)

    @classmethod
    def styled(cls, text: str, style: Style) -> Element:
        return cls(text, style)

    @classmethod
    def link(cls, text: str, style: Style, target: str) -> Element:
        return cls(text, style, target)


@dataclass
class RenderedElement:
    """An element stored in a document line."""
    text: str
    style: Style
    link_idx: Optional[int] = None  # index into the owning document's links


@dataclass
class Link:
    """A link registered while building a document."""
    position: XY   # column and row of the first cell
    width: int     # width in cells
    target: str
