"""A view for hypertext that has been rendered by a ``Renderer``.

The view caches the rendered document and only asks the renderer for a new
one when the available width changes.  Arrow keys move the link focus and
Enter selects the focused link; both report back to the host through
callbacks that receive the host state and the link target.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, NamedTuple, Optional, Protocol, TypeVar, Union

from rich.style import Style
from rich.text import Text

from markup_view.document import RenderedDocument
from markup_view.html import HtmlRenderer
from markup_view.links import Absolute, Direction
from markup_view.models import XY, Link, Rect

logger = logging.getLogger(__name__)

# Combined with the style of the focused link when drawing.
HIGHLIGHT_STYLE = Style(reverse=True)


class Renderer(Protocol):
    """Produces a hypertext document for a size constraint."""

    def render(self, constraint: XY) -> RenderedDocument:
        ...


R = TypeVar("R", bound=Renderer)

# Called with the host state and the link target.
LinkCallback = Callable[[Any, str], None]


class Key(Enum):
    """Keys the host forwards to the view."""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    BACKSPACE = "backspace"
    ESCAPE = "escape"
    TAB = "tab"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"


Event = Union[Key, str]

_ARROWS = {
    Key.LEFT: Absolute.LEFT,
    Key.RIGHT: Absolute.RIGHT,
    Key.UP: Absolute.UP,
    Key.DOWN: Absolute.DOWN,
}


@dataclass
class EventResult:
    """Outcome of ``MarkupView.on_event``.

    ``callback`` is run by the host, right away, with its own state.
    """
    consumed: bool
    callback: Optional[Callable[[Any], None]] = None

    @classmethod
    def ignored(cls) -> EventResult:
        return cls(consumed=False)

    @classmethod
    def consumed_with(cls, callback: Optional[Callable[[Any], None]] = None) -> EventResult:
        return cls(consumed=True, callback=callback)

    def process(self, state: Any) -> None:
        if self.callback is not None:
            self.callback(state)


class DrawnElement(NamedTuple):
    text: str
    style: Style
    focused: bool


def _bind(callback: Optional[LinkCallback], target: str) -> Optional[Callable[[Any], None]]:
    if callback is None:
        return None
    return lambda state: callback(state, target)


class MarkupView(Generic[R]):
    """Displays a rendered hypertext document and lets the user navigate its links.

    The host must call ``layout`` (or ``required_size``) before drawing: the
    document only exists after the first render.
    """

    def __init__(self, renderer: R):
        self._renderer = renderer
        self._doc: Optional[RenderedDocument] = None
        self._on_link_focus: Optional[LinkCallback] = None
        self._on_link_select: Optional[LinkCallback] = None
        self._maximum_width: Optional[int] = None

    @classmethod
    def html(cls, html: str) -> MarkupView[HtmlRenderer]:
        """Create a view that renders an HTML document."""
        return cls(HtmlRenderer(html))

    @property
    def renderer(self) -> R:
        return self._renderer

    @property
    def document(self) -> Optional[RenderedDocument]:
        return self._doc

    def on_link_focus(self, callback: LinkCallback) -> None:
        """Set the callback triggered when the arrow keys move the link focus.

        It is not triggered when the view takes focus.
        """
        self._on_link_focus = callback

    def on_link_select(self, callback: LinkCallback) -> None:
        """Set the callback triggered when Enter is pressed on a focused link."""
        self._on_link_select = callback

    def set_maximum_width(self, width: int) -> None:
        """Limit the width that is passed to the renderer."""
        self._maximum_width = width

    def render(self, constraint: XY) -> XY:
        """Return the document size for ``constraint``, rendering only if the width changed."""
        constraint = XY(*constraint)
        if self._maximum_width is not None:
            constraint = XY(min(self._maximum_width, constraint.x), constraint.y)

        last_focus = 0
        if self._doc is not None:
            if self._doc.constraint.x == constraint.x:
                return self._doc.size
            last_focus = self._doc.link_handler.focus

        doc = self._renderer.render(constraint)
        # Re-rendering can split or join links, so the same index may now
        # point at a different link.
        if last_focus < len(doc.link_handler.links):
            doc.link_handler.focus = last_focus
        logger.debug(
            "Rendered %d lines at width %d (was %s), focus %d",
            len(doc.lines), constraint.x,
            self._doc.constraint.x if self._doc is not None else None,
            doc.link_handler.focus,
        )
        self._doc = doc
        return doc.size

    def layout(self, constraint: XY) -> None:
        self.render(constraint)

    def required_size(self, constraint: XY) -> XY:
        return self.render(constraint)

    @property
    def content_size(self) -> Optional[XY]:
        return self._doc.size if self._doc is not None else None

    @property
    def links(self) -> list[Link]:
        if self._doc is None:
            return []
        return list(self._doc.link_handler.links)

    @property
    def focus(self) -> Optional[int]:
        if self._doc is None or not self._doc.link_handler.links:
            return None
        return self._doc.link_handler.focus

    def lines(self, focused: bool = True) -> list[list[DrawnElement]]:
        """Draw data per line: text, style and whether it belongs to the focused link."""
        assert self._doc is not None, "layout not called before draw"
        focus = self._doc.link_handler.focus
        return [
            [
                DrawnElement(
                    element.text,
                    element.style,
                    focused and element.link_idx is not None and element.link_idx == focus,
                )
                for element in line
            ]
            for line in self._doc.lines
        ]

    def draw(self, focused: bool = True, highlight: Style = HIGHLIGHT_STYLE) -> list[Text]:
        """The document as rich ``Text`` lines, with the focused link highlighted."""
        rendered = []
        for line in self.lines(focused):
            text = Text(no_wrap=True)
            for element in line:
                style = element.style + highlight if element.focused else element.style
                text.append(element.text, style=style)
            rendered.append(text)
        return rendered

    def take_focus(self, direction: Direction) -> bool:
        if self._doc is None:
            return False
        return self._doc.link_handler.take_focus(direction)

    def on_event(self, event: Event) -> EventResult:
        if self._doc is None or not self._doc.link_handler.links:
            return EventResult.ignored()
        link_handler = self._doc.link_handler

        if event in _ARROWS:
            if not link_handler.move_focus(_ARROWS[event]):
                return EventResult.ignored()
            target = link_handler.links[link_handler.focus].target
            return EventResult.consumed_with(_bind(self._on_link_focus, target))

        if event is Key.ENTER:
            target = link_handler.links[link_handler.focus].target
            return EventResult.consumed_with(_bind(self._on_link_select, target))

        return EventResult.ignored()

    def important_area(self) -> Rect:
        if self._doc is None:
            return Rect.zero()
        return self._doc.link_handler.important_area()
