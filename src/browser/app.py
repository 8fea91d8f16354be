"""A small interactive terminal browser built on ``MarkupView``.

The browser is the host side of the view contract: it lays the view out
before every frame, forwards arrow keys and Enter to it and runs the
callbacks the view hands back with itself as host state.  Selected links
are opened in a new history entry; Backspace goes back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import httpx
from rich.console import Console, Group
from rich.text import Text

from browser.config import get_max_width
from browser.fetcher import fetch_page, resolve_link
from browser.keys import read_key
from browser.models import Page
from markup_view.links import Relative
from markup_view.models import XY
from markup_view.view import Event, Key, MarkupView

logger = logging.getLogger(__name__)

STATUS_HEIGHT = 1
QUIT_KEYS = {"q", "Q"}


@dataclass
class Tab:
    """One entry of the browser history."""
    page: Page
    view: MarkupView
    scroll: int = 0
    follow_focus: bool = False  # scroll the focused link into view on the next frame


class Browser:
    """Keeps the history, the status line and the scroll position."""

    def __init__(
        self,
        console: Optional[Console] = None,
        fetch: Callable[[str], Page] = fetch_page,
        max_width: Optional[int] = None,
    ):
        self.console = console if console is not None else Console()
        self._fetch = fetch
        self.max_width = max_width if max_width is not None else get_max_width()
        self.history: list[Tab] = []
        self.status = ""
        self.running = True
        self._body_height = 1

    @property
    def current(self) -> Optional[Tab]:
        return self.history[-1] if self.history else None

    def set_status(self, text: str) -> None:
        self.status = text

    def open(self, reference: str) -> bool:
        """Fetch a page and push it onto the history."""
        try:
            page = self._fetch(reference)
        except (httpx.HTTPError, ValueError, OSError) as e:
            logger.warning("Failed to open %s: %s", reference, e)
            self.set_status(f"Error: {e}")
            return False

        view = MarkupView.html(page.text)
        view.set_maximum_width(self.max_width)
        view.on_link_select(lambda browser, target: browser.follow(target))
        view.on_link_focus(lambda browser, target: browser.set_status(f"Link target: {target}"))
        self.history.append(Tab(page=page, view=view))
        self.set_status(f"Opened URL: {page.url}")
        return True

    def follow(self, target: str) -> bool:
        tab = self.current
        url = resolve_link(tab.page.url, target) if tab is not None else target
        return self.open(url)

    def back(self) -> bool:
        if len(self.history) < 2:
            return False
        self.history.pop()
        self.set_status(f"Opened URL: {self.history[-1].page.url}")
        return True

    def handle_event(self, event: Event) -> None:
        if event in QUIT_KEYS:
            self.running = False
            return
        if event is Key.BACKSPACE:
            self.back()
            return

        tab = self.current
        if tab is None:
            return

        result = tab.view.on_event(event)
        if result.consumed:
            tab.follow_focus = True
            result.process(self)
            return

        page = max(1, self._body_height - 1)
        if event is Key.HOME:
            tab.scroll = 0
            tab.view.take_focus(Relative.FRONT)
        elif event is Key.END:
            tab.scroll = self._content_height(tab)
            tab.view.take_focus(Relative.BACK)
        elif event is Key.PAGE_DOWN or event == " ":
            tab.scroll += page
        elif event is Key.PAGE_UP:
            tab.scroll -= page
        elif event is Key.DOWN:
            tab.scroll += 1
        elif event is Key.UP:
            tab.scroll -= 1
        else:
            return
        self._focus_visible(tab)

    def _focus_visible(self, tab: Tab) -> None:
        """After scrolling, move the focus onto a link that is still on screen."""
        tab.follow_focus = False
        self._clamp_scroll(tab)
        if not tab.view.links:
            return
        top, bottom = tab.scroll, tab.scroll + self._body_height
        area = tab.view.important_area()
        if top <= area.y < bottom:
            return
        link_handler = tab.view.document.link_handler
        visible = [i for i, link in enumerate(link_handler.links) if top <= link.position.y < bottom]
        if visible:
            link_handler.focus = visible[0] if area.y < top else visible[-1]

    def _content_height(self, tab: Tab) -> int:
        size = tab.view.content_size
        return size.y if size is not None else 0

    def _clamp_scroll(self, tab: Tab) -> None:
        if tab.follow_focus and tab.view.links:
            area = tab.view.important_area()
            if area.y < tab.scroll:
                tab.scroll = area.y
            elif area.y >= tab.scroll + self._body_height:
                tab.scroll = area.y - self._body_height + 1
        tab.follow_focus = False
        limit = max(0, self._content_height(tab) - self._body_height)
        tab.scroll = min(max(tab.scroll, 0), limit)

    def frame(self, width: int, height: int) -> list[Text]:
        """Lay out the current page and return the visible lines plus the status line."""
        self._body_height = max(1, height - STATUS_HEIGHT)
        lines: list[Text] = []
        tab = self.current
        if tab is not None:
            tab.view.layout(XY(width, self._body_height))
            self._clamp_scroll(tab)
            lines = tab.view.draw()[tab.scroll:tab.scroll + self._body_height]
        lines += [Text() for _ in range(self._body_height - len(lines))]

        status = Text(self.status, style="reverse", no_wrap=True, overflow="ellipsis")
        status.truncate(width, overflow="ellipsis", pad=True)
        return lines + [status]

    def run(self, reference: str) -> None:
        """Open ``reference`` and process keys until the user quits."""
        self.open(reference)
        with self.console.screen(hide_cursor=True) as screen:
            while self.running:
                width, height = self.console.size
                screen.update(Group(*self.frame(width, height)))
                event = read_key()
                if event is not None:
                    self.handle_event(event)
