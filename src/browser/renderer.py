"""Rich terminal output for rendered pages."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from markup_view.models import XY
from markup_view.view import MarkupView

console = Console()


def render_document(view: MarkupView, width: int, *, title: str = "") -> None:
    """Print the whole document, laid out for ``width`` columns."""
    size = view.required_size(XY(width, 0))
    if title:
        console.print(title, style="bold")
        console.print()
    for line in view.draw(focused=False):
        console.print(line, soft_wrap=True)
    console.print()
    console.print(f"{size.y} lines, {len(view.links)} links", style="dim")


def render_link_list(view: MarkupView) -> None:
    """Print every link of the document with a reference number."""
    links = view.links
    if not links:
        console.print("[yellow]No links found.[/yellow]")
        return

    console.print(f"Found {len(links)} links")
    console.print()
    for i, link in enumerate(links, 1):
        line = Text()
        line.append(f"[{i}] ", style="bold cyan")
        line.append(link.target)
        line.append(f"  (line {link.position.y + 1}, column {link.position.x + 1})", style="dim")
        console.print(line)
