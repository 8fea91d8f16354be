"""CLI entry point for the markup browser."""

from __future__ import annotations

import logging
from typing import Optional

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler

console = Console()


@click.group()
@click.version_option(package_name="markup-view")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool):
    """markup-browser - Browse HTML pages in the terminal."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _max_width(value: Optional[int]) -> int:
    from browser.config import get_max_width

    return value if value is not None else get_max_width()


@cli.command("open")
@click.argument("reference")
@click.option("--max-width", default=None, type=click.IntRange(min=1),
              help="Maximum line width (default: MARKUP_MAX_WIDTH or 120).")
def open_cmd(reference: str, max_width: Optional[int]):
    """Open a page in the interactive browser.

    REFERENCE: URL or path to a local HTML file

    Arrow keys move between links, Enter follows a link, Backspace goes
    back, PgUp/PgDn scroll and q quits.
    """
    from browser.app import Browser

    try:
        browser = Browser(console=console, max_width=_max_width(max_width))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)
    browser.run(reference)


@cli.command()
@click.argument("reference")
@click.option("--width", "-w", default=None, type=click.IntRange(min=1),
              help="Line width (default: MARKUP_MAX_WIDTH or 120).")
@click.option("--links", "show_links", is_flag=True, default=False, help="List the links after the page.")
def dump(reference: str, width: Optional[int], show_links: bool):
    """Render a page to the terminal without interaction.

    REFERENCE: URL or path to a local HTML file
    """
    from browser.fetcher import fetch_page
    from browser.renderer import render_document, render_link_list
    from markup_view.view import MarkupView

    try:
        page = fetch_page(reference)
        line_width = _max_width(width)
    except (httpx.HTTPError, ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)

    view = MarkupView.html(page.text)
    render_document(view, line_width, title=view.renderer.title)
    if show_links:
        console.print()
        render_link_list(view)


# ---------------------------------------------------------------------------
# markup-browser env
# ---------------------------------------------------------------------------


@cli.group(invoke_without_command=True)
@click.pass_context
def env(ctx):
    """Show or configure settings.

    Run without arguments to see current status.
    Use `markup-browser env set KEY value` to save a setting to ~/.markup-browser/.env.
    """
    if ctx.invoked_subcommand is not None:
        return

    from browser.config import PERSISTENT_ENV, check_env

    statuses = check_env()
    console.print("Settings:")
    console.print()
    for var, is_set, info in statuses:
        status = "[green]set[/green]" if is_set else f"[dim]default ({info['default']})[/dim]"
        console.print(f"  {var}: {status}")
        console.print(f"    {info['description']}", style="dim")
        console.print()

    console.print(f"Config file: {PERSISTENT_ENV}", style="dim")


@env.command("set")
@click.argument("key")
@click.argument("value")
def env_set(key: str, value: str):
    """Save a setting to ~/.markup-browser/.env.

    KEY: one of MARKUP_MAX_WIDTH, MARKUP_TIMEOUT, MARKUP_USER_AGENT
    VALUE: the setting's value
    """
    from browser.config import VALID_KEYS, save_key, validate

    key = key.upper()
    if key not in VALID_KEYS:
        console.print(f"[red]Unknown key: {key}[/red]")
        console.print(f"Valid keys: {', '.join(sorted(VALID_KEYS))}")
        raise SystemExit(1)

    try:
        validate(key, value)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)

    path = save_key(key, value)
    console.print(f"[green]Saved {key} to {path}[/green]")
