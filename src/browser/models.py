"""Data models for fetched pages."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Page:
    """A document loaded from the web or from disk."""

    url: str
    content_type: str = "text/html"
    text: str = ""
