"""Load pages from the web or from local files."""

from __future__ import annotations

import html
import logging
from pathlib import Path
from urllib.parse import urljoin, urlparse
from urllib.request import url2pathname

import httpx
from tenacity import retry, retry_if_result, stop_after_attempt, wait_exponential

from browser.config import get_timeout, get_user_agent
from browser.models import Page

logger = logging.getLogger(__name__)

LOCAL_SUFFIXES = {".html": "text/html", ".htm": "text/html", ".txt": "text/plain"}

# Retried with backoff before giving up.
RETRY_STATUS = {429, 503}


def _log_retry(retry_state) -> None:
    logger.warning("Server busy, retrying (attempt %d)", retry_state.attempt_number)


@retry(
    retry=retry_if_result(lambda r: r.status_code in RETRY_STATUS),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    before_sleep=_log_retry,
    retry_error_callback=lambda retry_state: retry_state.outcome.result(),
)
def _get(url: str, **kwargs) -> httpx.Response:
    return httpx.get(url, **kwargs)


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def _to_html(text: str, content_type: str) -> str:
    """Return HTML for supported content, wrapping plain text in <pre>."""
    media_type = _media_type(content_type)
    if media_type in ("text/html", "application/xhtml+xml"):
        return text
    if media_type == "text/plain":
        return f"<pre>{html.escape(text)}</pre>"
    raise ValueError(f"Unsupported content type: {content_type}")


def _load_file(path: Path, url: str) -> Page:
    content_type = LOCAL_SUFFIXES.get(path.suffix.lower())
    if content_type is None:
        raise ValueError(f"Unsupported file type: {path.name}")
    text = path.read_text(errors="replace")
    return Page(url=url, content_type=content_type, text=_to_html(text, content_type))


def fetch_page(reference: str) -> Page:
    """Fetch a page, returning it with its content converted to HTML.

    Accepts http(s) URLs, file:// URLs and local file paths.
    """
    reference = reference.strip()
    parsed = urlparse(reference)

    if parsed.scheme == "file":
        path = Path(url2pathname(parsed.path))
        return _load_file(path, reference)

    if parsed.scheme in ("http", "https"):
        logger.info("Fetching %s", reference)
        response = _get(
            reference,
            follow_redirects=True,
            timeout=get_timeout(),
            headers={"User-Agent": get_user_agent()},
        )
        response.raise_for_status()
        content_type = response.headers.get("content-type", "text/html")
        return Page(
            url=str(response.url),
            content_type=content_type,
            text=_to_html(response.text, content_type),
        )

    path = Path(reference).expanduser()
    if path.is_file():
        path = path.resolve()
        return _load_file(path, path.as_uri())

    raise ValueError(
        f"Could not open reference: {reference}\n"
        "Accepted formats: https://example.com, file:///path/page.html, /path/to/page.html"
    )


def resolve_link(base: str, target: str) -> str:
    """Resolve a link target relative to the page it appears on."""
    return urljoin(base, target)
