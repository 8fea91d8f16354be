"""A renderer for HTML documents.

The document is parsed once, when the ``HtmlRenderer`` is created, into
blocks of annotated text.  Every call to ``render`` wraps those blocks to the
requested width.  A ``Converter`` interprets the annotations: it picks the
rich style for each one and extracts link targets.  ``RichConverter`` is
used unless a custom converter is given.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from html.parser import HTMLParser
from typing import Iterator, Optional, Protocol

from rich.cells import cell_len
from rich.style import Style

from markup_view.document import RenderedDocument
from markup_view.models import XY, Element

# Narrower constraints are rendered at this width anyway.
MIN_WIDTH = 5

RULE_CHAR = "─"


class AnnotationKind(Enum):
    DEFAULT = "default"
    LINK = "link"
    IMAGE = "image"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    STRIKEOUT = "strikeout"
    CODE = "code"
    PREFORMAT = "preformat"


@dataclass(frozen=True)
class Annotation:
    """Markup that applies to a piece of text."""
    kind: AnnotationKind
    target: str = ""  # href for links


@dataclass
class TaggedString:
    """A piece of text and the annotations that apply to it."""
    text: str
    tags: tuple[Annotation, ...] = ()


class Converter(Protocol):
    """Extracts the style and the link target from annotations."""

    def get_style(self, annotation: Annotation) -> Optional[Style]:
        ...

    def get_link(self, annotation: Annotation) -> Optional[str]:
        ...


class RichConverter:
    """Default converter.

    Besides the obvious text effects, links are underlined and code is shown
    in the secondary colour.
    """

    STYLES: dict[AnnotationKind, Style] = {
        AnnotationKind.LINK: Style(underline=True),
        AnnotationKind.EMPHASIS: Style(italic=True),
        AnnotationKind.STRONG: Style(bold=True),
        AnnotationKind.STRIKEOUT: Style(strike=True),
        AnnotationKind.CODE: Style(color="cyan"),
    }

    def get_style(self, annotation: Annotation) -> Optional[Style]:
        return self.STYLES.get(annotation.kind)

    def get_link(self, annotation: Annotation) -> Optional[str]:
        if annotation.kind is AnnotationKind.LINK:
            return annotation.target
        return None


# ------------------------------------------------------------------
# Parsing
# ------------------------------------------------------------------

_INLINE_KINDS: dict[str, AnnotationKind] = {
    "a": AnnotationKind.LINK,
    "em": AnnotationKind.EMPHASIS,
    "i": AnnotationKind.EMPHASIS,
    "cite": AnnotationKind.EMPHASIS,
    "strong": AnnotationKind.STRONG,
    "b": AnnotationKind.STRONG,
    "s": AnnotationKind.STRIKEOUT,
    "strike": AnnotationKind.STRIKEOUT,
    "del": AnnotationKind.STRIKEOUT,
    "code": AnnotationKind.CODE,
    "kbd": AnnotationKind.CODE,
    "samp": AnnotationKind.CODE,
    "tt": AnnotationKind.CODE,
}

_HEADINGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}

# Start a new line.
_BLOCK_TAGS = {
    "p", "div", "section", "article", "header", "footer", "nav", "main",
    "aside", "figure", "figcaption", "table", "tr", "dl", "dt", "dd",
    "form", "address", "details", "summary",
}

# Also separated from their surroundings by a blank line.
_GAP_TAGS = {"p", "table", "dl", "figure", "details"}

_SKIP_TAGS = {"script", "style", "title", "template", "noscript"}


@dataclass
class Block:
    """A run of text laid out as one unit: a paragraph, list item, heading..."""
    runs: list[TaggedString] = field(default_factory=list)
    prefix: str = ""    # first line
    indent: str = ""    # following lines
    preformatted: bool = False
    rule: bool = False
    gap: bool = False   # blank line before the block

    def has_content(self) -> bool:
        return self.rule or any(run.text == "\n" or run.text.strip() for run in self.runs)


class _BlockParser(HTMLParser):
    """Collects the blocks of an HTML document."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.blocks: list[Block] = []
        self.title = ""
        self._tags: list[tuple[str, Annotation]] = []
        self._lists: list[list] = []  # [ordered, item counter] per open list
        self._quote_depth = 0
        self._pre_depth = 0
        self._pre_start = False
        self._skip: list[str] = []
        self._cells = 0
        self._gap = False
        self._marker: Optional[tuple[str, str]] = None  # (prefix, indent) of an item without text yet
        self._block = self._new_block()

    def _base_indent(self) -> str:
        return "> " * self._quote_depth + "  " * len(self._lists)

    def _new_block(self) -> Block:
        indent = self._base_indent()
        return Block(prefix=indent, indent=indent, preformatted=self._pre_depth > 0)

    def _flush(self) -> None:
        if self._block.has_content():
            self._block.gap = self._gap and bool(self.blocks)
            self.blocks.append(self._block)
            self._gap = False
            self._marker = None
        self._block = self._new_block()
        if self._marker is not None:
            self._block.prefix, self._block.indent = self._marker

    def _append(self, text: str, *extra: Annotation) -> None:
        tags = tuple(annotation for _, annotation in self._tags) + extra
        if self._pre_depth:
            tags += (Annotation(AnnotationKind.PREFORMAT),)
        self._block.runs.append(TaggedString(text, tags))

    def _pop_tag(self, tag: str) -> None:
        for i in range(len(self._tags) - 1, -1, -1):
            if self._tags[i][0] == tag:
                del self._tags[i]
                return

    def handle_starttag(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> None:
        if tag in _SKIP_TAGS:
            self._skip.append(tag)
            return
        attributes = dict(attrs)

        if tag in _INLINE_KINDS:
            kind = _INLINE_KINDS[tag]
            if kind is AnnotationKind.LINK:
                href = attributes.get("href")
                if not href:
                    return
                self._tags.append((tag, Annotation(kind, href)))
            else:
                self._tags.append((tag, Annotation(kind)))
        elif tag == "br":
            self._append("\n")
        elif tag == "img":
            alt = attributes.get("alt")
            if alt:
                self._append(f"[{alt}]", Annotation(AnnotationKind.IMAGE))
        elif tag == "hr":
            self._flush()
            self._gap = True
            self._block.rule = True
            self._flush()
            self._gap = True
        elif tag in _HEADINGS:
            self._flush()
            self._gap = True
            self._block.prefix += "#" * _HEADINGS[tag] + " "
            self._tags.append((tag, Annotation(AnnotationKind.STRONG)))
        elif tag in ("ul", "ol"):
            self._flush()
            if not self._lists:
                self._gap = True
            self._lists.append([tag == "ol", 0])
            self._marker = None
            self._block = self._new_block()
        elif tag == "li":
            self._flush()
            if self._lists and self._lists[-1][0]:
                self._lists[-1][1] += 1
                marker = f"{self._lists[-1][1]}. "
            else:
                marker = "* "
            base = "> " * self._quote_depth + "  " * max(len(self._lists) - 1, 0)
            self._marker = (base + marker, base + " " * len(marker))
            self._block.prefix, self._block.indent = self._marker
        elif tag == "blockquote":
            self._quote_depth += 1
            self._flush()
            self._gap = True
        elif tag == "pre":
            self._pre_depth += 1
            self._flush()
            self._gap = True
            self._pre_start = True
        elif tag in ("td", "th"):
            if self._cells:
                self._append(" | ")
            self._cells += 1
        elif tag in _BLOCK_TAGS:
            self._flush()
            if tag in _GAP_TAGS:
                self._gap = True
            if tag == "tr":
                self._cells = 0

    def handle_endtag(self, tag: str) -> None:
        if tag in _SKIP_TAGS:
            if tag in self._skip:
                self._skip.remove(tag)
            return

        if tag in _INLINE_KINDS:
            self._pop_tag(tag)
        elif tag in _HEADINGS:
            self._pop_tag(tag)
            self._flush()
            self._gap = True
        elif tag in ("ul", "ol"):
            if self._lists:
                self._lists.pop()
            self._flush()
            if not self._lists:
                self._gap = True
        elif tag == "li":
            self._marker = None
            self._flush()
        elif tag == "blockquote":
            self._quote_depth = max(self._quote_depth - 1, 0)
            self._flush()
            self._gap = True
        elif tag == "pre":
            self._pre_depth = max(self._pre_depth - 1, 0)
            self._flush()
            self._gap = True
        elif tag in _BLOCK_TAGS:
            self._flush()
            if tag in _GAP_TAGS:
                self._gap = True

    def handle_data(self, data: str) -> None:
        if self._skip:
            if self._skip[-1] == "title":
                self.title += data
            return
        if not self._pre_depth:
            # Only <br> breaks lines outside preformatted text.
            data = data.replace("\r", " ").replace("\n", " ")
        elif self._pre_start:
            # A newline right after <pre> is not part of the content.
            if data.startswith("\n"):
                data = data[1:]
            self._pre_start = False
        if data:
            self._append(data)

    def close(self) -> None:
        super().close()
        self._flush()


def parse(html: str) -> tuple[list[Block], str]:
    """Parse an HTML document into blocks; also returns the document title."""
    parser = _BlockParser()
    parser.feed(html)
    parser.close()
    return parser.blocks, " ".join(parser.title.split())


# ------------------------------------------------------------------
# Layout
# ------------------------------------------------------------------

_SPACE_RE = re.compile(r"(\s+)")


@dataclass
class _Word:
    pieces: list[TaggedString]
    space: Optional[tuple[Annotation, ...]]  # tags of the whitespace before the word


def _push(line: list[TaggedString], text: str, tags: tuple[Annotation, ...]) -> None:
    """Append text to a line, merging it with the last piece if the tags match."""
    if line and line[-1].tags == tags:
        line[-1] = TaggedString(line[-1].text + text, tags)
    else:
        line.append(TaggedString(text, tags))


def _with_prefix(line: list[TaggedString], prefix: str) -> list[TaggedString]:
    if not prefix:
        return line
    return [TaggedString(prefix)] + line


def _words(runs: list[TaggedString]) -> Iterator[Optional[_Word]]:
    """Split runs into words; ``None`` marks a hard line break."""
    pieces: list[TaggedString] = []
    space: Optional[tuple[Annotation, ...]] = None
    for run in runs:
        if run.text == "\n":
            if pieces:
                yield _Word(pieces, space)
            pieces, space = [], None
            yield None
            continue
        for part in _SPACE_RE.split(run.text):
            if not part:
                continue
            if part.isspace():
                if pieces:
                    yield _Word(pieces, space)
                    pieces = []
                space = run.tags
            else:
                pieces.append(TaggedString(part, run.tags))
    if pieces:
        yield _Word(pieces, space)


class _Wrapper:
    """Greedy word wrap by display width."""

    def __init__(self, width: int, prefix: str, indent: str):
        self.width = width
        self.prefix = prefix
        self.indent = indent
        self.lines: list[list[TaggedString]] = []
        self.line: list[TaggedString] = []
        self.x = 0

    @property
    def available(self) -> int:
        return max(1, self.width - cell_len(self.prefix))

    def break_line(self) -> None:
        self.lines.append(_with_prefix(self.line, self.prefix))
        self.line, self.x, self.prefix = [], 0, self.indent

    def add_word(self, word: _Word) -> None:
        width = sum(cell_len(piece.text) for piece in word.pieces)
        gap = 1 if self.line and word.space is not None else 0
        if self.line and self.x + gap + width > self.available:
            self.break_line()
            gap = 0
        if gap:
            _push(self.line, " ", word.space)
            self.x += 1

        for piece in word.pieces:
            piece_width = cell_len(piece.text)
            if self.x + piece_width <= self.available:
                _push(self.line, piece.text, piece.tags)
                self.x += piece_width
                continue
            # Longer than a line: split between characters.
            for char in piece.text:
                char_width = cell_len(char)
                if self.line and self.x + char_width > self.available:
                    self.break_line()
                _push(self.line, char, piece.tags)
                self.x += char_width

    def finish(self) -> list[list[TaggedString]]:
        if self.line:
            self.break_line()
        return self.lines


def _layout_preformatted(block: Block) -> list[list[TaggedString]]:
    lines: list[list[TaggedString]] = [[]]
    for run in block.runs:
        for i, part in enumerate(run.text.expandtabs(8).split("\n")):
            if i:
                lines.append([])
            if part:
                _push(lines[-1], part, run.tags)
    if len(lines) > 1 and not lines[-1]:
        lines.pop()
    return [
        _with_prefix(line, block.prefix if i == 0 else block.indent)
        for i, line in enumerate(lines)
    ]


def _layout_block(block: Block, width: int) -> list[list[TaggedString]]:
    if block.rule:
        return [_with_prefix([TaggedString(RULE_CHAR * max(1, width - cell_len(block.prefix)))],
                             block.prefix)]
    if block.preformatted:
        return _layout_preformatted(block)

    wrapper = _Wrapper(width, block.prefix, block.indent)
    for word in _words(block.runs):
        if word is None:
            wrapper.break_line()
        else:
            wrapper.add_word(word)
    return wrapper.finish()


def layout(blocks: list[Block], width: int) -> list[list[TaggedString]]:
    """Lay out parsed blocks as lines of at most ``width`` cells (except preformatted text)."""
    lines: list[list[TaggedString]] = []
    for block in blocks:
        if block.gap and lines:
            lines.append([])
        lines.extend(_layout_block(block, width))
    return lines


# ------------------------------------------------------------------
# Renderer
# ------------------------------------------------------------------

class HtmlRenderer:
    """Renders an HTML document.

    The HTML is parsed once, on construction; ``render`` only re-wraps the
    parsed blocks, so it is cheap enough to call on every width change.
    """

    def __init__(self, html: str, converter: Optional[Converter] = None):
        self._blocks, self._title = parse(html)
        self._converter = converter if converter is not None else RichConverter()

    @property
    def title(self) -> str:
        return self._title

    def render(self, constraint: XY) -> RenderedDocument:
        doc = RenderedDocument(constraint)
        for line in layout(self._blocks, max(MIN_WIDTH, constraint[0])):
            doc.push_line(self._convert(piece) for piece in line)
        return doc

    def _convert(self, piece: TaggedString) -> Element:
        styles = [
            style for style in (self._converter.get_style(a) for a in piece.tags)
            if style is not None
        ]
        link_target = next(
            (link for link in (self._converter.get_link(a) for a in piece.tags) if link is not None),
            None,
        )
        return Element(piece.text, sum(styles, Style.null()), link_target)
