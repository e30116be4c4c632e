"""Line-oriented block parser: raw document text -> blocks + unresolved outline"""

import logging
import re
from enum import Enum
from typing import Optional

from pagemark.core.errors import InputError
from pagemark.core.inline import format_inline
from pagemark.core.models import (
    Block, Blockquote, CodeBlock, Heading, Image, ListBlock, ListKind,
    MetaInfo, OutlineEntry, PageBreakMarker, Paragraph, ParseResult,
)


logger = logging.getLogger(__name__)

INDENT       = "    "
FENCE        = "```"
META_PREFIX  = "@ "
QUOTE_PREFIX = "> "

BREAK_RE    = re.compile(r"^[-*_]{3,}$")
HEADING_RE  = re.compile(r"^(#{1,6})\s+(.*)")
IMAGE_RE    = re.compile(r"!\[(.*?)\]\((.*?)\)")
EXTERNAL_RE = re.compile(r"^(https?:)?//", re.IGNORECASE)
BULLET_RE   = re.compile(r"^[-*+]\s")
ORDERED_RE  = re.compile(r"^\d+[.)]\s+")


class State(str, Enum):
    """Mutually exclusive block states; a paragraph accumulates in `normal`."""
    normal = "normal"
    code = "code"
    quote = "quote"
    list = "list"


class BlockParser:
    """Explicit parse state for one document; feed lines in order, then finish().

    Every block type change flushes the open accumulator first, and flushing an
    empty accumulator is a no-op.
    """

    def __init__(self, image_base: str = "images/"):
        self.image_base = image_base
        self.state = State.normal
        self.blocks: list[Block] = []
        self.outline: list[OutlineEntry] = []

        self._paragraph: list[str] = []
        self._indented = False
        self._list_kind: Optional[ListKind] = None
        self._list_items: list[str] = []
        self._quote_items: list[str] = []
        self._code_language = ""
        self._code_lines: list[str] = []
        self._meta: list[str] = []
        self._title_at: Optional[int] = None    # block index of the first level-1 heading
        self._headings = 0

    # --- accumulators ---

    def _flush_paragraph(self) -> None:
        if self._paragraph:
            self.blocks.append(Paragraph(
                inline_content=format_inline(" ".join(self._paragraph)),
                indented=self._indented,
            ))
        self._paragraph = []
        self._indented = False

    def _flush_list(self) -> None:
        if self._list_items:
            self.blocks.append(ListBlock(list_kind=self._list_kind, items=self._list_items))
        self._list_items = []
        self._list_kind = None
        if self.state is State.list:
            self.state = State.normal

    def _close_quote(self) -> None:
        if self._quote_items:
            self.blocks.append(Blockquote(items=self._quote_items))
        self._quote_items = []
        if self.state is State.quote:
            self.state = State.normal

    def _flush_open(self) -> None:
        self._flush_list()
        self._flush_paragraph()
        self._close_quote()

    def _close_code(self) -> None:
        self.blocks.append(CodeBlock(language=self._code_language, raw_lines=self._code_lines))
        self._code_language = ""
        self._code_lines = []
        self.state = State.normal

    # --- line handlers ---

    def _heading(self, level: int, text: str) -> None:
        self._flush_open()
        self._headings += 1
        heading_id = f"h{self._headings}"
        self.blocks.append(Heading(
            level=level, id=heading_id, text=text, inline_content=format_inline(text),
        ))
        self.outline.append(OutlineEntry(id=heading_id, text=text, level=level))
        if level == 1 and self._title_at is None:
            self._title_at = len(self.blocks) - 1

    def _image(self, alt: str, src: str) -> None:
        self._flush_open()
        external = bool(EXTERNAL_RE.match(src))
        self.blocks.append(Image(
            alt=alt,
            src=src if external else f"{self.image_base}{src}",
            is_external=external,
            caption=format_inline(alt),
        ))

    def _list_item(self, kind: ListKind, text: str) -> None:
        self._flush_paragraph()
        self._close_quote()
        if self._list_kind is not None and self._list_kind is not kind:
            self._flush_list()
        self.state = State.list
        self._list_kind = kind
        self._list_items.append(format_inline(text))

    def _quote_line(self, text: str) -> None:
        if self.state is not State.quote:
            self._flush_list()
            self._flush_paragraph()
            self.state = State.quote
        if text:
            self._quote_items.append(format_inline(text))

    def _text(self, text: str, indented: bool) -> None:
        self._flush_list()
        self._close_quote()
        if self._paragraph and indented != self._indented:
            self._flush_paragraph()
        if not self._paragraph:
            self._indented = indented
        self._paragraph.append(text)

    def feed(self, line: str) -> None:
        """Classify one source line against the current state."""
        trimmed = line.strip()

        if self.state is State.code:
            if trimmed.startswith(FENCE):
                self._close_code()
            else:
                self._code_lines.append(line)
            return

        if trimmed.startswith(FENCE):
            self._flush_open()
            self.state = State.code
            self._code_language = trimmed[len(FENCE):].strip()
            return

        if BREAK_RE.match(trimmed):
            self._flush_open()
            self.blocks.append(PageBreakMarker())
            return

        if not trimmed:
            self._flush_open()
            return

        if m := HEADING_RE.match(trimmed):
            self._heading(len(m.group(1)), m.group(2).strip())
        elif trimmed.startswith(META_PREFIX):
            self._flush_open()
            self._meta.append(trimmed[len(META_PREFIX):])
        elif m := IMAGE_RE.search(trimmed):
            self._image(m.group(1), m.group(2))
        elif BULLET_RE.match(trimmed):
            self._list_item(ListKind.unordered, trimmed[2:].strip())
        elif m := ORDERED_RE.match(trimmed):
            self._list_item(ListKind.ordered, trimmed[m.end():].strip())
        elif trimmed.startswith(QUOTE_PREFIX):
            self._quote_line(trimmed[len(QUOTE_PREFIX):].strip())
        else:
            self._text(trimmed, line.startswith(INDENT))

    def finish(self) -> ParseResult:
        """Flush whatever is still open and place meta info after the title heading."""
        self._flush_list()
        self._flush_paragraph()
        self._close_quote()
        if self.state is State.code:
            self._close_code()

        blocks = list(self.blocks)
        if self._meta and self._title_at is not None:
            blocks.insert(self._title_at + 1, MetaInfo(entries=self._meta))
        return ParseResult(blocks=blocks, outline=list(self.outline))


def parse_document(text: Optional[str], image_base: str = "images/") -> ParseResult:
    """Parse a complete document into blocks and an unresolved outline.

    Raises InputError for missing or blank input; malformed markup never raises.
    """
    if text is None:
        raise InputError("No document text was supplied")
    if not text.strip():
        raise InputError("Document is empty")

    parser = BlockParser(image_base)
    for line in text.removesuffix("\n").split("\n"):
        parser.feed(line.rstrip("\r"))
    result = parser.finish()
    logger.debug("Parsed %d blocks, %d headings", len(result.blocks), len(result.outline))
    return result
