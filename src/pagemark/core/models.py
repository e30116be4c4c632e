"""Data models for the parse -> paginate -> bind pipeline"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class ListKind(str, Enum):
    """List flavours recognised by the block parser."""
    ordered = "ordered"
    unordered = "unordered"


class Heading(BaseModel):
    """An ATX heading; `text` is the raw title, `inline_content` the formatted markup."""
    kind: Literal["heading"] = "heading"
    level: int = Field(..., ge=1, le=6)
    id: str
    text: str
    inline_content: str


class Paragraph(BaseModel):
    kind: Literal["paragraph"] = "paragraph"
    inline_content: str
    indented: bool = False


class ListBlock(BaseModel):
    kind: Literal["list"] = "list"
    list_kind: ListKind = ListKind.unordered
    items: list[str] = Field(..., min_length=1)     # formatted markup per item


class Blockquote(BaseModel):
    kind: Literal["blockquote"] = "blockquote"
    items: list[str] = Field(..., min_length=1)


class CodeBlock(BaseModel):
    """Fenced code; lines are kept raw and escaped only when rendered."""
    kind: Literal["code"] = "code"
    language: str = ""
    raw_lines: list[str] = Field(default_factory=list)


class Image(BaseModel):
    kind: Literal["image"] = "image"
    alt: str = ""
    src: str
    is_external: bool = False
    caption: str = ""               # formatted alt text; empty when alt is empty


class PageBreakMarker(BaseModel):
    """Control block: forces a page boundary and is never placed on a page."""
    kind: Literal["page_break"] = "page_break"


class MetaInfo(BaseModel):
    kind: Literal["meta"] = "meta"
    entries: list[str] = Field(default_factory=list)    # verbatim, escaped at render time


Block = Annotated[
    Union[Heading, Paragraph, ListBlock, Blockquote, CodeBlock, Image, PageBreakMarker, MetaInfo],
    Field(discriminator="kind"),
]


class OutlineEntry(BaseModel):
    """Table-of-contents reference to a heading; page_index None means unresolved."""
    id: str
    text: str
    level: int = Field(..., ge=1, le=6)
    page_index: Optional[int] = None


class ParseResult(BaseModel):
    """Block parser output: the markup tree and its unresolved outline."""
    blocks: list[Block] = Field(default_factory=list)
    outline: list[OutlineEntry] = Field(default_factory=list)


class Page(BaseModel):
    """An ordered, non-empty run of blocks whose measured sizes sum to `size`."""
    index: int = Field(..., ge=0)
    blocks: list[Block] = Field(..., min_length=1)
    size: float = Field(default=0.0, ge=0)


class BookSource(BaseModel):
    """Raw document text plus display metadata, as handed to the parser."""
    title: str
    slug: str
    content: str


class Book(BaseModel):
    """A fully paginated document with its resolved outline."""
    title: str
    slug: str
    capacity: float
    blocks: list[Block] = Field(default_factory=list)
    pages: list[Page] = Field(default_factory=list)
    outline: list[OutlineEntry] = Field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)
