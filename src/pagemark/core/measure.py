"""Block measurement: deterministic height estimates and precomputed size tables"""

import html
import math
import re
from typing import Optional, Sequence

from pagemark.config import Settings
from pagemark.core.models import (
    Block, Blockquote, CodeBlock, Heading, Image, ListBlock, MetaInfo, Paragraph,
)
from pagemark.core.paginate import Measure


TAG_RE = re.compile(r"<[^>]+>")
BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)

# Relative type size per heading level.
HEADING_SCALE = {1: 2.0, 2: 1.6, 3: 1.35, 4: 1.2, 5: 1.1, 6: 1.0}


def visible_text(markup: str) -> str:
    """Strip tags from inline markup; line-break markers become newlines."""
    return html.unescape(TAG_RE.sub("", BR_RE.sub("\n", markup)))


class EstimateMeasurer:
    """Estimate rendered block height from wrapped line counts.

    Stands in for a real layout engine when pages are built offline; the
    estimate is deterministic so repeated runs paginate identically.
    """

    def __init__(
        self,
        chars_per_line: int = 60,
        line_height: float = 24.0,
        block_spacing: float = 16.0,
        image_height: float = 240.0,
        ):
        self.chars_per_line = chars_per_line
        self.line_height = line_height
        self.block_spacing = block_spacing
        self.image_height = image_height

    @classmethod
    def from_settings(cls, settings: Settings) -> "EstimateMeasurer":
        return cls(
            chars_per_line=settings.chars_per_line,
            line_height=settings.line_height,
            block_spacing=settings.block_spacing,
            image_height=settings.image_height,
        )

    def _lines(self, markup: str, chars_per_line: Optional[int] = None) -> int:
        width = chars_per_line or self.chars_per_line
        return sum(max(1, math.ceil(len(part) / width)) for part in visible_text(markup).split("\n"))

    def _text_height(self, block: Block) -> float:
        if isinstance(block, Heading):
            scale = HEADING_SCALE[block.level]
            width = max(1, int(self.chars_per_line / scale))
            return self._lines(block.inline_content, width) * self.line_height * scale
        if isinstance(block, Paragraph):
            return self._lines(block.inline_content) * self.line_height
        if isinstance(block, (ListBlock, Blockquote)):
            return sum(self._lines(item) for item in block.items) * self.line_height
        if isinstance(block, CodeBlock):
            return max(1, len(block.raw_lines)) * self.line_height
        if isinstance(block, Image):
            caption = self._lines(block.caption) * self.line_height if block.caption else 0.0
            return self.image_height + caption
        if isinstance(block, MetaInfo):
            return self._lines(" ".join(block.entries)) * self.line_height
        raise TypeError(f"Cannot measure a {block.kind} block")

    def __call__(self, block: Block) -> float:
        return self._text_height(block) + self.block_spacing


def table_measurer(blocks: Sequence[Block], sizes: Sequence[Optional[float]]) -> Measure:
    """Turn sizes aligned with `blocks` (e.g. from measure_blocks) into a measure function.

    Lookup is by block identity, so the same block objects must be paginated.
    """
    table = {id(b): s for b, s in zip(blocks, sizes) if s is not None}

    def measure(block: Block) -> float:
        return table[id(block)]

    return measure
