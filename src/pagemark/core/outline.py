"""Outline resolution: map each heading's outline entry to the page holding it"""

from typing import Sequence

from pagemark.core.models import Block, Heading, OutlineEntry, Page


def outline_from_blocks(blocks: Sequence[Block]) -> list[OutlineEntry]:
    """Rebuild the unresolved outline from heading blocks, in document order."""
    return [
        OutlineEntry(id=b.id, text=b.text, level=b.level)
        for b in blocks
        if isinstance(b, Heading)
    ]


def bind_pages(pages: Sequence[Page], outline: Sequence[OutlineEntry]) -> list[OutlineEntry]:
    """Return a new outline with page indexes resolved; inputs are not mutated.

    The first page containing a heading id wins. Entries whose heading is on no
    page fall back to page 0. Any page index already present on the input is
    ignored so every run starts from a clean state.
    """
    located: dict[str, int] = {}
    for page_index, page in enumerate(pages):
        for block in page.blocks:
            if isinstance(block, Heading):
                located.setdefault(block.id, page_index)
    return [entry.model_copy(update={"page_index": located.get(entry.id, 0)}) for entry in outline]
