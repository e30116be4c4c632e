"""Unit tests for core/outline.py"""

from pagemark.core.models import Heading, OutlineEntry, Page, Paragraph
from pagemark.core.outline import bind_pages, outline_from_blocks
from pagemark.core.paginate import paginate
from pagemark.core.parse import parse_document


def _heading(n: int, level: int = 1) -> Heading:
    return Heading(level=level, id=f"h{n}", text=f"H{n}", inline_content=f"H{n}")


def test_outline_from_blocks():
    """Headings map to unresolved entries in order."""
    blocks = [_heading(1), Paragraph(inline_content="x"), _heading(2, level=3)]
    assert outline_from_blocks(blocks) == [
        OutlineEntry(id="h1", text="H1", level=1),
        OutlineEntry(id="h2", text="H2", level=3),
    ]


def test_bind_resolves_pages():
    """Each entry gets the index of the page holding its heading."""
    pages = [
        Page(index=0, blocks=[_heading(1), Paragraph(inline_content="x")], size=2),
        Page(index=1, blocks=[_heading(2)], size=1),
    ]
    outline = outline_from_blocks([_heading(1), _heading(2)])
    assert [e.page_index for e in bind_pages(pages, outline)] == [0, 1]


def test_bind_does_not_mutate_input():
    """The input outline keeps its unresolved entries."""
    pages = [Page(index=0, blocks=[_heading(1)], size=1)]
    outline = [OutlineEntry(id="h1", text="H1", level=1)]
    bind_pages(pages, outline)
    assert outline[0].page_index is None


def test_missing_heading_defaults_to_first_page():
    """Entries with no matching heading fall back to page 0."""
    pages = [Page(index=0, blocks=[Paragraph(inline_content="x")], size=1)]
    resolved = bind_pages(pages, [OutlineEntry(id="h9", text="gone", level=2)])
    assert resolved[0].page_index == 0


def test_stale_page_index_is_ignored():
    """A previously resolved index does not survive a new run."""
    pages = [
        Page(index=0, blocks=[Paragraph(inline_content="x")], size=1),
        Page(index=1, blocks=[_heading(1)], size=1),
    ]
    stale = [OutlineEntry(id="h1", text="H1", level=1, page_index=7)]
    assert bind_pages(pages, stale)[0].page_index == 1


def test_no_pages():
    """An empty document resolves every entry to page 0."""
    outline = [OutlineEntry(id="h1", text="H1", level=1)]
    assert bind_pages([], outline)[0].page_index == 0


def test_outline_follows_pagination(sample_book):
    """Every resolved page actually contains the heading."""
    parsed = parse_document(sample_book)
    pages = paginate(parsed.blocks, 25, lambda b: 10.0)
    for entry in bind_pages(pages, parsed.outline):
        ids = [b.id for b in pages[entry.page_index].blocks if isinstance(b, Heading)]
        assert entry.id in ids
