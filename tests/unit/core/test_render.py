"""Unit tests for core/render.py"""

import pytest

from pagemark.core.models import (
    Blockquote, CodeBlock, Heading, Image, ListBlock, ListKind,
    MetaInfo, OutlineEntry, Page, PageBreakMarker, Paragraph,
)
from pagemark.core.render import render_block, render_page, render_toc, render_tree


@pytest.mark.parametrize("block,expected", [
    (Heading(level=2, id="h3", text="T", inline_content="<em>T</em>"), '<h2 id="h3"><em>T</em></h2>'),
    (Paragraph(inline_content="x"), "<p>x</p>"),
    (Paragraph(inline_content="x", indented=True), '<p class="indented">x</p>'),
    (ListBlock(list_kind=ListKind.unordered, items=["a", "b"]), '<ul class="md-list"><li>a</li><li>b</li></ul>'),
    (ListBlock(list_kind=ListKind.ordered, items=["a"]), '<ol class="md-list"><li>a</li></ol>'),
    (Blockquote(items=["a", "b"]), "<blockquote><p>a</p><p>b</p></blockquote>"),
    (MetaInfo(entries=["A & B"]), '<p class="meta"><span>A &amp; B</span></p>'),
    (PageBreakMarker(), '<div class="page-break"></div>'),
])
def test_render_block(block, expected):
    assert render_block(block) == expected


def test_code_block_is_escaped():
    """Code lines are escaped and joined with newlines."""
    html = render_block(CodeBlock(language="html", raw_lines=["<b>", "  & x"]))
    assert html == '<pre class="code-block"><code class="language-html">&lt;b&gt;\n  &amp; x</code></pre>'


def test_image_with_caption():
    html = render_block(Image(alt='A "cat"', src="images/c.png", caption="A cat"))
    assert '<img src="images/c.png" alt="A &quot;cat&quot;" loading="lazy">' in html
    assert '<p class="image-caption">A cat</p>' in html


def test_image_without_caption():
    assert "image-caption" not in render_block(Image(alt="", src="a.png"))


def test_render_tree_concatenates():
    blocks = [Paragraph(inline_content="a"), PageBreakMarker(), Paragraph(inline_content="b")]
    assert render_tree(blocks) == '<p>a</p><div class="page-break"></div><p>b</p>'


def test_render_page():
    page = Page(index=2, blocks=[Paragraph(inline_content="a")], size=1)
    assert render_page(page) == '<div class="page" data-page="2"><div class="page-content"><p>a</p></div></div>'


def test_toc_empty():
    assert render_toc([]) == '<p class="toc-empty">No contents</p>'


def test_toc_entries():
    """Entries carry level, id and resolved page; text is escaped."""
    outline = [
        OutlineEntry(id="h1", text="Intro", level=1, page_index=0),
        OutlineEntry(id="h2", text="A <b> & c", level=2, page_index=3),
    ]
    html = render_toc(outline)
    assert html.startswith('<nav class="toc">')
    assert '<div class="toc-item toc-level-1" data-id="h1" data-page="0">Intro</div>' in html
    assert '<div class="toc-item toc-level-2" data-id="h2" data-page="3">A &lt;b&gt; &amp; c</div>' in html
