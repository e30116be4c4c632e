"""HTML rendering of blocks, pages, and the table of contents"""

from typing import Callable, Sequence

from markdown_it.common.utils import escapeHtml

from pagemark.core.models import (
    Block, Blockquote, CodeBlock, Heading, Image, ListBlock, ListKind,
    MetaInfo, OutlineEntry, Page, PageBreakMarker, Paragraph,
)


def _heading(b: Heading) -> str:
    return f'<h{b.level} id="{b.id}">{b.inline_content}</h{b.level}>'


def _paragraph(b: Paragraph) -> str:
    cls = ' class="indented"' if b.indented else ''
    return f'<p{cls}>{b.inline_content}</p>'


def _list(b: ListBlock) -> str:
    tag = 'ol' if b.list_kind is ListKind.ordered else 'ul'
    items = ''.join(f'<li>{item}</li>' for item in b.items)
    return f'<{tag} class="md-list">{items}</{tag}>'


def _blockquote(b: Blockquote) -> str:
    return '<blockquote>' + ''.join(f'<p>{item}</p>' for item in b.items) + '</blockquote>'


def _code(b: CodeBlock) -> str:
    body = escapeHtml('\n'.join(b.raw_lines))
    return f'<pre class="code-block"><code class="language-{escapeHtml(b.language)}">{body}</code></pre>'


def _image(b: Image) -> str:
    caption = f'<p class="image-caption">{b.caption}</p>' if b.caption else ''
    return (
        f'<div class="image-container">'
        f'<img src="{escapeHtml(b.src)}" alt="{escapeHtml(b.alt)}" loading="lazy">'
        f'{caption}</div>'
    )


def _meta(b: MetaInfo) -> str:
    return '<p class="meta">' + ''.join(f'<span>{escapeHtml(e)}</span>' for e in b.entries) + '</p>'


def _page_break(b: PageBreakMarker) -> str:
    return '<div class="page-break"></div>'


RENDERERS: dict[type, Callable] = {
    Heading: _heading,
    Paragraph: _paragraph,
    ListBlock: _list,
    Blockquote: _blockquote,
    CodeBlock: _code,
    Image: _image,
    MetaInfo: _meta,
    PageBreakMarker: _page_break,
}


def render_block(block: Block) -> str:
    return RENDERERS[type(block)](block)


def render_tree(blocks: Sequence[Block]) -> str:
    """Render the whole markup tree as one HTML string, page breaks included."""
    return ''.join(render_block(b) for b in blocks)


def render_page(page: Page) -> str:
    body = ''.join(render_block(b) for b in page.blocks)
    return f'<div class="page" data-page="{page.index}"><div class="page-content">{body}</div></div>'


def render_toc(outline: Sequence[OutlineEntry]) -> str:
    """Navigable contents list; page numbers are the resolved 0-based indexes."""
    if not outline:
        return '<p class="toc-empty">No contents</p>'
    items = ''.join(
        f'<div class="toc-item toc-level-{e.level}" data-id="{e.id}" data-page="{e.page_index}">'
        f'{escapeHtml(e.text)}</div>'
        for e in outline
    )
    return f'<nav class="toc">{items}</nav>'
