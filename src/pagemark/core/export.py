"""Export: paginated HTML book and sidecar JSON"""

import json
from pathlib import Path

from jinja2 import Environment, select_autoescape

from pagemark.core.models import Book
from pagemark.core.render import render_page, render_toc


BOOK_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
</head>
<body>
<aside id="tocPanel" class="toc-panel">{{ toc | safe }}</aside>
<main id="bookContent" class="book" data-pages="{{ pages | length }}">
{% for page in pages %}{{ page | safe }}
{% else %}<div class="page" data-page="0"><div class="page-content"></div></div>
{% endfor %}</main>
</body>
</html>
"""

_env = Environment(autoescape=select_autoescape(default_for_string=True), trim_blocks=True)


def build_html(book: Book) -> str:
    """Standalone HTML: contents panel plus one div per page; an empty book gets one empty page."""
    return _env.from_string(BOOK_TEMPLATE).render(
        title=book.title,
        toc=render_toc(book.outline),
        pages=[render_page(p) for p in book.pages],
    )


def build_sidecar(book: Book) -> dict:
    """Build the sidecar JSON dict: metadata, resolved outline, per-page block kinds and sizes."""
    return {
        "title": book.title,
        "slug": book.slug,
        "capacity": book.capacity,
        "page_count": book.page_count,
        "outline": [e.model_dump() for e in book.outline],
        "pages": [
            {
                "index": p.index,
                "size": p.size,
                "blocks": [b.kind for b in p.blocks],
            }
            for p in book.pages
        ],
    }


def write_book(book: Book, output_dir: Path) -> tuple[Path, Path]:
    """Write <slug>.html + <slug>.json under output_dir. Returns (html_path, json_path)."""
    output_dir.mkdir(parents=True, exist_ok=True)
    html_path = output_dir / f"{book.slug}.html"
    json_path = output_dir / f"{book.slug}.json"

    html_path.write_text(build_html(book), encoding='utf-8')
    json_path.write_text(json.dumps(build_sidecar(book), indent=2, ensure_ascii=False), encoding='utf-8')
    return html_path, json_path
