"""Book source loading: markdown files with YAML frontmatter, or YAML/JSON manifests"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional

import yaml

from pagemark.core.errors import InputError
from pagemark.core.models import BookSource
from pagemark.core.utils.slug import slugify


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
TITLE_RE = re.compile(r'^#[ \t]+(.+?)[ \t]*$', re.MULTILINE)
TEXT_EXTENSIONS = {'.md', '.markdown', '.txt'}
MANIFEST_EXTENSIONS = {'.yaml', '.yml', '.json'}


def normalize_content(text: str) -> str:
    """Undo over-escaped backticks (\\` -> `) produced by manifest generators."""
    return text.replace("\\`", "`")


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body).

    A leading `---` fence only counts as frontmatter when it encloses a YAML
    mapping; otherwise it is left alone as a page break.
    """
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    try:
        fm = yaml.safe_load(m.group(1))
    except yaml.YAMLError:
        return {}, text
    if not isinstance(fm, dict):
        return {}, text
    return fm, text[m.end():]


def _read_manifest(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding='utf-8')
    try:
        data = json.loads(raw) if path.suffix.lower() == '.json' else yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InputError(f"Invalid manifest {path}: {e}") from e
    if not isinstance(data, dict):
        raise InputError(f"Invalid manifest {path}: expected a mapping, got {type(data).__name__}")
    return data


def make_source(
    content: Any,
    title: Optional[str] = None,
    slug: Optional[str] = None,
    name: str = "book",
    ) -> BookSource:
    """Validate raw content and attach display metadata. Raises InputError if missing or blank."""
    if content is None:
        raise InputError("No book content found")
    if not isinstance(content, str):
        raise InputError(f"Book content must be text, got {type(content).__name__}")
    content = normalize_content(content)
    if not content.strip():
        raise InputError("Book content is empty")

    if not title:
        m = TITLE_RE.search(content)
        title = m.group(1) if m else name
    title = str(title)
    return BookSource(
        title=title,
        slug=str(slug) if slug else slugify(title, fallback=slugify(name)),
        content=content,
    )


def load_source(path: Path) -> BookSource:
    """Load a book source from a markdown/text file or a YAML/JSON manifest."""
    if not path.is_file():
        raise InputError(f"Source not found: {path}")
    suffix = path.suffix.lower()

    if suffix in MANIFEST_EXTENSIONS:
        data = _read_manifest(path)
        source = make_source(data.get('content'), data.get('title'), data.get('slug'), path.stem)
    elif suffix in TEXT_EXTENSIONS:
        fm, body = _strip_frontmatter(path.read_text(encoding='utf-8'))
        source = make_source(body, fm.get('title'), fm.get('slug'), path.stem)
    else:
        raise InputError(f"Unsupported source type '{suffix}' for {path}")

    logger.info("Loaded %s (%d chars) from %s", source.slug, len(source.content), path)
    return source
