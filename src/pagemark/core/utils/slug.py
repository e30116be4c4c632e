"""Slug generation for book identifiers"""

import re


def slugify(text: str, fallback: str = "book") -> str:
    """Lowercase, hyphen-separated slug; `fallback` when nothing usable remains."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-') or fallback
