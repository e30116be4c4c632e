"""SHA-256 hashing of book sources for change detection"""

import hashlib


def content_hash(text: str) -> str:
    """Hex SHA-256 of the source text (64 chars, fits the String(64) column)."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
