"""Book persistence: upsert by slug, block replacement, parse-result reload"""

from datetime import datetime

from pydantic import TypeAdapter
from sqlmodel import Session, select

from pagemark.core.models import Block, BookSource, ParseResult
from pagemark.core.outline import outline_from_blocks
from pagemark.core.utils.hashing import content_hash
from pagemark.crud.models import BlockRecord, BookRecord


_block_adapter: TypeAdapter = TypeAdapter(Block)


def get_by_slug(session: Session, slug: str) -> BookRecord | None:
    """Return the BookRecord with the given slug, or None if not found."""
    return session.exec(select(BookRecord).where(BookRecord.slug == slug)).one_or_none()


def list_books(session: Session) -> list[BookRecord]:
    """Return all stored books ordered by slug."""
    return list(session.exec(select(BookRecord).order_by(BookRecord.slug)).all())


def get_blocks(session: Session, book: BookRecord) -> list[BlockRecord]:
    """Return a book's block rows in document order."""
    return list(session.exec(
        select(BlockRecord)
        .where(BlockRecord.book_id == book.id)
        .order_by(BlockRecord.position.asc())
    ).all())


def _replace_blocks(session: Session, book: BookRecord, parsed: ParseResult) -> None:
    """Delete all existing block rows for a book and insert the new parse result."""
    for row in get_blocks(session, book):
        session.delete(row)
    session.flush()

    for position, block in enumerate(parsed.blocks):
        session.add(BlockRecord(
            book_id=book.id,
            position=position,
            kind=block.kind,
            data=block.model_dump(mode="json"),
        ))
    session.flush()


def commit_book(
    session: Session,
    source: BookSource,
    parsed: ParseResult,
    image_base: str = "images/",
    ) -> tuple[BookRecord, str]:
    """Upsert a parsed book by slug.

    Returns (book, status) where status is 'created', 'updated', or 'unchanged'.
    Unchanged means the source text hash is identical to the stored one.
    Flushes but does not commit; caller controls the transaction.
    """
    digest = content_hash(source.content)
    book = get_by_slug(session, source.slug)

    if book:
        if book.hash == digest and book.image_base == image_base:
            return book, 'unchanged'
        book.title = source.title
        book.source = source.content
        book.hash = digest
        book.image_base = image_base
        book.updated_at = datetime.now()
        session.add(book)
        session.flush()
        _replace_blocks(session, book, parsed)
        return book, 'updated'

    book = BookRecord(
        slug=source.slug,
        title=source.title,
        source=source.content,
        hash=digest,
        image_base=image_base,
    )
    session.add(book)
    session.flush()
    _replace_blocks(session, book, parsed)
    return book, 'created'


def load_parsed(session: Session, book: BookRecord) -> ParseResult:
    """Rebuild a book's ParseResult from stored blocks without reparsing the source."""
    blocks = [_block_adapter.validate_python(row.data) for row in get_blocks(session, book)]
    return ParseResult(blocks=blocks, outline=outline_from_blocks(blocks))
