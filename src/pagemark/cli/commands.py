"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from pagemark.config import Settings, load_config
from pagemark.core.errors import PagemarkError
from pagemark.core.export import write_book
from pagemark.core.measure import EstimateMeasurer
from pagemark.core.models import Book
from pagemark.core.parse import parse_document
from pagemark.core.pipeline import build_book, repaginate
from pagemark.core.source import load_source
from pagemark.crud.books import commit_book, get_blocks, get_by_slug, list_books, load_parsed
from pagemark.crud.database import init_db, make_engine, reset_db


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _build(path: str, settings: Settings) -> Book:
    try:
        return build_book(load_source(Path(path)), settings)
    except PagemarkError as e:
        _fail(str(e))


def build_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file or YAML/JSON manifest")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    capacity: Annotated[Optional[float], typer.Option("--capacity", help="Page height available to content")] = None,
    image_base: Annotated[Optional[str], typer.Option("--image-base", help="Prefix for local image sources")] = None,
    ):
    """Parse, paginate, and export a book as HTML + sidecar JSON."""
    settings = _settings(overrides={"output_dir": out, "page_capacity": capacity, "image_base": image_base})
    book = _build(path, settings)
    html_path, json_path = write_book(book, Path(settings.output_dir))
    typer.echo(f"  {book.slug} -> {html_path}")
    typer.echo(f"  {book.slug} -> {json_path}")
    typer.echo(f"Built {book.page_count} page(s) with {len(book.outline)} heading(s)")


def toc_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file or YAML/JSON manifest")],
    capacity: Annotated[Optional[float], typer.Option("--capacity", help="Page height available to content")] = None,
    ):
    """Print the table of contents with resolved page numbers."""
    settings = _settings(overrides={"page_capacity": capacity})
    book = _build(path, settings)
    if not book.outline:
        typer.echo("No headings found.")
        return
    for entry in book.outline:
        indent = "  " * (entry.level - 1)
        typer.echo(f"{indent}{entry.text} ... {entry.page_index + 1}")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def commit_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file or YAML/JSON manifest")],
    image_base: Annotated[Optional[str], typer.Option("--image-base", help="Prefix for local image sources")] = None,
    ):
    """Parse a book and store its blocks in the database."""
    settings = _settings(overrides={"image_base": image_base})
    try:
        source = load_source(Path(path))
        parsed = parse_document(source.content, settings.image_base)
    except PagemarkError as e:
        _fail(str(e))

    engine = make_engine(settings.db_url)
    init_db(engine)
    try:
        with Session(engine) as session:
            _, status = commit_book(session, source, parsed, settings.image_base)
            session.commit()
    except Exception as e:
        _fail("Commit failed", e)
    typer.echo(f"  {status}: {source.slug}")


def export_cmd(
    slug: Annotated[str, typer.Argument(help="Slug of a committed book")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    capacity: Annotated[Optional[float], typer.Option("--capacity", help="Page height available to content")] = None,
    ):
    """Re-paginate a stored book (no reparse) and export it."""
    settings = _settings(overrides={"output_dir": out, "page_capacity": capacity})
    engine = make_engine(settings.db_url)
    init_db(engine)

    with Session(engine) as session:
        record = get_by_slug(session, slug)
        if record is None:
            _fail(f"No stored book with slug '{slug}'. Run 'pagemark commit <path>' first.")
        title = record.title
        parsed = load_parsed(session, record)

    try:
        book = repaginate(parsed, settings.page_capacity, EstimateMeasurer.from_settings(settings), title, slug)
    except PagemarkError as e:
        _fail(str(e))
    html_path, _ = write_book(book, Path(settings.output_dir))
    typer.echo(f"  {slug} -> {html_path}")
    typer.echo(f"Exported {book.page_count} page(s)")


def list_cmd():
    """List stored books with their block counts."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        rows = [(b.slug, b.title, len(get_blocks(session, b))) for b in list_books(session)]
    if not rows:
        typer.echo("No books found in database.")
        raise typer.Exit(1)
    for slug, title, count in rows:
        typer.echo(f"{slug}\t{title}\t{count} blocks")
