"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from pagemark.core.models import ParseResult
from pagemark.core.parse import parse_document
from pagemark.core.source import make_source
from pagemark.crud import models  # noqa: F401


BOOK_TEXT = "# Hello\n@ Ann\n\nWorld\n\n---\n\n## Next\n\n- a\n- b"


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="source")
def source_fixture():
    return make_source(BOOK_TEXT)


@pytest.fixture(name="parsed")
def parsed_fixture(source) -> ParseResult:
    return parse_document(source.content)
