"""Database table definitions for stored books and their parsed blocks"""

from datetime import datetime
from typing import Any, Dict
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


class BookRecord(SQLModel, table=True):
    """A committed book source; the parse result lives in its block rows"""
    __tablename__ = "books"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(..., index=True, unique=True, nullable=False)
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    source: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    image_base: str = Field(default="images/", nullable=False)
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class BlockRecord(SQLModel, table=True):
    """One parsed block in document order; `data` is the block model's JSON dump"""
    __tablename__ = "book_blocks"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    book_id: UUID = Field(..., foreign_key="books.id", index=True, nullable=False)
    position: int = Field(..., nullable=False, description="Position of the block within the document")
    kind: str = Field(..., sa_column=Column(String(16), nullable=False))
    data: Dict[str, Any] = Field(..., sa_column=Column(JSON, nullable=False))
