"""Pipeline orchestration: parse -> measure/paginate -> bind outline"""

import asyncio
import logging
from typing import Optional

from pagemark.config import Settings
from pagemark.core.measure import EstimateMeasurer, table_measurer
from pagemark.core.models import Book, BookSource, ParseResult
from pagemark.core.outline import bind_pages
from pagemark.core.paginate import AsyncMeasure, Measure, measure_blocks, paginate
from pagemark.core.parse import parse_document


logger = logging.getLogger(__name__)


def repaginate(
    parsed: ParseResult,
    capacity: float,
    measure: Measure,
    title: str = "",
    slug: str = "",
    ) -> Book:
    """Paginate an existing parse result from a clean state and resolve its outline."""
    pages = paginate(parsed.blocks, capacity, measure)
    outline = bind_pages(pages, parsed.outline)
    return Book(
        title=title, slug=slug, capacity=capacity,
        blocks=parsed.blocks, pages=pages, outline=outline,
    )


def build_book(source: BookSource, settings: Settings, measure: Optional[Measure] = None) -> Book:
    """Run the full pipeline for one source. Defaults to the estimate measurer."""
    parsed = parse_document(source.content, settings.image_base)
    measure = measure or EstimateMeasurer.from_settings(settings)
    book = repaginate(parsed, settings.page_capacity, measure, source.title, source.slug)
    logger.info("Built %s: %d blocks on %d pages", book.slug, len(book.blocks), book.page_count)
    return book


class Repaginator:
    """Re-paginates one parsed document on demand; the newest request wins.

    Parse results are reused; every run paginates and binds from scratch.
    A request superseded during its debounce delay never runs, and a run that
    finishes after a newer run was applied is discarded. Both return None.
    """

    def __init__(self, parsed: ParseResult, title: str = "", slug: str = "", debounce: float = 0.25):
        self.parsed = parsed
        self.title = title
        self.slug = slug
        self.debounce = debounce
        self.current: Optional[Book] = None
        self._requested = 0
        self._applied = 0

    @classmethod
    def from_settings(cls, parsed: ParseResult, settings: Settings, title: str = "", slug: str = "") -> "Repaginator":
        return cls(parsed, title, slug, debounce=settings.debounce_ms / 1000)

    async def request(self, capacity: float, measure: AsyncMeasure) -> Optional[Book]:
        self._requested += 1
        generation = self._requested

        if self.debounce:
            await asyncio.sleep(self.debounce)
            if generation != self._requested:
                logger.debug("Re-pagination %d superseded before it started", generation)
                return None

        sizes = await measure_blocks(self.parsed.blocks, measure)
        book = repaginate(
            self.parsed, capacity, table_measurer(self.parsed.blocks, sizes), self.title, self.slug,
        )
        if generation < self._applied:
            logger.info("Discarding stale re-pagination %d; run %d already applied", generation, self._applied)
            return None

        self.current = book
        self._applied = generation
        return book
