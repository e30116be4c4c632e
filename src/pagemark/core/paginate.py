"""Greedy packing of measured blocks into bounded pages, honouring forced breaks"""

import asyncio
import inspect
import logging
import math
from typing import Any, Awaitable, Callable, Sequence, Union

from pagemark.core.errors import MeasurementError
from pagemark.core.models import Block, Page, PageBreakMarker


logger = logging.getLogger(__name__)

Measure = Callable[[Block], float]
AsyncMeasure = Callable[[Block], Union[float, Awaitable[float]]]


def _checked_size(value: Any, position: int, block: Block) -> float:
    """Validate a reported size; never guess or default to zero."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MeasurementError(
            f"No size reported for block {position} ({block.kind}): got {value!r}",
            position, block.kind,
        )
    size = float(value)
    if math.isnan(size) or math.isinf(size) or size < 0:
        raise MeasurementError(
            f"Invalid size {value!r} for block {position} ({block.kind})", position, block.kind,
        )
    return size


def _wrap_failure(e: Exception, position: int, block: Block) -> MeasurementError:
    logger.warning("Measurement failed for block %d (%s): %s", position, block.kind, e)
    return MeasurementError(
        f"Could not measure block {position} ({block.kind}): {e}", position, block.kind,
    )


def _measure(measure: Measure, block: Block, position: int) -> float:
    try:
        value = measure(block)
    except MeasurementError:
        raise
    except Exception as e:
        raise _wrap_failure(e, position, block) from e
    return _checked_size(value, position, block)


def paginate(blocks: Sequence[Block], capacity: float, measure: Measure) -> list[Page]:
    """Partition blocks into pages in one left-to-right greedy pass.

    A block that does not fit starts a new page; the first block on a page is
    always placed, even when it alone exceeds capacity. PageBreakMarker blocks
    seal a non-empty page and are never placed. Returns [] when no content
    blocks exist.
    """
    if not capacity > 0:
        raise ValueError(f"Page capacity must be positive, got {capacity}")

    pages: list[Page] = []
    current: list[Block] = []
    used = 0.0

    def _seal() -> None:
        nonlocal current, used
        if current:
            pages.append(Page(index=len(pages), blocks=current, size=used))
        current, used = [], 0.0

    for position, block in enumerate(blocks):
        if isinstance(block, PageBreakMarker):
            _seal()
            continue
        size = _measure(measure, block, position)
        if current and used + size > capacity:
            _seal()
        current.append(block)
        used += size
    _seal()

    logger.debug("Packed %d blocks into %d pages (capacity %s)", len(blocks), len(pages), capacity)
    return pages


async def measure_blocks(blocks: Sequence[Block], measure: AsyncMeasure) -> list[float | None]:
    """Resolve every block's size before pagination begins.

    `measure` may return a number or an awaitable. The result is aligned with
    `blocks`; page-break markers are not measured and hold None. The first
    failure cancels every measurement still pending.
    """
    async def _one(position: int, block: Block) -> float | None:
        if isinstance(block, PageBreakMarker):
            return None
        try:
            value = measure(block)
            if inspect.isawaitable(value):
                value = await value
        except MeasurementError:
            raise
        except Exception as e:
            raise _wrap_failure(e, position, block) from e
        return _checked_size(value, position, block)

    tasks = [asyncio.ensure_future(_one(i, b)) for i, b in enumerate(blocks)]
    try:
        return list(await asyncio.gather(*tasks))
    except MeasurementError:
        # the first failure halts the run; no sibling may keep measuring
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
