"""Shared fixtures for core unit tests"""

import pytest

from pagemark.core.models import Block, PageBreakMarker


SAMPLE_BOOK = """\
# The Book
@ Jane Roe
@ 2024

Opening paragraph with **bold** text
that wraps onto a second line.

## Chapter One

- first point
- second point

> A quoted line.
> Another quoted line.

```python
print("hello")
```

---

## Chapter Two

![Cover](cover.png)

1. step one
2. step two

    An indented paragraph.
"""


@pytest.fixture(name="sample_book")
def sample_book_fixture() -> str:
    return SAMPLE_BOOK


@pytest.fixture(name="fixed_measure")
def fixed_measure_fixture():
    """Every block measures 10 units."""
    def measure(block: Block) -> float:
        assert not isinstance(block, PageBreakMarker)
        return 10.0
    return measure
