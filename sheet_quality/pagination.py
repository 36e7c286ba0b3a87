from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

PAGE_SIZES = (10, 25, 50, 100)
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class Page:
    rows: list[Any]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0

    @property
    def start(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def end(self) -> int:
        return min(self.start + self.page_size, self.total)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def describe(self, noun: str = "rows") -> str:
        if self.total_pages <= 1:
            return f"Showing all {self.total} {noun}"
        return f"Showing {self.start + 1} to {self.end} of {self.total} {noun}"


def paginate(items: Sequence[Any], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    """Slice one page out of items.

    Unknown page sizes fall back to the default. A page below 1 or past the
    last page snaps back to page 1, matching what the preview table does
    when the underlying sheet shrinks.
    """
    if page_size not in PAGE_SIZES:
        page_size = DEFAULT_PAGE_SIZE
    total = len(items)
    total_pages = math.ceil(total / page_size) if total else 0
    if page < 1 or (total_pages and page > total_pages):
        page = 1
    start = (page - 1) * page_size
    return Page(rows=list(items[start : start + page_size]), page=page, page_size=page_size, total=total)
