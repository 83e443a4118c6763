# COMPONENT: PAGINATION
# REQUIREMENTS SATISFIED: page slices and totals over the derived view
"""
coi_tracker/utils/pagination.py

Slices a derived view into display pages. The store never clamps the
current page; a page before the first or past the last is an empty slice.
`clamp_page` is offered to callers that want to clamp.
"""
import math
from typing import List, Sequence, TypeVar

from ..schemas.coi import Page

T = TypeVar("T")


def total_pages(total_items: int, rows_per_page: int) -> int:
    if rows_per_page <= 0:
        return 0
    return math.ceil(total_items / rows_per_page)


def clamp_page(page: int, pages: int) -> int:
    """Keep `page` within 1..pages (1 when there are no pages)."""
    return max(1, min(page, pages))


def paginate(items: Sequence[T], rows_per_page: int, current_page: int) -> Page:
    total = len(items)
    if rows_per_page <= 0 or current_page < 1:
        page_items: List[T] = []
        start = 0
    else:
        start = (current_page - 1) * rows_per_page
        page_items = list(items[start:start + rows_per_page])

    return Page(
        items=page_items,
        total_items=total,
        total_pages=total_pages(total, rows_per_page),
        current_page=current_page,
        rows_per_page=rows_per_page,
        start_item=start + 1 if page_items else 0,
        end_item=start + len(page_items) if page_items else 0,
    )
