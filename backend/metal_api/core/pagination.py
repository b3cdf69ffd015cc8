"""Pagination — page arithmetic and the paginator block returned by list endpoints.

Invariants:
    - page_count is always >= 1, even for an empty result
    - sl_no is the 1-based serial number of the first row on the page
    - prev/next are None when there is no such page
"""


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_paginator(item_count: int, page: int, limit: int) -> dict:
    """Build the paginator block for a page of results."""
    page_count = max(1, -(-item_count // limit))
    has_prev_page = page > 1
    has_next_page = page < page_count
    return {
        "item_count": item_count,
        "per_page": limit,
        "page_count": page_count,
        "current_page": page,
        "sl_no": page_offset(page, limit) + 1,
        "has_prev_page": has_prev_page,
        "has_next_page": has_next_page,
        "prev": page - 1 if has_prev_page else None,
        "next": page + 1 if has_next_page else None,
    }
