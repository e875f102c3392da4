"""Pagination — page/limit arithmetic shared by every listing endpoint."""

import math

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def page_offset(page: int, limit: int) -> int:
    return (max(page, 1) - 1) * limit


def build_pagination(page: int, limit: int, total: int) -> dict:
    return {
        "current_page": page,
        "total_pages": math.ceil(total / limit) if limit else 0,
        "total_items": total,
        "items_per_page": limit,
    }
