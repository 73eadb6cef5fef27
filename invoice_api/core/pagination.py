"""Pagination — pure coercion of page/limit query values and the pagination block.

Invariants:
    - page and limit are always positive integers after coercion
    - Defaults are (1, 10); limit never exceeds MAX_PAGE_LIMIT, page never exceeds MAX_PAGE
    - pages == ceil(total / limit) (0 when total is 0)
"""

import math

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_PAGE_LIMIT = 100
# Keeps the computed OFFSET inside a 64-bit integer
MAX_PAGE = 2**31 - 1


def coerce_positive_int(value: object, default: int, maximum: int) -> int:
    """Parse value as an integer in 1..maximum.

    Non-numeric and non-positive values fall back to default, larger ones clamp to maximum.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    if number < 1:
        return default
    return min(number, maximum)


def normalize_page_params(page: object = None, limit: object = None) -> tuple[int, int]:
    """Coerce raw page/limit values into a usable (page, limit) pair."""
    page_number = coerce_positive_int(page, DEFAULT_PAGE, MAX_PAGE)
    page_size = coerce_positive_int(limit, DEFAULT_LIMIT, MAX_PAGE_LIMIT)
    return page_number, page_size


def compute_skip(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_pagination(page: int, limit: int, total: int) -> dict:
    """Pagination block returned alongside every list response."""
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit),
    }
