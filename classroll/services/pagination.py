"""Page/offset arithmetic shared by every list endpoint."""

import math


def page_offset(page: int, limit: int) -> int:
    """Pages are 1-based."""
    return (page - 1) * limit


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def pagination_info(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": page_count(total, limit),
    }
