"""Offset pagination shared by the list endpoints."""
from __future__ import annotations

from typing import Callable

DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100


def paginate(query, *, page: int | None, per_page: int | None, serialize: Callable) -> dict:
    """
    Apply offset pagination to a SQLAlchemy query.

    Returns dict with 'items', 'count' and 'pagination' metadata.
    """
    per_page = min(max(per_page or DEFAULT_PER_PAGE, 1), MAX_PER_PAGE)
    page = max(page or 1, 1)

    total = query.order_by(None).count()
    total_pages = (total + per_page - 1) // per_page if total > 0 else 1

    rows = query.offset((page - 1) * per_page).limit(per_page).all()

    return {
        "items": [serialize(r) for r in rows],
        "count": len(rows),
        "pagination": {
            "page": page,
            "per_page": per_page,
            "total": total,
            "total_pages": total_pages,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }
