"""
Shared list helpers: "field" / "-field" sorting and page slicing.
"""
from math import ceil
from typing import Any, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


def apply_sort(query: Select, model: Any, sort: Optional[str], default: Any) -> Select:
    """
    Order by ``sort`` ("field" ascending, "-field" descending).

    Unknown field names fall back to ``default`` so a stale client never
    breaks a listing.
    """
    if sort:
        descending = sort.startswith("-")
        field_name = sort.lstrip("-+")
        if field_name in model.__table__.columns:
            column = getattr(model, field_name)
            return query.order_by(column.desc() if descending else column.asc())
    return query.order_by(default)


async def paginate(db: AsyncSession, query: Select, page: int, per_page: int) -> dict:
    """Run ``query`` for one page and return the list envelope fields."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total_result = await db.execute(count_query)
    total_items = total_result.scalar() or 0

    result = await db.execute(query.offset((page - 1) * per_page).limit(per_page))
    items = result.scalars().unique().all()

    return {
        "page": page,
        "perPage": per_page,
        "totalItems": total_items,
        "totalPages": ceil(total_items / per_page) if total_items > 0 else 1,
        "items": items,
    }
