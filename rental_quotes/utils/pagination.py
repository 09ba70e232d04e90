# rental_quotes/utils/pagination.py
import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Query
from sqlalchemy import asc, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from rental_quotes.schemas.response_schemas import PaginationMeta

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class PaginationParams:
    """Common list query parameters, used as a FastAPI dependency."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number, starting at 1"),
        limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
        search: Optional[str] = Query(None, description="Case-insensitive substring search"),
        sort: Optional[str] = Query(None, description="Field to sort by"),
        order: Optional[str] = Query(None, description="asc or desc"),
    ):
        self.page = page
        self.limit = limit
        self.search = search.strip() if search and search.strip() else None
        self.sort = sort
        self.order = order

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def apply_sorting(
    query: Select,
    params: PaginationParams,
    sort_columns: Dict[str, Any],
    default_sort: str,
    default_order: str = "asc",
) -> Select:
    sort_key = (params.sort or default_sort).lower()
    if sort_key not in sort_columns:
        logger.debug("sort '%s' is not allowed, falling back to '%s'", params.sort, default_sort)
        sort_key = default_sort
    column = sort_columns[sort_key]

    order = (params.order or default_order).lower()
    direction = desc if order == "desc" else asc
    # id as tie-breaker keeps page boundaries stable
    return query.order_by(direction(column), direction(sort_columns.get("id", column)))


async def paginate(db: AsyncSession, query: Select, params: PaginationParams) -> Tuple[List[Any], PaginationMeta]:
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset(params.offset).limit(params.limit))
    items = result.scalars().all()

    meta = PaginationMeta(
        total=total,
        page=params.page,
        limit=params.limit,
        total_pages=math.ceil(total / params.limit),
    )
    return items, meta
