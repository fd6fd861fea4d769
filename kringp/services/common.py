"""Shared query helpers — 404 lookups, fresh reloads and paginated selects.

Invariants:
    - get_or_404 raises ResourceNotFoundError, never returns None
    - reload() re-reads the row and its eager relationships (populate_existing),
      so payloads built after a commit never see stale collections
    - paginate() issues exactly one COUNT and one windowed SELECT
"""

from typing import Any, Callable, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.core.errors import ResourceNotFoundError
from kringp.core.pagination import PageParams, build_page

ModelT = TypeVar("ModelT")


async def get_or_404(
    db: AsyncSession, model: type[ModelT], obj_id: UUID, label: str | None = None,
) -> ModelT:
    result = await db.execute(select(model).where(model.id == obj_id))
    obj = result.scalar_one_or_none()
    if obj is None:
        raise ResourceNotFoundError(label or model.__name__, str(obj_id))
    return obj


async def reload(db: AsyncSession, model: type[ModelT], obj_id: UUID) -> ModelT:
    result = await db.execute(
        select(model)
        .where(model.id == obj_id)
        .execution_options(populate_existing=True),
    )
    return result.scalar_one()


async def paginate(
    db: AsyncSession,
    query: Select,
    params: PageParams,
    result_key: str,
    serialize: Callable[[Any], Any],
) -> dict:
    """Run `query` for one page and wrap it with the pagination block."""
    total = await db.scalar(
        select(func.count()).select_from(query.order_by(None).subquery()),
    )
    result = await db.execute(query.limit(params.limit).offset(params.offset))
    items = [serialize(row) for row in result.scalars().all()]
    return build_page(items, total or 0, params, result_key)
