"""Catalog — CRUD for reference data, generated from one router factory.

Invariants:
    - Reads are public (signup forms need countries and categories); writes are admin-only
    - Child resources (states, cities, subcategories) require an existing parent
    - Names are unique within their parent, compared case-insensitively → 409

Design Decisions:
    - One factory instead of six near-identical modules; each resource is a
      CatalogResource row (model, parent, extra columns)
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import page_params, require_admin
from kringp.core.domain_types import UserType
from kringp.core.envelope import success
from kringp.core.errors import ConflictError, ValidationFailedError
from kringp.core.pagination import PageParams
from kringp.infrastructure.database import get_db
from kringp.models import (
    BrandType, Category, City, Country, State, SubCategory, User, UserSubCategory,
)
from kringp.schemas.catalog import (
    CatalogItemCreate, CatalogItemUpdate, InfluencerBySubcategoryRequest,
)
from kringp.services.common import get_or_404, paginate, reload
from kringp.services.serializers import user_profile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogResource:
    path: str
    model: type
    label: str
    result_key: str
    parent_field: str | None = None
    parent_model: type | None = None
    extra_fields: tuple[str, ...] = ()


RESOURCES = (
    CatalogResource("countries", Country, "Country", "countries", extra_fields=("code",)),
    CatalogResource("states", State, "State", "states", "country_id", Country),
    CatalogResource("cities", City, "City", "cities", "state_id", State),
    CatalogResource("categories", Category, "Category", "categories", extra_fields=("image",)),
    CatalogResource(
        "subcategories", SubCategory, "Subcategory", "subcategories",
        "category_id", Category,
    ),
    CatalogResource("brand-types", BrandType, "Brand type", "brand_types"),
)


def _serializer(res: CatalogResource):
    def serialize(item) -> dict:
        data = {"id": item.id, "name": item.name, "created_at": item.created_at}
        if res.parent_field:
            data[res.parent_field] = getattr(item, res.parent_field)
        for field in res.extra_fields:
            data[field] = getattr(item, field)
        if isinstance(item, SubCategory) and item.category is not None:
            data["category_name"] = item.category.name
        return data
    return serialize


async def _ensure_unique(
    db: AsyncSession, res: CatalogResource, name: str,
    parent_id: UUID | None, exclude_id: UUID | None = None,
) -> None:
    query = select(res.model.id).where(func.lower(res.model.name) == name.lower())
    if res.parent_field:
        query = query.where(getattr(res.model, res.parent_field) == parent_id)
    if exclude_id is not None:
        query = query.where(res.model.id != exclude_id)
    if await db.scalar(query):
        raise ConflictError(f"{res.label} '{name}' already exists")


def build_catalog_router(res: CatalogResource) -> APIRouter:
    router = APIRouter(prefix=f"/api/v1/{res.path}", tags=["catalog"])
    serialize = _serializer(res)

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_item(
        body: CatalogItemCreate,
        _: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
    ):
        values = {"name": body.name}
        if res.parent_field:
            if body.parent_id is None:
                raise ValidationFailedError("parent_id is required", "parent_id")
            await get_or_404(db, res.parent_model, body.parent_id, res.parent_model.__name__)
            values[res.parent_field] = body.parent_id
        for field in res.extra_fields:
            values[field] = getattr(body, field)
        await _ensure_unique(db, res, body.name, body.parent_id)
        item = res.model(**values)
        db.add(item)
        await db.commit()
        item = await reload(db, res.model, item.id)
        logger.info(f"{res.label} created: {item.name}")
        return success(f"{res.label} created successfully", serialize(item))

    @router.get("")
    async def list_items(
        parent_id: UUID | None = Query(None),
        search: str | None = Query(None, max_length=100),
        params: PageParams = Depends(page_params),
        db: AsyncSession = Depends(get_db),
    ):
        query = select(res.model).order_by(res.model.name)
        if res.parent_field and parent_id is not None:
            query = query.where(getattr(res.model, res.parent_field) == parent_id)
        if search:
            query = query.where(func.lower(res.model.name).contains(search.lower()))
        data = await paginate(db, query, params, res.result_key, serialize)
        return success(f"{res.label} list fetched successfully", data)

    @router.get("/{item_id}")
    async def get_item(item_id: UUID, db: AsyncSession = Depends(get_db)):
        item = await get_or_404(db, res.model, item_id, res.label)
        return success(f"{res.label} fetched successfully", serialize(item))

    @router.patch("/{item_id}")
    async def update_item(
        item_id: UUID,
        body: CatalogItemUpdate,
        _: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
    ):
        item = await get_or_404(db, res.model, item_id, res.label)
        parent_id = getattr(item, res.parent_field) if res.parent_field else None
        if res.parent_field and body.parent_id is not None:
            await get_or_404(db, res.parent_model, body.parent_id, res.parent_model.__name__)
            parent_id = body.parent_id
            setattr(item, res.parent_field, parent_id)
        if body.name is not None:
            await _ensure_unique(db, res, body.name, parent_id, exclude_id=item.id)
            item.name = body.name
        for field in res.extra_fields:
            if field in body.model_fields_set:
                setattr(item, field, getattr(body, field))
        await db.commit()
        item = await reload(db, res.model, item.id)
        return success(f"{res.label} updated successfully", serialize(item))

    @router.delete("/{item_id}")
    async def delete_item(
        item_id: UUID,
        _: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
    ):
        item = await get_or_404(db, res.model, item_id, res.label)
        await db.delete(item)
        await db.commit()
        return success(f"{res.label} deleted successfully")

    return router


influencer_router = APIRouter(prefix="/api/v1/categories", tags=["catalog"])


@influencer_router.post("/influencers")
async def influencers_by_subcategories(
    body: InfluencerBySubcategoryRequest,
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    """Active influencers linked to any of the given subcategories."""
    linked = select(UserSubCategory.user_id).where(
        UserSubCategory.subcategory_id.in_(body.subcategory_ids),
    )
    query = (
        select(User)
        .where(
            User.type == UserType.INFLUENCER.value,
            User.status.is_(True),
            User.id.in_(linked),
        )
        .order_by(User.ratings.desc(), User.created_at.desc())
    )
    data = await paginate(db, query, params, "influencers", user_profile)
    return success("Influencers fetched successfully", data)


routers = [influencer_router, *(build_catalog_router(r) for r in RESOURCES)]
