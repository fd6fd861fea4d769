"""App settings — admin-managed slug/value pairs (banner texts, links)."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import page_params, require_admin
from kringp.core.envelope import success
from kringp.core.errors import ConflictError, ResourceNotFoundError
from kringp.core.pagination import PageParams
from kringp.infrastructure.database import get_db
from kringp.models import AppSetting, User
from kringp.schemas.content import AppSettingCreate, AppSettingUpdate
from kringp.services.common import get_or_404, paginate

router = APIRouter(prefix="/api/v1/app-settings", tags=["app-settings"])


def _payload(s: AppSetting) -> dict:
    return {"id": s.id, "slug": s.slug, "value": s.value, "updated_at": s.updated_at}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_setting(
    body: AppSettingCreate,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    if await db.scalar(select(AppSetting.id).where(AppSetting.slug == body.slug)):
        raise ConflictError(f"Setting '{body.slug}' already exists")
    setting = AppSetting(slug=body.slug, value=body.value)
    db.add(setting)
    await db.commit()
    await db.refresh(setting)
    return success("Setting created successfully", _payload(setting))


@router.get("")
async def list_settings(
    params: PageParams = Depends(page_params), db: AsyncSession = Depends(get_db),
):
    data = await paginate(
        db, select(AppSetting).order_by(AppSetting.slug), params, "settings", _payload,
    )
    return success("Settings fetched successfully", data)


@router.get("/{slug}")
async def get_setting(slug: str, db: AsyncSession = Depends(get_db)):
    setting = (await db.execute(
        select(AppSetting).where(AppSetting.slug == slug),
    )).scalar_one_or_none()
    if setting is None:
        raise ResourceNotFoundError("Setting", slug)
    return success("Setting fetched successfully", _payload(setting))


@router.patch("/{setting_id}")
async def update_setting(
    setting_id: UUID,
    body: AppSettingUpdate,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    setting = await get_or_404(db, AppSetting, setting_id, "Setting")
    setting.value = body.value
    await db.commit()
    await db.refresh(setting)
    return success("Setting updated successfully", _payload(setting))


@router.delete("/{setting_id}")
async def delete_setting(
    setting_id: UUID,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    setting = await get_or_404(db, AppSetting, setting_id, "Setting")
    await db.delete(setting)
    await db.commit()
    return success("Setting deleted successfully")
