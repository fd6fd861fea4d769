"""Support — abuse reports, contact requests and the daily tips feed.

Invariants:
    - Any signed-in user may report another account or send a contact request;
      nobody can report themselves
    - Reports and contact requests are listed to admins only; a single report is
      visible to its reporter and to admins
    - Daily tips are read publicly and managed by admins; the list hides
      inactive tips unless include_inactive is set
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user, page_params, require_admin
from kringp.core.domain_types import ReportedType, UserType
from kringp.core.envelope import success
from kringp.core.errors import BusinessRuleError, PermissionDeniedError
from kringp.core.pagination import PageParams
from kringp.infrastructure.database import get_db
from kringp.models import AbuseReport, ContactRequest, DailyTip, User
from kringp.schemas.support import (
    AbuseReportCreate, ContactCreate, DailyTipCreate, DailyTipUpdate,
)
from kringp.services.common import get_or_404, paginate, reload
from kringp.services.serializers import user_brief

logger = logging.getLogger(__name__)

reports_router = APIRouter(prefix="/api/v1/reports", tags=["reports"])
contact_router = APIRouter(prefix="/api/v1/contact", tags=["contact"])
tips_router = APIRouter(prefix="/api/v1/tips", tags=["tips"])
routers = (reports_router, contact_router, tips_router)


def _report_payload(r: AbuseReport) -> dict:
    return {
        "id": r.id,
        "reported_type": r.reported_type,
        "reason": r.reason,
        "reported_by": user_brief(r.reported_by),
        "reported_user": user_brief(r.reported_user),
        "created_at": r.created_at,
    }


def _contact_payload(c: ContactRequest) -> dict:
    return {
        "id": c.id,
        "user_id": c.user_id,
        "name": c.name,
        "title": c.title,
        "description": c.description,
        "email_address": c.email_address,
        "contact_number": c.contact_number,
        "created_at": c.created_at,
    }


def _tip_payload(t: DailyTip) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "description": t.description,
        "image": t.image,
        "status": t.status,
        "created_at": t.created_at,
    }


# --- Abuse reports ------------------------------------------------------------

@reports_router.post("", status_code=status.HTTP_201_CREATED)
async def create_report(
    body: AbuseReportCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if body.reported_user_id == user.id:
        raise BusinessRuleError("You cannot report yourself", "SELF_REPORT")
    await get_or_404(db, User, body.reported_user_id, "User")
    report = AbuseReport(
        reported_by_id=user.id,
        reported_user_id=body.reported_user_id,
        reported_type=body.reported_type.value,
        reason=body.reason,
    )
    db.add(report)
    await db.commit()
    logger.info("Abuse report filed", extra={"user_id": str(user.id)})
    report = await reload(db, AbuseReport, report.id)
    return success("Abuse report submitted successfully", _report_payload(report))


@reports_router.get("")
async def list_reports(
    reported_type: ReportedType | None = Query(None),
    params: PageParams = Depends(page_params),
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    query = select(AbuseReport).order_by(AbuseReport.created_at.desc())
    if reported_type is not None:
        query = query.where(AbuseReport.reported_type == reported_type.value)
    data = await paginate(db, query, params, "reports", _report_payload)
    return success("Abuse reports fetched successfully", data)


@reports_router.get("/{report_id}")
async def get_report(
    report_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    report = await get_or_404(db, AbuseReport, report_id, "Abuse report")
    if report.reported_by_id != user.id and user.type != UserType.ADMIN.value:
        raise PermissionDeniedError("You can only view reports you filed")
    return success("Abuse report fetched successfully", _report_payload(report))


# --- Contact requests ---------------------------------------------------------

@contact_router.post("", status_code=status.HTTP_201_CREATED)
async def submit_contact(
    body: ContactCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    contact = ContactRequest(
        user_id=user.id,
        name=body.name or user.name,
        title=body.title,
        description=body.description,
        email_address=body.email_address or user.email_address,
        contact_number=body.contact_number or user.contact_person_phone_number,
    )
    db.add(contact)
    await db.commit()
    await db.refresh(contact)
    return success("Contact form submitted successfully", _contact_payload(contact))


@contact_router.get("")
async def list_contacts(
    params: PageParams = Depends(page_params),
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    data = await paginate(
        db, select(ContactRequest).order_by(ContactRequest.created_at.desc()),
        params, "contact_requests", _contact_payload,
    )
    return success("Contact requests fetched successfully", data)


@contact_router.delete("/{contact_id}")
async def delete_contact(
    contact_id: UUID,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    contact = await get_or_404(db, ContactRequest, contact_id, "Contact request")
    await db.delete(contact)
    await db.commit()
    return success("Contact request deleted successfully")


# --- Daily tips ---------------------------------------------------------------

@tips_router.post("", status_code=status.HTTP_201_CREATED)
async def create_tip(
    body: DailyTipCreate,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    tip = DailyTip(**body.model_dump())
    db.add(tip)
    await db.commit()
    await db.refresh(tip)
    return success("Daily tip created successfully", _tip_payload(tip))


@tips_router.get("")
async def list_tips(
    include_inactive: bool = Query(False),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    query = select(DailyTip).order_by(DailyTip.created_at.desc())
    if not include_inactive:
        query = query.where(DailyTip.status.is_(True))
    data = await paginate(db, query, params, "tips", _tip_payload)
    return success("Daily tips fetched successfully", data)


@tips_router.get("/{tip_id}")
async def get_tip(tip_id: UUID, db: AsyncSession = Depends(get_db)):
    tip = await get_or_404(db, DailyTip, tip_id, "Daily tip")
    return success("Daily tip fetched successfully", _tip_payload(tip))


@tips_router.patch("/{tip_id}")
async def update_tip(
    tip_id: UUID,
    body: DailyTipUpdate,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    tip = await get_or_404(db, DailyTip, tip_id, "Daily tip")
    for field, value in body.model_dump(exclude_none=True).items():
        setattr(tip, field, value)
    await db.commit()
    await db.refresh(tip)
    return success("Daily tip updated successfully", _tip_payload(tip))


@tips_router.delete("/{tip_id}")
async def delete_tip(
    tip_id: UUID,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    tip = await get_or_404(db, DailyTip, tip_id, "Daily tip")
    await db.delete(tip)
    await db.commit()
    return success("Daily tip deleted successfully")
