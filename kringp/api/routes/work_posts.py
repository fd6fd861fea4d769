"""Work posts — briefs businesses publish and the applications creators send.

Invariants:
    - Only BUSINESS accounts publish; only the owner edits, deletes or reviews applications
    - Drafts are hidden from the public listing and refuse applications
    - One application per influencer, or per group, for a given post
    - Applying on behalf of a group requires being that group's admin
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user, page_params
from kringp.core.domain_types import ApplicationStatus, NotificationType, UserType
from kringp.core.envelope import success
from kringp.core.errors import BusinessRuleError, PermissionDeniedError
from kringp.core.pagination import PageParams
from kringp.infrastructure.database import get_db
from kringp.infrastructure.push_client import PushClient, get_push_client
from kringp.models import Group, SubCategory, User, WorkPost, WorkPostApplication
from kringp.schemas.work_post import (
    ApplicationCreate, ApplicationStatusUpdate, WorkPostCreate, WorkPostUpdate,
)
from kringp.services.common import get_or_404, paginate, reload
from kringp.services.groups import require_group_admin
from kringp.services.notifications import notify_users
from kringp.services.serializers import user_brief

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/work-posts", tags=["work-posts"])


def _post_payload(post: WorkPost) -> dict:
    return {
        "id": post.id,
        "title": post.title,
        "description": post.description,
        "subcategory": {
            "id": post.subcategory.id,
            "name": post.subcategory.name,
        } if post.subcategory else None,
        "deliverables": post.deliverables,
        "platforms": post.platforms,
        "tags": post.tags,
        "attachments": post.attachments,
        "budget": post.budget,
        "start_date": post.start_date,
        "end_date": post.end_date,
        "is_draft": post.is_draft,
        "business": user_brief(post.business),
        "created_at": post.created_at,
    }


def _application_payload(app: WorkPostApplication) -> dict:
    return {
        "id": app.id,
        "work_post_id": app.work_post_id,
        "work_post_title": app.work_post.title if app.work_post else None,
        "influencer": user_brief(app.influencer),
        "group_id": app.group_id,
        "offer_amount": app.offer_amount,
        "message": app.message,
        "status": app.status,
        "created_at": app.created_at,
    }


async def _owned_post(db: AsyncSession, post_id: UUID, user: User) -> WorkPost:
    post = await get_or_404(db, WorkPost, post_id, "Work post")
    if post.business_id != user.id:
        raise PermissionDeniedError("Only the owner of this work post can do that")
    return post


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_work_post(
    body: WorkPostCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if user.type != UserType.BUSINESS.value:
        raise PermissionDeniedError("Only business accounts can publish work posts")
    await get_or_404(db, SubCategory, body.subcategory_id, "Subcategory")
    values = body.model_dump(exclude_none=True)
    values.setdefault("is_draft", False)
    post = WorkPost(business_id=user.id, **values)
    db.add(post)
    await db.commit()
    post = await reload(db, WorkPost, post.id)
    logger.info("Work post created", extra={"user_id": str(user.id)})
    return success("Work post created successfully", _post_payload(post))


@router.get("")
async def list_work_posts(
    subcategory_id: UUID | None = Query(None),
    search: str | None = Query(None, max_length=100),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    query = (
        select(WorkPost)
        .where(WorkPost.is_draft.is_(False))
        .order_by(WorkPost.created_at.desc())
    )
    if subcategory_id is not None:
        query = query.where(WorkPost.subcategory_id == subcategory_id)
    if search:
        term = search.lower()
        query = query.where(or_(
            func.lower(WorkPost.title).contains(term),
            func.lower(WorkPost.description).contains(term),
            func.lower(cast(WorkPost.tags, String)).contains(term),
            func.lower(cast(WorkPost.deliverables, String)).contains(term),
        ))
    data = await paginate(db, query, params, "work_posts", _post_payload)
    return success("Work posts fetched successfully", data)


@router.get("/mine")
async def my_work_posts(
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = (
        select(WorkPost)
        .where(WorkPost.business_id == user.id)
        .order_by(WorkPost.created_at.desc())
    )
    data = await paginate(db, query, params, "work_posts", _post_payload)
    return success("Work posts fetched successfully", data)


@router.get("/applications")
async def my_applications(
    group_id: UUID | None = Query(None),
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = select(WorkPostApplication).order_by(WorkPostApplication.created_at.desc())
    if group_id is not None:
        group = await get_or_404(db, Group, group_id, "Group")
        require_group_admin(group, user.id)
        query = query.where(WorkPostApplication.group_id == group.id)
    else:
        query = query.where(WorkPostApplication.influencer_id == user.id)
    data = await paginate(db, query, params, "applications", _application_payload)
    return success("Applications fetched successfully", data)


@router.patch("/applications/{application_id}")
async def decide_application(
    application_id: UUID,
    body: ApplicationStatusUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    push: PushClient = Depends(get_push_client),
):
    application = await get_or_404(db, WorkPostApplication, application_id, "Application")
    if application.work_post.business_id != user.id:
        raise PermissionDeniedError("Only the owner of this work post can do that")
    application.status = body.status.value
    verb = "accepted" if body.status is ApplicationStatus.ACCEPTED else "rejected"
    await notify_users(
        db, push, [application.influencer], "Application Update",
        f"Your application for '{application.work_post.title}' was {verb}",
        NotificationType.APPLICATION_UPDATE,
    )
    await db.commit()
    return success(f"Application {verb}", _application_payload(application))


@router.get("/{post_id}")
async def get_work_post(post_id: UUID, db: AsyncSession = Depends(get_db)):
    post = await get_or_404(db, WorkPost, post_id, "Work post")
    count = await db.scalar(
        select(func.count(WorkPostApplication.id))
        .where(WorkPostApplication.work_post_id == post.id),
    )
    return success("Work post fetched successfully", {
        **_post_payload(post),
        "application_count": count or 0,
    })


@router.patch("/{post_id}")
async def update_work_post(
    post_id: UUID,
    body: WorkPostUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await _owned_post(db, post_id, user)
    values = body.model_dump(exclude_unset=True, exclude_none=True)
    if "subcategory_id" in values:
        await get_or_404(db, SubCategory, values["subcategory_id"], "Subcategory")
    for field, value in values.items():
        setattr(post, field, value)
    await db.commit()
    post = await reload(db, WorkPost, post.id)
    return success("Work post updated successfully", _post_payload(post))


@router.delete("/{post_id}")
async def delete_work_post(
    post_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await _owned_post(db, post_id, user)
    await db.delete(post)
    await db.commit()
    return success("Work post deleted successfully")


@router.post("/{post_id}/apply", status_code=status.HTTP_201_CREATED)
async def apply_to_work_post(
    post_id: UUID,
    body: ApplicationCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    push: PushClient = Depends(get_push_client),
):
    post = await get_or_404(db, WorkPost, post_id, "Work post")
    if post.is_draft:
        raise BusinessRuleError("Cannot apply to a draft work post")
    if post.business_id == user.id:
        raise BusinessRuleError("You cannot apply to your own work post")

    duplicate = select(WorkPostApplication.id).where(WorkPostApplication.work_post_id == post.id)
    applicant = "An influencer"
    if body.group_id is not None:
        group = await get_or_404(db, Group, body.group_id, "Group")
        require_group_admin(group, user.id)
        duplicate = duplicate.where(WorkPostApplication.group_id == group.id)
        applicant = f"Group {group.group_name}"
    else:
        duplicate = duplicate.where(
            WorkPostApplication.influencer_id == user.id,
            WorkPostApplication.group_id.is_(None),
        )
        applicant = user.name or applicant
    if await db.scalar(duplicate):
        raise BusinessRuleError("You have already applied to this work post", "DUPLICATE_APPLICATION")

    application = WorkPostApplication(
        work_post_id=post.id,
        influencer_id=user.id,
        group_id=body.group_id,
        offer_amount=body.offer_amount,
        message=body.message,
        status=ApplicationStatus.PENDING.value,
    )
    db.add(application)
    await db.flush()
    await notify_users(
        db, push, [post.business], "New Application",
        f"{applicant} applied to '{post.title}'",
        NotificationType.WORK_POST_APPLICATION,
    )
    await db.commit()

    application = await reload(db, WorkPostApplication, application.id)
    logger.info("Work post application", extra={"user_id": str(user.id)})
    return success("Application submitted successfully", _application_payload(application))


@router.get("/{post_id}/applications")
async def post_applications(
    post_id: UUID,
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await _owned_post(db, post_id, user)
    query = (
        select(WorkPostApplication)
        .where(WorkPostApplication.work_post_id == post.id)
        .order_by(WorkPostApplication.created_at.desc())
    )
    data = await paginate(db, query, params, "applications", _application_payload)
    return success("Applications fetched successfully", data)
