"""Groups — creator collectives, their invites and membership answers.

Invariants:
    - group_name is unique (409); the creator is the group admin
    - Invitees must exist and cannot include the admin; re-inviting is a no-op
    - Only the invitee answers an invite, and only while it is PENDING
    - Public listings show PUBLIC groups and accepted members only
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user, page_params
from kringp.core.domain_types import (
    NotificationType, RequestStatus, Visibility, request_status_code,
)
from kringp.core.envelope import success
from kringp.core.errors import (
    BusinessRuleError, ConflictError, PermissionDeniedError, ResourceNotFoundError,
    ValidationFailedError,
)
from kringp.core.pagination import PageParams, paginate_items
from kringp.infrastructure.database import get_db
from kringp.infrastructure.push_client import PushClient, get_push_client
from kringp.models import Group, GroupInvite, User
from kringp.schemas.group import GroupCreate, GroupMembersAdd, GroupUpdate, InviteResponse
from kringp.services.common import get_or_404, paginate, reload
from kringp.services.groups import format_group, require_group_admin
from kringp.services.notifications import notify_users
from kringp.services.users import validate_subcategory_ids

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/groups", tags=["groups"])


async def _ensure_unique_name(
    db: AsyncSession, name: str, exclude_id: UUID | None = None,
) -> None:
    query = select(Group.id).where(func.lower(Group.group_name) == name.lower())
    if exclude_id is not None:
        query = query.where(Group.id != exclude_id)
    if await db.scalar(query):
        raise ConflictError(f"Group name '{name}' is already taken")


async def _invitees(db: AsyncSession, admin_id: UUID, user_ids: list[UUID]) -> list[User]:
    if admin_id in user_ids:
        raise ValidationFailedError("You cannot invite yourself to your own group", "invited_user_ids")
    if not user_ids:
        return []
    result = await db.execute(select(User).where(User.id.in_(user_ids)))
    users = list(result.scalars().all())
    missing = set(user_ids) - {u.id for u in users}
    if missing:
        raise ValidationFailedError(
            f"Invited user(s) not found: {', '.join(sorted(str(m) for m in missing))}",
            "invited_user_ids",
        )
    return users


async def _invite(
    db: AsyncSession, push: PushClient, group: Group, admin: User, users: list[User],
) -> list[UUID]:
    already = {i.invited_user_id for i in group.invites}
    fresh = [u for u in users if u.id not in already]
    for user in fresh:
        db.add(GroupInvite(
            group_id=group.id, invited_user_id=user.id,
            request_status=RequestStatus.PENDING.value, status=True,
        ))
    await db.flush()
    await notify_users(
        db, push, fresh, "Group Invitation",
        f"{admin.name or 'Someone'} invited you to join {group.group_name}",
        NotificationType.GROUP_INVITE,
    )
    return [u.id for u in fresh]


async def _format_page(db: AsyncSession, query, params: PageParams) -> dict:
    data = await paginate(db, query, params, "groups", lambda g: g)
    data["groups"] = [await format_group(db, g) for g in data["groups"]]
    return data


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_group(
    body: GroupCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    push: PushClient = Depends(get_push_client),
):
    await _ensure_unique_name(db, body.group_name)
    subcategory_ids = await validate_subcategory_ids(db, body.subcategory_ids)
    invitees = await _invitees(db, user.id, body.invited_user_ids)

    group = Group(
        group_name=body.group_name,
        group_image=body.group_image,
        group_bio=body.group_bio,
        visibility=body.visibility.value,
        subcategory_ids=[str(s) for s in subcategory_ids],
        social_platforms=[p.value for p in body.social_platforms],
        admin_user_id=user.id,
        status=True,
    )
    db.add(group)
    await db.flush()
    group = await reload(db, Group, group.id)
    await _invite(db, push, group, user, invitees)
    await db.commit()

    group = await reload(db, Group, group.id)
    logger.info("Group created", extra={"group_id": str(group.id), "user_id": str(user.id)})
    return success("Group created successfully", await format_group(db, group, include_pending=True))


@router.get("")
async def list_groups(
    search: str | None = Query(None, max_length=100),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    query = (
        select(Group)
        .where(Group.visibility == Visibility.PUBLIC.value, Group.status.is_(True))
        .order_by(Group.created_at.desc())
    )
    if search:
        query = query.where(func.lower(Group.group_name).contains(search.lower()))
    return success("Groups fetched successfully", await _format_page(db, query, params))


@router.get("/mine")
async def my_groups(
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    joined = select(GroupInvite.group_id).where(
        GroupInvite.invited_user_id == user.id,
        GroupInvite.request_status == RequestStatus.ACCEPTED.value,
        GroupInvite.status.is_(True),
    )
    query = (
        select(Group)
        .where(or_(Group.admin_user_id == user.id, Group.id.in_(joined)))
        .order_by(Group.created_at.desc())
    )
    return success("Groups fetched successfully", await _format_page(db, query, params))


def _invite_payload(invite: GroupInvite, group: Group | None = None) -> dict:
    data = {
        "id": invite.id,
        "group_id": invite.group_id,
        "invited_user_id": invite.invited_user_id,
        "request_status": invite.request_status,
        "created_at": invite.created_at,
    }
    if group is not None:
        data["group_name"] = group.group_name
        data["group_image"] = group.group_image
    return data


@router.get("/invites")
async def my_invites(
    request_status: RequestStatus | None = Query(None, alias="status"),
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = (
        select(GroupInvite)
        .where(GroupInvite.invited_user_id == user.id, GroupInvite.status.is_(True))
        .order_by(GroupInvite.created_at.desc())
    )
    if request_status is not None:
        query = query.where(GroupInvite.request_status == request_status.value)
    data = await paginate(db, query, params, "invites", lambda i: i)
    invites = []
    for invite in data["invites"]:
        group = await db.get(Group, invite.group_id)
        invites.append(_invite_payload(invite, group))
    data["invites"] = invites
    return success("Invites fetched successfully", data)


@router.get("/{group_id}")
async def get_group(group_id: UUID, db: AsyncSession = Depends(get_db)):
    group = await get_or_404(db, Group, group_id, "Group")
    return success("Group fetched successfully", await format_group(db, group))


@router.patch("/{group_id}")
async def update_group(
    group_id: UUID,
    body: GroupUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    group = await get_or_404(db, Group, group_id, "Group")
    require_group_admin(group, user.id)
    values = body.model_dump(exclude_unset=True, exclude_none=True)
    if "group_name" in values:
        await _ensure_unique_name(db, values["group_name"], exclude_id=group.id)
    if "subcategory_ids" in values:
        ids = await validate_subcategory_ids(db, body.subcategory_ids)
        values["subcategory_ids"] = [str(s) for s in ids]
    if "social_platforms" in values:
        values["social_platforms"] = [p.value for p in body.social_platforms]
    if "visibility" in values:
        values["visibility"] = body.visibility.value
    for field, value in values.items():
        setattr(group, field, value)
    await db.commit()
    group = await reload(db, Group, group.id)
    return success("Group updated successfully", await format_group(db, group, include_pending=True))


@router.delete("/{group_id}")
async def delete_group(
    group_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    group = await get_or_404(db, Group, group_id, "Group")
    require_group_admin(group, user.id)
    await db.delete(group)
    await db.commit()
    logger.info("Group deleted", extra={"group_id": str(group_id)})
    return success("Group deleted successfully")


@router.post("/{group_id}/members")
async def add_members(
    group_id: UUID,
    body: GroupMembersAdd,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    push: PushClient = Depends(get_push_client),
):
    group = await get_or_404(db, Group, group_id, "Group")
    require_group_admin(group, user.id)
    invitees = await _invitees(db, user.id, body.invited_user_ids)
    invited = await _invite(db, push, group, user, invitees)
    await db.commit()
    group = await reload(db, Group, group.id)
    return success("Members invited successfully", {
        "invited_user_ids": invited,
        "group": await format_group(db, group, include_pending=True),
    })


@router.post("/{group_id}/respond")
async def respond_to_invite(
    group_id: UUID,
    body: InviteResponse,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    push: PushClient = Depends(get_push_client),
):
    group = await get_or_404(db, Group, group_id, "Group")
    invite = next(
        (i for i in group.invites if i.invited_user_id == user.id and i.status), None,
    )
    if invite is None:
        raise ResourceNotFoundError("Group invite")
    if invite.request_status != RequestStatus.PENDING.value:
        raise BusinessRuleError("This invite has already been answered", "INVITE_ANSWERED")

    answer = RequestStatus.ACCEPTED if body.accept else RequestStatus.REJECTED
    invite.request_status = answer.value
    verb = "accepted" if body.accept else "declined"
    await notify_users(
        db, push, [group.admin], "Group Invitation Update",
        f"{user.name or 'A user'} {verb} your invitation to {group.group_name}",
        NotificationType.GROUP_INVITE_RESPONSE,
    )
    await db.commit()
    logger.info(
        f"Group invite {answer.value}",
        extra={"group_id": str(group.id), "user_id": str(user.id)},
    )
    return success(f"Invitation {verb} successfully", _invite_payload(invite, group))


@router.get("/{group_id}/invites")
async def group_invites(
    group_id: UUID,
    request_status: RequestStatus | None = Query(None, alias="status"),
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    group = await get_or_404(db, Group, group_id, "Group")
    if group.admin_user_id != user.id:
        raise PermissionDeniedError("Only the group admin can view its invites")
    invites = [
        {**_invite_payload(i), "request_status_code": request_status_code(i.request_status)}
        for i in group.invites
        if i.status and (request_status is None or i.request_status == request_status.value)
    ]
    return success(
        "Group invites fetched successfully", paginate_items(invites, params, "invites"),
    )
