"""Group services — payload formatting and membership checks shared by groups, orders and ratings.

Invariants:
    - Formatted groups list subcategories with their category, the admin, and members
    - include_pending=False shows accepted members only (public view)
    - request_status is exposed both as name and numeric code (0/1/2)
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.core.domain_types import RequestStatus, request_status_code
from kringp.core.errors import PermissionDeniedError
from kringp.models import Group, SubCategory
from kringp.services.serializers import user_brief


async def _subcategories(db: AsyncSession, ids: list) -> list[dict]:
    if not ids:
        return []
    uuids = [UUID(str(i)) for i in ids]
    result = await db.execute(select(SubCategory).where(SubCategory.id.in_(uuids)))
    by_id = {s.id: s for s in result.scalars().all()}
    return [
        {
            "id": s.id,
            "name": s.name,
            "category": {"id": s.category.id, "name": s.category.name}
            if s.category else None,
        }
        for s in (by_id.get(i) for i in uuids) if s is not None
    ]


async def format_group(
    db: AsyncSession, group: Group, include_pending: bool = False,
) -> dict:
    members = [
        {
            **user_brief(invite.invited_user),
            "request_status": invite.request_status,
            "request_status_code": request_status_code(invite.request_status),
            "invite_id": invite.id,
        }
        for invite in group.invites
        if invite.status and (
            include_pending or invite.request_status == RequestStatus.ACCEPTED.value
        )
    ]
    return {
        "id": group.id,
        "group_name": group.group_name,
        "group_image": group.group_image,
        "group_bio": group.group_bio,
        "visibility": group.visibility,
        "social_platforms": group.social_platforms,
        "subcategories": await _subcategories(db, group.subcategory_ids),
        "admin": user_brief(group.admin),
        "members": members,
        "member_count": sum(
            1 for i in group.invites
            if i.status and i.request_status == RequestStatus.ACCEPTED.value
        ),
        "created_at": group.created_at,
    }


def require_group_admin(group: Group, user_id: UUID) -> None:
    if group.admin_user_id != user_id:
        raise PermissionDeniedError("Only the group admin can perform this action")
