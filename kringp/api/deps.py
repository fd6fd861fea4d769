"""Request dependencies — bearer-token auth, admin gate and page parameters.

Invariants:
    - Missing bearer token → 401; bad signature/expiry → 403
    - A token that verifies but is not the user's stored token → 401 (revoked or superseded)
    - Suspended users are rejected on every authenticated request, not just at login
"""

import logging
from uuid import UUID

from fastapi import Depends, Query, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.core.domain_types import UserType
from kringp.core.errors import (
    AuthenticationError, InvalidTokenError, PermissionDeniedError,
)
from kringp.core.pagination import DEFAULT_LIMIT, MAX_LIMIT, PageParams
from kringp.infrastructure.database import get_db
from kringp.infrastructure.security import decode_access_token
from kringp.models import User, UserAuthToken

logger = logging.getLogger(__name__)


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    request: Request, db: AsyncSession = Depends(get_db),
) -> User:
    token = _bearer_token(request)
    if token is None:
        raise AuthenticationError("Access token missing")
    claims = decode_access_token(token)
    if claims is None or "user_id" not in claims:
        raise InvalidTokenError()
    try:
        user_id = UUID(str(claims["user_id"]))
    except ValueError:
        raise InvalidTokenError()

    stored = (await db.execute(
        select(UserAuthToken).where(UserAuthToken.user_id == user_id),
    )).scalar_one_or_none()
    if stored is None or stored.token != token:
        raise AuthenticationError("Session expired or token invalid")

    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if user is None:
        raise AuthenticationError("User no longer exists")
    if not user.status:
        raise PermissionDeniedError("Account is suspended")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.type != UserType.ADMIN.value:
        raise PermissionDeniedError("Admin access required")
    return user


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
) -> PageParams:
    return PageParams(page=page, limit=limit)
