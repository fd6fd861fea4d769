"""Users & Auth — signup, login/logout, profiles, listing, suspension and profile clicks.

Invariants:
    - Email addresses are stored lowercased and unique
    - Login stores the issued token; only the stored token authenticates (single session)
    - Profile edits and deletes are limited to the account itself or an admin
    - profile_completion is recomputed after every profile change

Design Decisions:
    - Referral reward applied inside the signup transaction: a failed signup
      never leaves the referrer credited
"""

import logging
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user, page_params, require_admin
from kringp.core.domain_types import UserType
from kringp.core.envelope import success
from kringp.core.errors import (
    AuthenticationError, BusinessRuleError, ConflictError, PermissionDeniedError,
    ValidationFailedError,
)
from kringp.core.pagination import PageParams
from kringp.core.profile_completion import completion_suggestions
from kringp.core.referral import generate_referral_code
from kringp.infrastructure.database import get_db
from kringp.infrastructure.security import (
    create_access_token, hash_password, verify_password,
)
from kringp.models import (
    BrandType, City, Country, State, User, UserAuthToken,
)
from kringp.schemas.user import (
    LoginRequest, ProfileUpdate, SignupRequest, SuspendRequest,
)
from kringp.services.common import get_or_404, paginate, reload
from kringp.services.serializers import user_profile
from kringp.services.users import (
    profile_facts, record_view, refresh_completion, replace_subcategories,
    validate_subcategory_ids,
)
from kringp.services.wallet import reward_referral

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])

_REFERRAL_ATTEMPTS = 10
_PROFILE_REFS = (
    ("country_id", Country, "Country"),
    ("state_id", State, "State"),
    ("city_id", City, "City"),
    ("brand_type_id", BrandType, "Brand type"),
)


async def _unique_referral_code(db: AsyncSession, name: str | None) -> str:
    for _ in range(_REFERRAL_ATTEMPTS):
        code = generate_referral_code(name)
        taken = await db.scalar(select(User.id).where(User.referral_code == code))
        if not taken:
            return code
    raise ConflictError("Could not allocate a referral code, please retry")


async def _check_profile_refs(db: AsyncSession, values: dict) -> None:
    for field, model, label in _PROFILE_REFS:
        if values.get(field) is not None:
            await get_or_404(db, model, values[field], label)


def _require_self_or_admin(current: User, user_id: UUID) -> None:
    if current.id != user_id and current.type != UserType.ADMIN.value:
        raise PermissionDeniedError("You can only manage your own account")


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, db: AsyncSession = Depends(get_db)):
    email = body.email_address.lower()
    if await db.scalar(select(User.id).where(User.email_address == email)):
        raise ConflictError("Email address is already registered")

    fields = body.model_dump(
        exclude={"email_address", "password", "subcategory_ids", "referral_code", "type", "gender"},
    )
    await _check_profile_refs(db, fields)
    subcategory_ids = await validate_subcategory_ids(db, body.subcategory_ids)

    referrer = None
    if body.referral_code:
        referrer = (await db.execute(
            select(User).where(User.referral_code == body.referral_code.strip().upper()),
        )).scalar_one_or_none()
        if referrer is None:
            raise ValidationFailedError("Invalid referral code", "referral_code")

    user = User(
        **fields,
        email_address=email,
        password=hash_password(body.password),
        type=body.type.value,
        gender=body.gender.value,
        login_type="NONE",
        referral_code=await _unique_referral_code(db, body.name),
        referred_by_id=referrer.id if referrer else None,
        view_count=0,
        ratings=Decimal("0"),
        profile_completion=0,
        status=True,
    )
    db.add(user)
    await db.flush()
    await replace_subcategories(db, user.id, subcategory_ids)
    if referrer is not None:
        await reward_referral(db, referrer.id, body.name or email)
    await refresh_completion(db, user.id)
    await db.commit()

    user = await reload(db, User, user.id)
    logger.info("User signed up", extra={"user_id": str(user.id)})
    return success("Signup successful", user_profile(user))


@router.post("/login")
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = (await db.execute(
        select(User).where(User.email_address == body.email_address.lower()),
    )).scalar_one_or_none()
    if user is None:
        raise AuthenticationError("Invalid email address.")
    if not verify_password(body.password, user.password):
        raise AuthenticationError("Invalid password.")
    if not user.status:
        raise PermissionDeniedError("Account is suspended")

    if body.fcm_token:
        user.fcm_token = body.fcm_token
    token = create_access_token(str(user.id), user.email_address)
    stored = (await db.execute(
        select(UserAuthToken).where(UserAuthToken.user_id == user.id),
    )).scalar_one_or_none()
    if stored is None:
        db.add(UserAuthToken(user_id=user.id, token=token))
    else:
        stored.token = token
    await db.commit()

    user = await reload(db, User, user.id)
    logger.info("User logged in", extra={"user_id": str(user.id)})
    return success("Login successful", {"user": user_profile(user), "token": token})


@router.post("/logout")
async def logout(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    await db.execute(delete(UserAuthToken).where(UserAuthToken.user_id == user.id))
    await db.commit()
    return success("Logged out successfully")


@router.get("/me")
async def get_me(user: User = Depends(get_current_user)):
    return success("Profile fetched successfully", {
        **user_profile(user),
        "suggestions": completion_suggestions(profile_facts(user)),
    })


@router.get("")
async def list_users(
    type_filter: str | None = Query(None, alias="type"),
    search: str | None = Query(None, max_length=100),
    params: PageParams = Depends(page_params),
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = select(User).order_by(User.created_at.desc())
    if type_filter is not None:
        if type_filter.upper() not in (UserType.BUSINESS.value, UserType.INFLUENCER.value):
            raise ValidationFailedError("Invalid user type", "type")
        query = query.where(User.type == type_filter.upper())
    if search:
        query = query.where(func.lower(User.name).contains(search.lower()))
    data = await paginate(db, query, params, "users", user_profile)
    return success("Users fetched successfully", data)


@router.get("/{user_id}")
async def get_user(
    user_id: UUID,
    current: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await get_or_404(db, User, user_id, "User")
    if current.id != user.id:
        await record_view(db, current.id, user.id)
        await db.commit()
    return success("User fetched successfully", user_profile(user))


@router.patch("/{user_id}")
async def update_user(
    user_id: UUID,
    body: ProfileUpdate,
    current: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    _require_self_or_admin(current, user_id)
    user = await get_or_404(db, User, user_id, "User")
    values = body.model_dump(
        exclude_unset=True, exclude={"subcategory_ids", "email_address", "password"},
    )
    await _check_profile_refs(db, values)
    for field, value in values.items():
        setattr(user, field, value.value if hasattr(value, "value") else value)
    if body.subcategory_ids is not None:
        ids = await validate_subcategory_ids(db, body.subcategory_ids)
        await replace_subcategories(db, user.id, ids)
    await refresh_completion(db, user.id)
    await db.commit()

    user = await reload(db, User, user.id)
    return success("Profile updated successfully", user_profile(user))


@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    current: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    _require_self_or_admin(current, user_id)
    user = await get_or_404(db, User, user_id, "User")
    await db.execute(delete(UserAuthToken).where(UserAuthToken.user_id == user.id))
    await db.delete(user)
    await db.commit()
    logger.info("User deleted", extra={"user_id": str(user_id)})
    return success("User deleted successfully")


@router.post("/{user_id}/suspend")
async def suspend_user(
    user_id: UUID,
    body: SuspendRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await get_or_404(db, User, user_id, "User")
    if user.id == admin.id:
        raise BusinessRuleError("You cannot suspend your own account")
    user.status = not body.suspend
    if body.suspend:
        await db.execute(delete(UserAuthToken).where(UserAuthToken.user_id == user.id))
    await db.commit()
    message = "User suspended successfully" if body.suspend else "User reactivated successfully"
    return success(message, {"id": user.id, "status": user.status})


@router.post("/{user_id}/click")
async def record_click(
    user_id: UUID,
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await get_or_404(db, User, user_id, "User")
    if user.type != UserType.INFLUENCER.value:
        raise BusinessRuleError("User is not an influencer.")
    user.view_count = (user.view_count or 0) + 1
    await db.commit()
    return success("Click recorded", {"click_count": user.view_count})
