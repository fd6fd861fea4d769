"""Password recovery — OTP issue/verify, reset, and authenticated change.

Invariants:
    - One pending reset per email (re-requesting replaces the OTP)
    - OTP is checked before expiry; reset requires a verified OTP and consumes it
    - Forgot-password answers the same whether or not the email is registered
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user
from kringp.config import get_settings
from kringp.core.clock import ensure_utc, utcnow
from kringp.core.envelope import success
from kringp.core.errors import AuthenticationError, BusinessRuleError, ValidationFailedError
from kringp.infrastructure.database import get_db
from kringp.infrastructure.mailer import Mailer, get_mailer
from kringp.infrastructure.security import generate_otp, hash_password, verify_password
from kringp.models import PasswordReset, User
from kringp.schemas.user import (
    ChangePasswordRequest, ForgotPasswordRequest, ResetPasswordRequest, VerifyOtpRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/password", tags=["password"])

_FORGOT_MESSAGE = "If the email is registered, an OTP has been sent"


async def _reset_for(db: AsyncSession, email: str) -> PasswordReset:
    reset = (await db.execute(
        select(PasswordReset).where(PasswordReset.email_address == email),
    )).scalar_one_or_none()
    if reset is None:
        raise BusinessRuleError("No password reset was requested for this email")
    return reset


@router.post("/forgot")
async def forgot_password(
    body: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    email = body.email_address.lower()
    user = (await db.execute(
        select(User).where(User.email_address == email),
    )).scalar_one_or_none()
    if user is None:
        logger.info("Password reset requested for unknown email")
        return success(_FORGOT_MESSAGE)

    otp = generate_otp()
    expires_at = utcnow() + timedelta(minutes=get_settings().otp_ttl_minutes)
    reset = (await db.execute(
        select(PasswordReset).where(PasswordReset.email_address == email),
    )).scalar_one_or_none()
    if reset is None:
        db.add(PasswordReset(email_address=email, otp=otp, expires_at=expires_at, verified=False))
    else:
        reset.otp, reset.expires_at, reset.verified = otp, expires_at, False
    await db.commit()

    await mailer.send(
        email,
        "Your KringP password reset code",
        f"Your one-time password is {otp}. It expires in "
        f"{get_settings().otp_ttl_minutes} minutes.",
    )
    return success(_FORGOT_MESSAGE)


@router.post("/verify-otp")
async def verify_otp(body: VerifyOtpRequest, db: AsyncSession = Depends(get_db)):
    reset = await _reset_for(db, body.email_address.lower())
    if reset.otp != body.otp:
        raise ValidationFailedError("Invalid OTP.", "otp")
    if ensure_utc(reset.expires_at) < utcnow():
        raise BusinessRuleError("OTP expired.", "OTP_EXPIRED")
    reset.verified = True
    await db.commit()
    return success("OTP verified successfully")


@router.post("/reset")
async def reset_password(body: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    if body.new_password != body.confirm_password:
        raise ValidationFailedError("Passwords do not match", "confirm_password")
    email = body.email_address.lower()
    reset = await _reset_for(db, email)
    if not reset.verified:
        raise BusinessRuleError("OTP has not been verified", "OTP_NOT_VERIFIED")
    user = (await db.execute(
        select(User).where(User.email_address == email),
    )).scalar_one_or_none()
    if user is None:
        raise BusinessRuleError("No account found for this email")
    user.password = hash_password(body.new_password)
    await db.delete(reset)
    await db.commit()
    logger.info("Password reset", extra={"user_id": str(user.id)})
    return success("Password reset successfully")


@router.post("/change")
async def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not verify_password(body.current_password, user.password):
        raise AuthenticationError("Current password is incorrect")
    user.password = hash_password(body.new_password)
    await db.commit()
    return success("Password changed successfully")
