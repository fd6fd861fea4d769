"""Security primitives — password hashing, JWT access tokens, field encryption, OTPs.

Invariants:
    - Passwords are stored as argon2 hashes only
    - Access tokens carry {user_id, email, exp}; decode returns None on any failure
    - Bank account numbers are Fernet-encrypted at rest and masked in responses

Design Decisions:
    - passlib CryptContext with deprecated="auto": hashes upgrade transparently
      if the scheme list changes
    - Secrets read from Settings at call time, so tests can swap them via env
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from cryptography.fernet import Fernet, InvalidToken
from jose import JWTError, jwt
from passlib.context import CryptContext

from kringp.config import get_settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognized hash format (e.g. social-login sentinel)
        return False


def create_access_token(
    user_id: str, email: str | None, now_utc: datetime | None = None,
) -> str:
    """Sign a token valid for `jwt_expire_days`."""
    settings = get_settings()
    now = now_utc or datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "user_id": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": now + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    settings = get_settings()
    try:
        return jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.info(f"Rejected access token: {e}")
        return None


def generate_otp() -> str:
    """Six-digit numeric one-time password."""
    return f"{secrets.randbelow(900_000) + 100_000}"


class FieldCipher:
    """Symmetric encryption for sensitive columns (bank account numbers)."""

    def __init__(self, key: str):
        self._fernet = Fernet(key.encode() if isinstance(key, str) else key)

    def encrypt(self, value: str) -> str:
        return self._fernet.encrypt(value.encode()).decode()

    def decrypt(self, token: str) -> str:
        try:
            return self._fernet.decrypt(token.encode()).decode()
        except InvalidToken:
            logger.error("Failed to decrypt stored field: invalid token or key")
            raise

    @staticmethod
    def mask(value: str, visible: int = 4) -> str:
        if len(value) <= visible:
            return value
        return "X" * (len(value) - visible) + value[-visible:]


def get_cipher() -> FieldCipher:
    return FieldCipher(get_settings().encryption_key)
