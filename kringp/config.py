"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in production)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Outbound integrations (push, payments, SMTP) default to empty credentials;
      the clients refuse to send until they are configured
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://kringp:kringp@db:5432/kringp"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7
    otp_ttl_minutes: int = 10

    # Fernet key for bank account numbers (urlsafe base64, 32 bytes)
    encryption_key: str = "bXktZGV2LWVuY3J5cHRpb24ta2V5LTMyLWJ5dGVzISE="

    # Push notifications
    push_api_url: str = "https://fcm.googleapis.com/fcm/send"
    push_server_key: str = ""
    push_timeout_seconds: int = 10

    # Payment gateway
    payment_api_url: str = "https://api.razorpay.com/v1"
    payment_key_id: str = ""
    payment_key_secret: str = ""
    payment_timeout_seconds: int = 30
    payment_max_retries: int = 2

    # Mail
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    mail_from: str = "no-reply@kringp.com"

    # Business rules
    platform_fee_rate: Decimal = Decimal("0.20")

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
