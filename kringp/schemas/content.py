"""Admin-managed content — badges, app settings and direct notifications."""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class BadgeCreate(BaseModel):
    type: str = Field(min_length=1, max_length=10)
    title: str = Field(min_length=1, max_length=200)
    image: str | None = Field(None, max_length=500)
    description: str | None = None


class AppSettingCreate(BaseModel):
    slug: str = Field(min_length=1, max_length=100, pattern=r"^[a-z0-9][a-z0-9-]*$")
    value: str | None = None


class AppSettingUpdate(BaseModel):
    value: str | None = None


class NotificationSend(BaseModel):
    user_id: UUID
    title: str = Field(min_length=1, max_length=200)
    body: str = Field(min_length=1)

    @field_validator("title", "body")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v
