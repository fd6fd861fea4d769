"""Group Schemas — creating groups, inviting members and answering invites.

Invariants:
    - group_name: 1-200 chars, stripped, non-empty
    - invited_user_ids are de-duplicated, order preserved
"""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from kringp.core.domain_types import Platform, Visibility


def _dedupe(ids: list[UUID]) -> list[UUID]:
    return list(dict.fromkeys(ids))


class GroupCreate(BaseModel):
    group_name: str = Field(min_length=1, max_length=200)
    group_image: str | None = Field(None, max_length=500)
    group_bio: str | None = None
    visibility: Visibility = Visibility.PUBLIC
    subcategory_ids: list[UUID] = Field(default_factory=list)
    social_platforms: list[Platform] = Field(default_factory=list)
    invited_user_ids: list[UUID] = Field(default_factory=list)

    @field_validator("group_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("group_name cannot be empty or whitespace")
        return v

    @field_validator("invited_user_ids")
    @classmethod
    def unique_invites(cls, v: list[UUID]) -> list[UUID]:
        return _dedupe(v)


class GroupUpdate(BaseModel):
    group_name: str | None = Field(None, min_length=1, max_length=200)
    group_image: str | None = Field(None, max_length=500)
    group_bio: str | None = None
    visibility: Visibility | None = None
    subcategory_ids: list[UUID] | None = None
    social_platforms: list[Platform] | None = None

    @field_validator("group_name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("group_name cannot be empty or whitespace")
        return v


class GroupMembersAdd(BaseModel):
    invited_user_ids: list[UUID] = Field(min_length=1)

    @field_validator("invited_user_ids")
    @classmethod
    def unique_invites(cls, v: list[UUID]) -> list[UUID]:
        return _dedupe(v)


class InviteResponse(BaseModel):
    accept: bool
