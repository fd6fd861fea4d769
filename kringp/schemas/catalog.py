"""Catalog Schemas — reference data (locations, categories, brand types)."""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class CatalogItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    parent_id: UUID | None = None
    code: str | None = Field(None, max_length=8)
    image: str | None = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class CatalogItemUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    parent_id: UUID | None = None
    code: str | None = Field(None, max_length=8)
    image: str | None = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class InfluencerBySubcategoryRequest(BaseModel):
    subcategory_ids: list[UUID] = Field(min_length=1)
