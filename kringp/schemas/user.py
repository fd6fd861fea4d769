"""User Schemas — signup, login, profile edits and password flows.

Invariants:
    - Signup only creates BUSINESS or INFLUENCER accounts; ADMIN is never self-assigned
    - Profile updates cannot touch email_address or password
    - A profile update may omit type but never clear it
    - Passwords are 6..128 chars; OTPs are exactly 6 digits
"""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from kringp.core.domain_types import Gender, UserType


class ProfileFields(BaseModel):
    """Optional profile fields shared by signup and profile updates."""
    name: str | None = Field(None, max_length=200)
    state_id: UUID | None = None
    city_id: UUID | None = None
    brand_type_id: UUID | None = None
    user_image: str | None = Field(None, max_length=500)
    contact_person_name: str | None = Field(None, max_length=200)
    contact_person_phone_number: str | None = Field(None, max_length=30)
    birth_date: date | None = None
    sample_work_link: str | None = Field(None, max_length=500)
    about_you: str | None = None
    application_link: str | None = Field(None, max_length=500)
    description: str | None = None
    gst_number: str | None = Field(None, max_length=30)


class SignupRequest(ProfileFields):
    email_address: EmailStr
    password: str = Field(min_length=6, max_length=128)
    type: UserType = UserType.BUSINESS
    gender: Gender = Gender.MALE
    country_id: UUID
    subcategory_ids: list[UUID] = Field(default_factory=list)
    referral_code: str | None = Field(None, max_length=16)
    fcm_token: str | None = None

    @field_validator("type")
    @classmethod
    def no_admin_signup(cls, v: UserType) -> UserType:
        if v is UserType.ADMIN:
            raise ValueError("type must be BUSINESS or INFLUENCER")
        return v


class LoginRequest(BaseModel):
    email_address: EmailStr
    password: str = Field(min_length=1)
    fcm_token: str | None = None


class ProfileUpdate(ProfileFields):
    type: UserType | None = None
    gender: Gender | None = None
    country_id: UUID | None = None
    subcategory_ids: list[UUID] | None = None
    fcm_token: str | None = None
    email_address: str | None = None
    password: str | None = None

    @model_validator(mode="after")
    def credentials_not_editable(self):
        if self.email_address is not None or self.password is not None:
            raise ValueError("Email address and password cannot be updated here")
        if "type" in self.model_fields_set and self.type is None:
            raise ValueError("type cannot be null")
        if self.type is UserType.ADMIN:
            raise ValueError("type must be BUSINESS or INFLUENCER")
        return self


class SuspendRequest(BaseModel):
    suspend: bool


class ForgotPasswordRequest(BaseModel):
    email_address: EmailStr


class VerifyOtpRequest(BaseModel):
    email_address: EmailStr
    otp: str = Field(pattern=r"^\d{6}$")


class ResetPasswordRequest(BaseModel):
    email_address: EmailStr
    new_password: str = Field(min_length=6, max_length=128)
    confirm_password: str = Field(min_length=6, max_length=128)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)
