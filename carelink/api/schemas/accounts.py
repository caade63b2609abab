from __future__ import annotations

from datetime import date, datetime

from pydantic import AliasChoices, EmailStr, Field

from carelink.api.schemas.common import SchemaBase
from carelink.models.user import UserRole


class UserOut(SchemaBase):
    id: int
    full_name: str
    role: UserRole
    image_url: str | None = None
    created_at: datetime | None = None


class UserCreate(SchemaBase):
    full_name: str = Field(min_length=1, max_length=200)
    role: UserRole
    image_url: str | None = None


class UserUpdate(SchemaBase):
    full_name: str = Field(min_length=1, max_length=200)
    role: UserRole
    image_url: str | None = None


class CreatedOut(SchemaBase):
    user_id: int


class ParticipantCreate(SchemaBase):
    full_name: str = Field(min_length=1, max_length=200, validation_alias=AliasChoices("full_name", "fullName"))
    phone_number: str = Field(
        min_length=1, max_length=20, validation_alias=AliasChoices("phone_number", "phoneNumber")
    )
    birthdate: date
    image_url: str | None = None


class ParticipantOut(UserOut):
    phone_number: str
    birthdate: date


class CredentialAccountCreate(SchemaBase):
    full_name: str = Field(min_length=1, max_length=200, validation_alias=AliasChoices("full_name", "fullName"))
    email: EmailStr
    password: str = Field(min_length=6)
    image_url: str | None = None


class CredentialAccountOut(UserOut):
    email: str


class PasswordUpdate(SchemaBase):
    password: str = Field(min_length=6)


class LoginIn(SchemaBase):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthOut(SchemaBase):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


class CheckOrCreateIn(SchemaBase):
    phone_number: str = Field(
        min_length=1, max_length=20, validation_alias=AliasChoices("phone_number", "phoneNumber")
    )
    full_name: str = Field(min_length=1, max_length=200, validation_alias=AliasChoices("full_name", "fullName"))
    birthdate: date


class CheckOrCreateOut(SchemaBase):
    user_id: int
    is_new_user: bool
    message: str
    otp: str | None = None


class LoginOtpIn(SchemaBase):
    phone: str = Field(min_length=1, validation_alias=AliasChoices("phone", "phone_number", "phoneNumber"))
    otp: str = Field(min_length=1)
