"""Pydantic schemas for user profile and settings endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field, HttpUrl, field_validator

from bookshelf.schemas.common import APIModel

MAX_URL_LENGTH = 1024


def check_url_length(v: HttpUrl | None) -> HttpUrl | None:
    if v is not None and len(str(v)) > MAX_URL_LENGTH:
        raise ValueError(f"URL must be at most {MAX_URL_LENGTH} characters long")
    return v


class UserSettings(APIModel):
    notifications_enabled: bool
    email_preference: Literal["daily", "weekly", "monthly"]


class UserResponse(APIModel):
    """Public view of a user. Never carries the password hash or reset fields."""

    id: int
    username: str
    email: str
    profile_picture: str
    roles: list[str]
    settings: UserSettings
    created_at: datetime
    updated_at: datetime


class ProfileResponse(APIModel):
    message: str
    data: UserResponse


class ProfileUpdateRequest(APIModel):
    username: str | None = Field(default=None, min_length=3, max_length=20)
    email: EmailStr | None = None
    profile_picture: HttpUrl | None = None

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("profile_picture")
    @classmethod
    def check_picture_length(cls, v):
        return check_url_length(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower() if v else v


class PasswordUpdateRequest(APIModel):
    old_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)


class SettingsUpdateRequest(APIModel):
    notifications_enabled: bool | None = None
    email_preference: Literal["daily", "weekly", "monthly"] | None = None


class SettingsResponse(APIModel):
    message: str
    settings: UserSettings


class ForgotPasswordRequest(APIModel):
    email: EmailStr


class ResetPasswordRequest(APIModel):
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)
