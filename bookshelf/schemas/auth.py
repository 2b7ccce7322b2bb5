"""Pydantic schemas for authentication endpoints."""

from pydantic import EmailStr, Field, HttpUrl, field_validator

from bookshelf.schemas.common import APIModel
from bookshelf.schemas.user import UserResponse, check_url_length


class SignupRequest(APIModel):
    username: str = Field(min_length=3, max_length=20)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
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
        return v.lower()


class SignupResponse(APIModel):
    message: str
    user: UserResponse


class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class TokenResponse(APIModel):
    token: str
    expires_in: int


class RefreshTokenResponse(TokenResponse):
    message: str
