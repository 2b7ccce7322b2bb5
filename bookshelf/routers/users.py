"""User profile, settings and password API endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from bookshelf.config import get_settings
from bookshelf.database import get_db
from bookshelf.dependencies import get_current_user
from bookshelf.errors import NotFoundError
from bookshelf.models.user import User
from bookshelf.rate_limit import AUTH_RATE_LIMIT, limiter
from bookshelf.schemas.auth import RefreshTokenResponse
from bookshelf.schemas.common import MessageResponse
from bookshelf.schemas.user import (
    ForgotPasswordRequest,
    PasswordUpdateRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    ResetPasswordRequest,
    SettingsResponse,
    SettingsUpdateRequest,
    UserResponse,
    UserSettings,
)
from bookshelf.services.auth import get_auth_service
from bookshelf.services.jwt import get_jwt_service
from bookshelf.services.user import get_user_service

logger = logging.getLogger("bookshelf")

router = APIRouter(prefix=f"{get_settings().API_PREFIX}/users", tags=["Users"])

FORGOT_PASSWORD_MESSAGE = "If an account exists with that email, a password reset link has been sent."


@router.get("/profile", response_model=ProfileResponse)
def get_profile(user: User = Depends(get_current_user)) -> ProfileResponse:
    """Get the authenticated user's profile."""
    return ProfileResponse(message="User profile retrieved successfully", data=UserResponse.model_validate(user))


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """Update username, email or profile picture."""
    updated = get_user_service().update_profile(
        db,
        user,
        username=body.username,
        email=body.email,
        profile_picture=str(body.profile_picture) if body.profile_picture else None,
    )
    return ProfileResponse(message="User profile updated successfully", data=UserResponse.model_validate(updated))


@router.put("/password", response_model=MessageResponse)
def update_password(
    body: PasswordUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Change the password after confirming the current one."""
    get_user_service().change_password(db, user, body.old_password, body.new_password)
    return MessageResponse(message="Password updated successfully")


@router.get("/settings", response_model=SettingsResponse)
def get_user_settings(user: User = Depends(get_current_user)) -> SettingsResponse:
    return SettingsResponse(message="User settings retrieved successfully", settings=UserSettings(**user.settings))


@router.put("/settings", response_model=SettingsResponse)
def update_user_settings(
    body: SettingsUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SettingsResponse:
    updated = get_user_service().update_settings(
        db,
        user,
        notifications_enabled=body.notifications_enabled,
        email_preference=body.email_preference,
    )
    return SettingsResponse(message="User settings updated successfully", settings=UserSettings(**updated.settings))


@router.post("/refresh-token", response_model=RefreshTokenResponse)
def refresh_token(user: User = Depends(get_current_user)) -> RefreshTokenResponse:
    """Issue a fresh session token for the authenticated user."""
    jwt_service = get_jwt_service()
    logger.info("Token refreshed for user %s", user.id)
    return RefreshTokenResponse(
        message="Token refreshed successfully",
        token=jwt_service.create_token(user.id),
        expires_in=jwt_service.expires_in,
    )


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(AUTH_RATE_LIMIT)
def forgot_password(request: Request, body: ForgotPasswordRequest, db: Session = Depends(get_db)) -> MessageResponse:
    """Request a password reset email. The response does not reveal whether the email is registered."""
    try:
        get_auth_service().request_password_reset(db, body.email)
    except NotFoundError:
        logger.info("Password reset requested for unknown email")
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit(AUTH_RATE_LIMIT)
def reset_password(request: Request, body: ResetPasswordRequest, db: Session = Depends(get_db)) -> MessageResponse:
    """Set a new password using the token from the reset email."""
    get_auth_service().reset_password(db, body.token, body.new_password)
    return MessageResponse(message="Password has been reset successfully")
