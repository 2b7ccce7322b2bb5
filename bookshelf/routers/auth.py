"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from bookshelf.config import get_settings
from bookshelf.database import get_db
from bookshelf.rate_limit import AUTH_RATE_LIMIT, limiter
from bookshelf.schemas.auth import LoginRequest, SignupRequest, SignupResponse, TokenResponse
from bookshelf.schemas.user import UserResponse
from bookshelf.services.auth import get_auth_service

router = APIRouter(prefix=f"{get_settings().API_PREFIX}/auth", tags=["Authentication"])


@router.post("/signup", response_model=SignupResponse, status_code=201)
@limiter.limit(AUTH_RATE_LIMIT)
def signup(request: Request, body: SignupRequest, db: Session = Depends(get_db)) -> SignupResponse:
    """Register a new user account."""
    user = get_auth_service().signup(
        db,
        username=body.username,
        email=body.email,
        password=body.password,
        profile_picture=str(body.profile_picture) if body.profile_picture else None,
    )
    return SignupResponse(message="User created successfully", user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
@limiter.limit(AUTH_RATE_LIMIT)
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Authenticate and receive a session token."""
    token, expires_in = get_auth_service().login(db, body.email, body.password)
    return TokenResponse(token=token, expires_in=expires_in)
