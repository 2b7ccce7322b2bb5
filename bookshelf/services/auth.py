"""Authentication service: signup, login and password reset."""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshelf.config import get_settings
from bookshelf.errors import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
)
from bookshelf.models.user import DEFAULT_PROFILE_PICTURE, User
from bookshelf.services.email import get_email_service
from bookshelf.services.jwt import get_jwt_service
from bookshelf.services.passwords import burn_verification


def hash_reset_token(token: str) -> str:
    """One-way digest stored in place of a reset token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class AuthService:
    """Handles user registration, authentication and password resets."""

    def __init__(self) -> None:
        self.logger = logging.getLogger("bookshelf")

    def signup(
        self,
        db: Session,
        username: str,
        email: str,
        password: str,
        profile_picture: str | None = None,
    ) -> User:
        """Register a new user. Raises DuplicateIdentityError if email or username is taken."""
        username = username.strip()
        email = email.strip().lower()

        existing = db.query(User).filter(or_(User.email == email, User.username == username)).first()
        if existing:
            raise DuplicateIdentityError()

        user = User(
            username=username,
            email=email,
            password=password,
            profile_picture=profile_picture or DEFAULT_PROFILE_PICTURE,
            roles=["user"],
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race against a concurrent signup for the same identity.
            db.rollback()
            raise DuplicateIdentityError() from None
        db.refresh(user)

        self.logger.info("User %s signed up", user.id)
        return user

    def authenticate(self, db: Session, email: str, password: str) -> User:
        """Check credentials. Unknown email and wrong password raise the same error."""
        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user:
            burn_verification(password)
            raise InvalidCredentialsError()

        if not user.check_password(password):
            raise InvalidCredentialsError()

        return user

    def login(self, db: Session, email: str, password: str) -> tuple[str, int]:
        """Authenticate and issue a session token. Returns (token, expires_in_seconds)."""
        user = self.authenticate(db, email, password)
        jwt_service = get_jwt_service()
        self.logger.info("User %s logged in", user.id)
        return jwt_service.create_token(user.id), jwt_service.expires_in

    def issue_password_reset_token(self, db: Session, user: User) -> str:
        """Store the digest and expiry of a fresh reset token. Returns the plaintext token."""
        settings = get_settings()
        token = secrets.token_hex(32)
        user.password_reset_token = hash_reset_token(token)
        user.password_reset_expires = datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
        db.commit()
        return token

    def request_password_reset(self, db: Session, email: str) -> None:
        """Issue a reset token and email it to the user.

        Raises NotFoundError when no account uses the email, and EmailDeliveryError
        when the message cannot be sent. The token stays stored in the latter case;
        requesting again issues a new one.
        """
        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user:
            raise NotFoundError("User not found")

        token = self.issue_password_reset_token(db, user)
        get_email_service().send_password_reset_email(user.email, token)
        self.logger.info("Password reset requested for user %s", user.id)

    def reset_password(self, db: Session, token: str, new_password: str) -> User:
        """Set a new password using an unexpired reset token. The token is consumed."""
        user = (
            db.query(User)
            .filter(
                User.password_reset_token == hash_reset_token(token),
                User.password_reset_expires > datetime.utcnow(),
            )
            .first()
        )
        if not user:
            raise InvalidOrExpiredTokenError()

        user.password = new_password
        user.clear_password_reset()
        db.commit()
        db.refresh(user)

        self.logger.info("Password reset completed for user %s", user.id)
        return user


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
