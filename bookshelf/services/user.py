"""User profile, password and settings service."""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshelf.errors import DuplicateIdentityError, IncorrectPasswordError
from bookshelf.models.user import User

logger = logging.getLogger("bookshelf")


class UserService:
    """Owner-only mutations of a user's own record."""

    def update_profile(
        self,
        db: Session,
        user: User,
        username: str | None = None,
        email: str | None = None,
        profile_picture: str | None = None,
    ) -> User:
        """Apply profile changes. Raises DuplicateIdentityError if the new username or email is taken."""
        clauses = []
        if username is not None and username != user.username:
            clauses.append(User.username == username)
        if email is not None and email != user.email:
            clauses.append(User.email == email)
        if clauses:
            taken = db.query(User).filter(User.id != user.id, or_(*clauses)).first()
            if taken:
                raise DuplicateIdentityError()

        if username is not None:
            user.username = username
        if email is not None:
            user.email = email
        if profile_picture is not None:
            user.profile_picture = profile_picture

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateIdentityError() from None
        db.refresh(user)
        logger.info("User profile updated for user %s", user.id)
        return user

    def change_password(self, db: Session, user: User, old_password: str, new_password: str) -> None:
        """Replace the password after checking the current one."""
        if not user.check_password(old_password):
            raise IncorrectPasswordError()
        user.password = new_password
        db.commit()
        logger.info("Password updated for user %s", user.id)

    def update_settings(
        self,
        db: Session,
        user: User,
        notifications_enabled: bool | None = None,
        email_preference: str | None = None,
    ) -> User:
        """Apply partial settings changes."""
        if notifications_enabled is not None:
            user.notifications_enabled = notifications_enabled
        if email_preference is not None:
            user.email_preference = email_preference
        db.commit()
        db.refresh(user)
        logger.info("Settings updated for user %s", user.id)
        return user


_user_service: UserService | None = None


def get_user_service() -> UserService:
    """Get singleton user service instance."""
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
