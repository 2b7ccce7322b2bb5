"""Authentication dependencies for FastAPI routes."""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from bookshelf.database import get_db
from bookshelf.errors import UnauthorizedError
from bookshelf.models.user import User
from bookshelf.services.jwt import get_jwt_service

logger = logging.getLogger("bookshelf")


def get_bearer_token(request: Request) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a user. Raises 401 if anything is wrong.

    The client always sees the same response; the reason is only logged.
    """
    token = get_bearer_token(request)
    if not token:
        logger.warning("Unauthorized access attempt on %s: missing or malformed Authorization header", request.url.path)
        raise UnauthorizedError()

    user_id = get_jwt_service().get_user_id(token)
    if user_id is None:
        logger.warning("Unauthorized access attempt on %s: invalid token", request.url.path)
        raise UnauthorizedError()

    user = db.get(User, user_id)
    if not user:
        logger.warning("Unauthorized access attempt on %s: user %s no longer exists", request.url.path, user_id)
        raise UnauthorizedError()

    request.state.user = user
    return user
