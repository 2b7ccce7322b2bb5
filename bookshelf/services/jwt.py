"""JWT session token service."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from bookshelf.config import get_settings

logger = logging.getLogger("bookshelf")


class JWTService:
    """Handles session token creation and validation."""

    def __init__(self) -> None:
        settings = get_settings()
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_minutes = settings.JWT_EXPIRE_MINUTES

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds."""
        return self.expire_minutes * 60

    def create_token(self, user_id: int) -> str:
        """Create a session token for the given user."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a session token. Returns None if invalid.

        The reason a token was rejected is only logged, never returned.
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.info("Rejected session token: expired")
        except JWTError as e:
            logger.info("Rejected session token: %s", e)
        return None

    def get_user_id(self, token: str) -> int | None:
        """Return the subject of a valid token."""
        payload = self.decode_token(token)
        if not payload:
            return None
        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            logger.info("Rejected session token: missing or malformed subject")
            return None


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService()
    return _jwt_service
