"""User model."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String

from bookshelf.database import Base
from bookshelf.services.passwords import hash_password, verify_password

DEFAULT_PROFILE_PICTURE = "https://images.pexels.com/photos/1697912/pexels-photo-1697912.jpeg"
ROLES = ("user", "admin")
EMAIL_PREFERENCES = ("daily", "weekly", "monthly")


class User(Base):
    """Application user."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    profile_picture = Column(String(1024), nullable=False, default=DEFAULT_PROFILE_PICTURE)
    roles = Column(JSON, nullable=False, default=lambda: ["user"])
    password_reset_token = Column(String(64), nullable=True, index=True)
    password_reset_expires = Column(DateTime, nullable=True)
    notifications_enabled = Column(Boolean, nullable=False, default=True)
    email_preference = Column(String(16), nullable=False, default="weekly")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def password(self):
        raise AttributeError("password is write-only")

    @password.setter
    def password(self, plaintext: str) -> None:
        # Only assigning a new plaintext re-hashes; other saves leave the hash alone.
        self.password_hash = hash_password(plaintext)

    def check_password(self, plaintext: str) -> bool:
        return verify_password(plaintext, self.password_hash)

    def clear_password_reset(self) -> None:
        self.password_reset_token = None
        self.password_reset_expires = None

    @property
    def settings(self) -> dict:
        return {
            "notifications_enabled": self.notifications_enabled,
            "email_preference": self.email_preference,
        }
