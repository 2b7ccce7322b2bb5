"""Password hashing and verification."""

import bcrypt

from bookshelf.config import get_settings

# bcrypt only looks at the first 72 bytes; newer releases raise instead of truncating.
_MAX_PASSWORD_BYTES = 72

_dummy_hash: bytes | None = None


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_MAX_PASSWORD_BYTES]


def hash_password(plaintext: str) -> str:
    """Hash a plaintext password with a fresh salt."""
    rounds = get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plaintext: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored hash."""
    try:
        return bcrypt.checkpw(_encode(plaintext), password_hash.encode("utf-8"))
    except ValueError:
        return False


def burn_verification(plaintext: str) -> None:
    """Spend the same bcrypt work as a real check when there is no user to check against."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("bookshelf-dummy-password").encode("utf-8")
    bcrypt.checkpw(_encode(plaintext), _dummy_hash)
