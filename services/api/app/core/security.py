from __future__ import annotations

from app.core.config import settings
from passlib.context import CryptContext  # type: ignore[import-untyped]

# bcrypt only accepts the first 72 bytes of a password.
BCRYPT_MAX_PASSWORD_BYTES = 72

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__default_rounds=settings.bcrypt_rounds,
    # Hashes below the configured cost are flagged by needs_update().
    bcrypt__min_rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored hash.

    A wrong password yields False. A stored value that is not a recognizable
    bcrypt hash raises ValueError.
    """
    return pwd_context.verify(plain_password, hashed_password)


def password_needs_rehash(hashed_password: str) -> bool:
    # True when the stored hash was made with a different cost factor.
    return pwd_context.needs_update(hashed_password)
