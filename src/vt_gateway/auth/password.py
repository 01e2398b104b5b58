"""Password hashing utilities using bcrypt.

Uses the ``bcrypt`` library directly (>=4.0). Cost factor comes from
BCRYPT_ROUNDS (12 in every deployed environment); ``checkpw`` compares in
constant time.
"""

import bcrypt

from config.settings import settings

# bcrypt only reads the first 72 bytes; hashpw raises past that.
MAX_PASSWORD_BYTES = 72


def hash_password(plain: str, rounds: int | None = None) -> str:
    """Hash a plain-text password with bcrypt. Returns a utf-8 hash string."""
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plain-text password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False
