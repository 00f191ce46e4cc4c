"""bcrypt password hashing.

bcrypt only reads the first 72 bytes of a secret and recent releases raise
instead of truncating, so the UTF-8 encoding is cut to 72 bytes here.
A 20-character password of multi-byte characters can exceed that.
"""

import bcrypt

from config.settings import settings

_BCRYPT_MAX_BYTES = 72


def _secret(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_secret(plain), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """False for a wrong password and for a stored hash bcrypt cannot parse."""
    try:
        return bcrypt.checkpw(_secret(plain), hashed.encode("utf-8"))
    except ValueError:
        return False
