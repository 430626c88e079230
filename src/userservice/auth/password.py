"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
The work factor comes from settings.bcrypt_rounds (12 takes ~100ms
per hash on modern hardware; tests turn it down).
"""

import bcrypt

from userservice.config import settings

# bcrypt only looks at the first 72 bytes of the secret
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with bcrypt.

    Learn: bcrypt includes a random salt automatically and produces
    hashes starting with "$2b$". Passwords are truncated to 72 bytes.
    """
    pw_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify a password against its bcrypt digest.

    Never raises: a missing or malformed digest simply fails verification.
    """
    if not password_hash:
        return False
    try:
        pw_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False
