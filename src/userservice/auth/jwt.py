"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
- Access token: short-lived (30min), used for API calls
- Refresh token: long-lived (14 days), used to get new access tokens

Both carry the username (sub) and the account id (uid). Access tokens
have no server-side state; the refresh token is additionally tracked in
the refresh_tokens table so logout can revoke it.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from userservice.config import settings
from userservice.errors import InvalidTokenError

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """The subject a verified token speaks for."""

    username: str
    user_id: int
    token_type: str
    expires_at: datetime


def _encode(
    username: str, user_id: int, token_type: str, lifetime: timedelta
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": username,
        "uid": user_id,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
        # Two tokens minted in the same second must still differ
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_access_token(
    username: str,
    user_id: int,
    expires_minutes: Optional[int] = None,
) -> str:
    """Create a JWT access token."""
    minutes = (
        expires_minutes
        if expires_minutes is not None
        else settings.access_token_expire_minutes
    )
    return _encode(username, user_id, ACCESS, timedelta(minutes=minutes))


def create_refresh_token(
    username: str,
    user_id: int,
    expires_days: Optional[int] = None,
) -> str:
    """Create a JWT refresh token."""
    days = expires_days if expires_days is not None else settings.refresh_token_expire_days
    return _encode(username, user_id, REFRESH, timedelta(days=days))


def verify_token(token: str, expected_type: str) -> TokenClaims:
    """Verify and decode a JWT token of the given type.

    Returns the claims on success.
    Raises InvalidTokenError on a bad signature, expiry, wrong type,
    or missing subject claims.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub", "uid", "type"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid token: {e}")

    if payload.get("type") != expected_type:
        raise InvalidTokenError(f"Not an {expected_type} token")

    try:
        user_id = int(payload["uid"])
    except (TypeError, ValueError):
        raise InvalidTokenError("Invalid token: malformed subject id")

    return TokenClaims(
        username=payload["sub"],
        user_id=user_id,
        token_type=payload["type"],
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


def validate_access_token(token: str) -> TokenClaims:
    """Verify an access token (used by the request auth dependency)."""
    return verify_token(token, ACCESS)


def decode_refresh_token(token: str) -> TokenClaims:
    """Verify a refresh token's signature, expiry and type."""
    return verify_token(token, REFRESH)


def refresh_access_token(refresh_token: str) -> str:
    """Mint a new access token for the subject of a valid refresh token.

    Learn: The refresh token is not rotated. The caller keeps using
    the same one until it expires or is removed by logout.
    """
    claims = decode_refresh_token(refresh_token)
    return create_access_token(claims.username, claims.user_id)
