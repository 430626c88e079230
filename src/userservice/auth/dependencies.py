"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current identity from the request. The Bearer access
token is verified statelessly (no database hit) and yields the
username and account id the user routes operate on.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException

from userservice.auth.jwt import validate_access_token
from userservice.errors import InvalidTokenError


class CurrentIdentity:
    """The authenticated principal making the request."""

    def __init__(self, username: str, user_id: int):
        self.username = username
        self.user_id = user_id

    def __repr__(self) -> str:
        return f"CurrentIdentity(username={self.username!r}, user_id={self.user_id})"


async def get_current_user_optional(
    authorization: Optional[str] = Header(None),
) -> Optional[CurrentIdentity]:
    """Extract current identity (optional — returns None if no auth)."""
    if not authorization or not authorization.startswith("Bearer "):
        return None

    token = authorization[7:]
    try:
        claims = validate_access_token(token)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return CurrentIdentity(username=claims.username, user_id=claims.user_id)


async def get_current_user(
    identity: Optional[CurrentIdentity] = Depends(get_current_user_optional),
) -> CurrentIdentity:
    """Extract current identity (required — 401 if no auth)."""
    if not identity:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity
