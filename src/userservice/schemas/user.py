"""Pydantic schemas for accounts and tokens.

Learn: UserRead is the only shape an account leaves the service in —
it has no password field and no deleted flag, so the digest can
never leak through a response.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ─── Requests ─────────────────────────────────────────────


class SignupRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str
    nickname: str = Field(min_length=1, max_length=50)
    birth_date: str
    birth_time: Optional[str] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class UpdateUserRequest(BaseModel):
    """Partial update: fields left out (None) are not touched.

    An empty string is a real value, not "absent".
    """

    nickname: Optional[str] = None
    password: Optional[str] = None


class RefreshRequest(BaseModel):
    refresh_token: str


# ─── Responses ────────────────────────────────────────────


class UserRead(BaseModel):
    id: int
    username: str
    nickname: str
    birth_date: str
    birth_time: Optional[str] = None
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AvailabilityResponse(BaseModel):
    value: str
    available: bool
