"""Auth API — signup, login, token refresh, logout, availability checks.

Learn: Routes for the session lifecycle:
- POST /auth/signup → create a new account
- POST /auth/login → username/password → access + refresh JWTs
- POST /auth/refresh → refresh token → new access token (same refresh token)
- POST /auth/logout → drop the stored refresh token (always succeeds)
- GET /auth/check-username, /auth/check-nickname → availability

Domain errors (409/404/401) are translated by the exception handlers
registered in main.create_app().
"""

from fastapi import APIRouter, Depends, Query

from userservice.api.deps import get_user_service
from userservice.auth.dependencies import CurrentIdentity, get_current_user
from userservice.schemas.user import (
    AvailabilityResponse,
    LoginRequest,
    RefreshRequest,
    SignupRequest,
    TokenResponse,
    UserRead,
)
from userservice.services.user_service import UserService

router = APIRouter(prefix="/auth")


@router.post("/signup", response_model=UserRead, status_code=201)
async def signup(body: SignupRequest, service: UserService = Depends(get_user_service)):
    """Create a new user account."""
    return await service.sign_up(body)


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, service: UserService = Depends(get_user_service)):
    """Login with username and password → JWT tokens."""
    tokens = await service.login(body.username, body.password)
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest, service: UserService = Depends(get_user_service)):
    """Exchange a refresh token for a new access token."""
    tokens = await service.refresh_token(body.refresh_token)
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/logout")
async def logout(
    identity: CurrentIdentity = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Log out the current user. Never fails once authenticated."""
    await service.logout(identity.user_id)
    return {"logged_out": True}


@router.get("/check-username", response_model=AvailabilityResponse)
async def check_username(
    username: str = Query(..., min_length=1),
    service: UserService = Depends(get_user_service),
):
    available = await service.is_username_available(username)
    return AvailabilityResponse(value=username, available=available)


@router.get("/check-nickname", response_model=AvailabilityResponse)
async def check_nickname(
    nickname: str = Query(..., min_length=1),
    service: UserService = Depends(get_user_service),
):
    available = await service.is_nickname_available(nickname)
    return AvailabilityResponse(value=nickname, available=available)
