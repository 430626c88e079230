"""Users API — the authenticated user's own profile.

- GET /users/me → profile
- PUT /users/me → partial update (nickname and/or password)
- DELETE /users/me → soft delete
"""

from fastapi import APIRouter, Depends

from userservice.api.deps import get_user_service
from userservice.auth.dependencies import CurrentIdentity, get_current_user
from userservice.schemas.user import UpdateUserRequest, UserRead
from userservice.services.user_service import UserService

router = APIRouter(prefix="/users")


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return await service.get_user_info(identity.username)


@router.put("/me", response_model=UserRead)
async def update_me(
    body: UpdateUserRequest,
    identity: CurrentIdentity = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return await service.update_user(identity.username, body)


@router.delete("/me")
async def delete_me(
    identity: CurrentIdentity = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Soft-delete the current account."""
    await service.delete_user(identity.username)
    return {"deleted": True}
