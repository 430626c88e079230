"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Health and most of /auth are open. Every /users route and
logout declare get_current_user themselves, since they need the
resolved identity anyway.
"""

from fastapi import APIRouter

from userservice.api.auth import router as auth_router
from userservice.api.health import router as health_router
from userservice.api.users import router as users_router

api_router = APIRouter(prefix="/api/v1")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — each handler requires a valid access token
api_router.include_router(users_router, tags=["users"])
