"""Shared route dependencies."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from userservice.db.engine import get_db
from userservice.services.user_service import UserService


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)
