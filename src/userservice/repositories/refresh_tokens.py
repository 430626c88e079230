"""Refresh token store — at most one active refresh token per account."""

from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from userservice.db.models import RefreshToken


class RefreshTokenStore:
    """Maps account id → its current refresh token."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, account_id: int, token: str) -> RefreshToken:
        """Upsert: replaces any token previously stored for the account.

        Concurrent logins to the same account are not coordinated;
        the last writer wins.
        """
        row = await self.db.get(RefreshToken, account_id)
        if row is None:
            row = RefreshToken(account_id=account_id, token=token)
            self.db.add(row)
        else:
            row.token = token
        await self.db.flush()
        return row

    async def get(self, account_id: int) -> Optional[str]:
        row = await self.db.get(RefreshToken, account_id)
        return row.token if row else None

    async def delete_by_account_id(self, account_id: int) -> None:
        """Remove the stored token. Deleting a missing entry is a no-op."""
        await self.db.execute(
            delete(RefreshToken).where(RefreshToken.account_id == account_id)
        )
        await self.db.flush()
