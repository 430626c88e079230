"""Account store — owns the lifecycle of user records.

Learn: exists_by_* checks and the following insert/update are separate
round trips, so two concurrent signups can both pass the check. The
unique constraints on users.username / users.nickname catch the loser;
we translate that IntegrityError into UsernameAlreadyExistsError instead
of retrying.
"""

from typing import Callable, Optional

import structlog
from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userservice.db.models import Account
from userservice.errors import ResourceNotFoundError, UsernameAlreadyExistsError

logger = structlog.get_logger()


class AccountStore:
    """SQLAlchemy-backed account persistence."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Uniqueness checks (any deletion state) ─────────

    async def exists_by_username(self, username: str) -> bool:
        result = await self.db.execute(
            select(exists().where(Account.username == username))
        )
        return bool(result.scalar())

    async def exists_by_nickname(self, nickname: str) -> bool:
        result = await self.db.execute(
            select(exists().where(Account.nickname == nickname))
        )
        return bool(result.scalar())

    # ─── Writes ─────────────────────────────────────────

    async def create(self, account: Account) -> Account:
        """Insert an account and return it with its id assigned."""
        self.db.add(account)
        await self._flush_or_conflict(username=account.username)
        return account

    async def mutate(
        self, account: Account, change: Callable[[Account], None]
    ) -> Account:
        """Apply an in-place change to a loaded account and flush it.

        No invariants are re-checked here beyond the DB constraints; the
        caller has already done its lookups and uniqueness checks.
        """
        change(account)
        await self._flush_or_conflict(username=account.username)
        return account

    async def _flush_or_conflict(self, username: str) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info("account.unique_violation", username=username)
            raise UsernameAlreadyExistsError(
                "Username or nickname is already in use"
            ) from e

    # ─── Lookups ────────────────────────────────────────

    async def find_by_username(self, username: str) -> Optional[Account]:
        result = await self.db.execute(
            select(Account).where(Account.username == username)
        )
        return result.scalars().first()

    async def find_by_id(self, account_id: int) -> Optional[Account]:
        return await self.db.get(Account, account_id)

    async def find_active_by_username(self, username: str) -> Account:
        """Look up an account that has not been soft-deleted.

        Learn: This is the one place the "not deleted" filter lives.
        Every login/read/update/delete path goes through it, so a
        deleted account looks exactly like a missing one.
        """
        account = await self.find_by_username(username)
        if account is None or account.is_deleted:
            raise ResourceNotFoundError(f"User {username} not found")
        return account
