"""User service — account and session lifecycle.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the stores. This makes the
code testable without HTTP.

The flows:
- sign_up: uniqueness checks → bcrypt digest → insert
- login: lookup → password check → deleted check → access + refresh tokens,
  refresh token stored (replacing any previous one)
- refresh_token: refresh token must verify AND match the stored one →
  new access token, same refresh token
- logout: best-effort removal of the stored refresh token; never fails
- get/update/delete: always through the active-account lookup, so a
  soft-deleted account behaves exactly like a missing one
"""

from dataclasses import dataclass
from typing import Callable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from userservice.auth.jwt import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    refresh_access_token,
)
from userservice.auth.password import hash_password, verify_password
from userservice.db.models import ACTIVE, Account
from userservice.errors import (
    AuthenticationError,
    InvalidTokenError,
    ResourceNotFoundError,
    UsernameAlreadyExistsError,
)
from userservice.repositories import AccountStore, RefreshTokenStore
from userservice.schemas.user import SignupRequest, UpdateUserRequest, UserRead
from userservice.timestamps import now_timestamp

logger = structlog.get_logger()


@dataclass(frozen=True)
class TokenPair:
    """Access/refresh token pair handed back to the client."""

    access_token: str
    refresh_token: str


class UserService:
    """Business logic for accounts and sessions."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Callable[[], str] = now_timestamp,
    ):
        self.db = db
        self.accounts = AccountStore(db)
        self.refresh_tokens = RefreshTokenStore(db)
        self.clock = clock

    # ─── Signup ─────────────────────────────────────────

    async def sign_up(self, request: SignupRequest) -> UserRead:
        if await self.accounts.exists_by_username(request.username):
            raise UsernameAlreadyExistsError("Username is already in use")
        if await self.accounts.exists_by_nickname(request.nickname):
            raise UsernameAlreadyExistsError("Nickname is already in use")

        now = self.clock()
        account = Account(
            username=request.username,
            password=hash_password(request.password),
            nickname=request.nickname,
            birth_date=request.birth_date,
            birth_time=request.birth_time,
            created_at=now,
            updated_at=now,
            deleted=ACTIVE,
        )
        await self.accounts.create(account)
        await self.db.commit()

        logger.info("user.signed_up", user_id=account.id, username=account.username)
        return UserRead.model_validate(account)

    # ─── Sessions ───────────────────────────────────────

    async def login(self, username: str, password: str) -> TokenPair:
        """Issue an access/refresh pair for valid credentials.

        Learn: Credentials are checked before the deleted flag, so a
        wrong password is always an authentication failure and only a
        caller holding the right password learns the account is gone.
        """
        account = await self.accounts.find_by_username(username)
        if account is None:
            raise ResourceNotFoundError(f"User {username} not found")
        if not verify_password(password, account.password):
            logger.info("user.login_rejected", username=username)
            raise AuthenticationError("Invalid credentials")
        if account.is_deleted:
            raise ResourceNotFoundError(f"User {username} not found")

        access_token = create_access_token(account.username, account.id)
        refresh_token = create_refresh_token(account.username, account.id)

        await self.refresh_tokens.save(account.id, refresh_token)
        await self.db.commit()

        logger.info("user.logged_in", user_id=account.id)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    async def refresh_token(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new access token.

        The refresh token must verify and be the one currently stored
        for its account (logout or a newer login invalidates it). It is
        echoed back unchanged.
        """
        claims = decode_refresh_token(refresh_token)

        stored = await self.refresh_tokens.get(claims.user_id)
        if stored is None or stored != refresh_token:
            raise InvalidTokenError("Refresh token is not recognised")

        account = await self.accounts.find_by_id(claims.user_id)
        if account is None or account.is_deleted or account.username != claims.username:
            raise InvalidTokenError("Token subject no longer exists")

        access_token = refresh_access_token(refresh_token)
        logger.info("user.token_refreshed", user_id=claims.user_id)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    async def logout(self, account_id: int) -> None:
        """Drop the stored refresh token. Always succeeds for the caller.

        Learn: Cleanup failures are logged (user.logout_failed) and
        rolled back, never raised. The client must see a successful
        logout either way. Already-issued access tokens stay valid
        until they expire.
        """
        try:
            await self.refresh_tokens.delete_by_account_id(account_id)
            await self.db.commit()
            logger.info("user.logged_out", user_id=account_id)
        except Exception:
            logger.exception("user.logout_failed", user_id=account_id)
            try:
                await self.db.rollback()
            except Exception:
                logger.exception("user.logout_rollback_failed", user_id=account_id)

    # ─── Profile ────────────────────────────────────────

    async def get_user_info(self, username: str) -> UserRead:
        account = await self.accounts.find_active_by_username(username)
        return UserRead.model_validate(account)

    async def update_user(self, username: str, request: UpdateUserRequest) -> UserRead:
        """Partial update of nickname and/or password.

        Keeping the current nickname skips the collision check.
        """
        account = await self.accounts.find_active_by_username(username)

        new_nickname = request.nickname
        if new_nickname is not None and new_nickname != account.nickname:
            if await self.accounts.exists_by_nickname(new_nickname):
                raise UsernameAlreadyExistsError("Nickname is already in use")
        else:
            new_nickname = None

        new_digest = (
            hash_password(request.password) if request.password is not None else None
        )
        now = self.clock()

        def apply(target: Account) -> None:
            if new_nickname is not None:
                target.change_nickname(new_nickname)
            if new_digest is not None:
                target.change_password(new_digest)
            target.touch(now)

        await self.accounts.mutate(account, apply)
        await self.db.commit()

        logger.info(
            "user.updated",
            user_id=account.id,
            nickname_changed=new_nickname is not None,
            password_changed=new_digest is not None,
        )
        return UserRead.model_validate(account)

    async def delete_user(self, username: str) -> None:
        """Soft delete: the row stays, deleted flips to "Y"."""
        account = await self.accounts.find_active_by_username(username)
        now = self.clock()

        def apply(target: Account) -> None:
            target.mark_deleted()
            target.touch(now)

        await self.accounts.mutate(account, apply)
        await self.db.commit()
        logger.info("user.deleted", user_id=account.id)

    # ─── Availability ───────────────────────────────────

    async def is_username_available(self, username: str) -> bool:
        return not await self.accounts.exists_by_username(username)

    async def is_nickname_available(self, nickname: str) -> bool:
        return not await self.accounts.exists_by_nickname(nickname)
