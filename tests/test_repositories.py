"""Store tests — uniqueness enforcement, guarded lookup, refresh token upsert."""

import pytest

from userservice.db.models import Account
from userservice.errors import ResourceNotFoundError, UsernameAlreadyExistsError
from userservice.repositories import AccountStore, RefreshTokenStore


def _account(username: str = "alice", nickname: str = "Ali") -> Account:
    return Account(
        username=username,
        password="$2b$04$not-a-real-digest",
        nickname=nickname,
        birth_date="19900101",
        birth_time=None,
        created_at="20240101000000",
        updated_at="20240101000000",
        deleted="N",
    )


@pytest.mark.asyncio
async def test_create_assigns_id(db_session):
    store = AccountStore(db_session)

    account = await store.create(_account())

    assert account.id is not None
    assert await store.exists_by_username("alice")
    assert await store.exists_by_nickname("Ali")
    assert not await store.exists_by_username("bob")


@pytest.mark.asyncio
async def test_unique_violation_becomes_username_exists(db_session):
    """Two signups that both passed the existence check: the DB decides."""
    store = AccountStore(db_session)
    await store.create(_account())
    await db_session.commit()

    with pytest.raises(UsernameAlreadyExistsError):
        await store.create(_account(nickname="Other"))

    with pytest.raises(UsernameAlreadyExistsError):
        await store.create(_account(username="bob"))


@pytest.mark.asyncio
async def test_mutate_nickname_collision(db_session):
    store = AccountStore(db_session)
    await store.create(_account())
    bob = await store.create(_account(username="bob", nickname="Bobby"))
    await db_session.commit()

    with pytest.raises(UsernameAlreadyExistsError):
        await store.mutate(bob, lambda a: a.change_nickname("Ali"))


@pytest.mark.asyncio
async def test_find_active_hides_deleted(db_session):
    store = AccountStore(db_session)
    account = await store.create(_account())

    assert (await store.find_active_by_username("alice")).id == account.id

    await store.mutate(account, lambda a: a.mark_deleted())

    with pytest.raises(ResourceNotFoundError):
        await store.find_active_by_username("alice")
    assert (await store.find_by_username("alice")).is_deleted
    assert (await store.find_by_id(account.id)).is_deleted


@pytest.mark.asyncio
async def test_find_active_missing(db_session):
    with pytest.raises(ResourceNotFoundError):
        await AccountStore(db_session).find_active_by_username("ghost")


@pytest.mark.asyncio
async def test_refresh_token_save_replaces(db_session):
    account = await AccountStore(db_session).create(_account())
    tokens = RefreshTokenStore(db_session)

    await tokens.save(account.id, "first")
    await tokens.save(account.id, "second")

    assert await tokens.get(account.id) == "second"


@pytest.mark.asyncio
async def test_refresh_token_delete_is_idempotent(db_session):
    account = await AccountStore(db_session).create(_account())
    tokens = RefreshTokenStore(db_session)
    await tokens.save(account.id, "token")

    await tokens.delete_by_account_id(account.id)
    await tokens.delete_by_account_id(account.id)
    await tokens.delete_by_account_id(999)

    assert await tokens.get(account.id) is None
