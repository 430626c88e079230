"""userservice CLI — talk to a running user service over HTTP.

Usage:
    userservice signup alice --nickname Ali --birth-date 19900101
    userservice login alice                    # prints access + refresh tokens
    userservice refresh <refresh-token>        # new access token
    userservice logout --token <access-token>  # revoke the refresh token
    userservice me --token <access-token>      # profile
    userservice update-me --token <access-token> --nickname Alicia
    userservice check-username alice
    userservice check-nickname Ali
    userservice delete-me --token <access-token>
    userservice serve                          # run the API with uvicorn
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

from userservice import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("USERSERVICE_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the user service."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Offloads to a thread when an event loop is already running
    (e.g. CliRunner inside an async test).
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _auth_headers(token: Optional[str]) -> dict:
    tok = token or os.environ.get("USERSERVICE_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set USERSERVICE_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return {"Authorization": f"Bearer {tok}"}


def _check(r: httpx.Response) -> dict:
    """Return the JSON body, or print the server's error and exit 1."""
    if r.is_success:
        return r.json()
    try:
        detail = r.json().get("detail", r.text)
    except ValueError:
        detail = r.text
    click.secho(f"Error ({r.status_code}): {detail}", fg="red", err=True)
    sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="userservice")
def main():
    """userservice — accounts, logins and tokens."""


@main.command()
@click.argument("username")
@click.option("--nickname", "-n", required=True, help="Public display name")
@click.option("--birth-date", required=True, help="Birth date (e.g. 19900101)")
@click.option("--birth-time", default=None, help="Birth time (e.g. 0800)")
@click.password_option()
def signup(username: str, nickname: str, birth_date: str,
           birth_time: Optional[str], password: str):
    """Register a new account."""
    _run(_signup_impl(username, password, nickname, birth_date, birth_time))


async def _signup_impl(username, password, nickname, birth_date, birth_time):
    async with _client() as c:
        r = await c.post("/api/v1/auth/signup", json={
            "username": username,
            "password": password,
            "nickname": nickname,
            "birth_date": birth_date,
            "birth_time": birth_time,
        })
        user = _check(r)
    click.secho(f"Account created: {user['username']} (id={user['id']})", fg="green")


@main.command()
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True)
def login(username: str, password: str):
    """Log in and print the token pair."""
    _run(_login_impl(username, password))


async def _login_impl(username: str, password: str):
    async with _client() as c:
        r = await c.post("/api/v1/auth/login", json={
            "username": username,
            "password": password,
        })
        tokens = _check(r)
    click.echo(_pretty_json(tokens))


@main.command()
@click.argument("refresh_token")
def refresh(refresh_token: str):
    """Exchange a refresh token for a new access token."""
    _run(_refresh_impl(refresh_token))


async def _refresh_impl(refresh_token: str):
    async with _client() as c:
        r = await c.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
        tokens = _check(r)
    click.echo(_pretty_json(tokens))


@main.command()
@click.option("--token", help="Access token (or set USERSERVICE_TOKEN)")
def logout(token: Optional[str]):
    """Revoke the refresh token of the current account."""
    headers = _auth_headers(token)
    _run(_logout_impl(headers))


async def _logout_impl(headers: dict):
    async with _client() as c:
        _check(await c.post("/api/v1/auth/logout", headers=headers))
    click.secho("Logged out.", fg="green")


@main.command()
@click.option("--token", help="Access token (or set USERSERVICE_TOKEN)")
def me(token: Optional[str]):
    """Show the current account."""
    headers = _auth_headers(token)
    _run(_me_impl(headers))


async def _me_impl(headers: dict):
    async with _client() as c:
        user = _check(await c.get("/api/v1/users/me", headers=headers))
    click.echo(_pretty_json(user))


@main.command("update-me")
@click.option("--token", help="Access token (or set USERSERVICE_TOKEN)")
@click.option("--nickname", "-n", default=None, help="New nickname")
@click.option("--password", default=None, help="New password")
def update_me(token: Optional[str], nickname: Optional[str], password: Optional[str]):
    """Change the nickname and/or password of the current account."""
    changes = {}
    if nickname is not None:
        changes["nickname"] = nickname
    if password is not None:
        changes["password"] = password
    if not changes:
        click.secho(
            "Error: nothing to update (use --nickname or --password)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    headers = _auth_headers(token)
    _run(_update_me_impl(headers, changes))


async def _update_me_impl(headers: dict, changes: dict):
    async with _client() as c:
        user = _check(await c.put("/api/v1/users/me", json=changes, headers=headers))
    click.echo(_pretty_json(user))


@main.command("delete-me")
@click.option("--token", help="Access token (or set USERSERVICE_TOKEN)")
@click.confirmation_option(prompt="Delete this account? It cannot be restored.")
def delete_me(token: Optional[str]):
    """Soft-delete the current account."""
    headers = _auth_headers(token)
    _run(_delete_me_impl(headers))


async def _delete_me_impl(headers: dict):
    async with _client() as c:
        _check(await c.delete("/api/v1/users/me", headers=headers))
    click.secho("Account deleted.", fg="green")


@main.command("check-username")
@click.argument("username")
def check_username(username: str):
    """Is USERNAME free to register?"""
    _run(_availability_impl("check-username", "username", username))


@main.command("check-nickname")
@click.argument("nickname")
def check_nickname(nickname: str):
    """Is NICKNAME free to use?"""
    _run(_availability_impl("check-nickname", "nickname", nickname))


async def _availability_impl(route: str, param: str, value: str):
    async with _client() as c:
        result = _check(await c.get(f"/api/v1/auth/{route}", params={param: value}))
    if result["available"]:
        click.secho(f"{value}: available", fg="green")
    else:
        click.secho(f"{value}: taken", fg="red")


@main.command()
@click.option("--host", default=None, help="Bind address (default from settings)")
@click.option("--port", default=None, type=int, help="Port (default from settings)")
def serve(host: Optional[str], port: Optional[int]):
    """Run the API server with uvicorn."""
    import uvicorn

    from userservice.config import settings

    uvicorn.run(
        "userservice.main:app",
        host=host or settings.host,
        port=port or settings.port,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
