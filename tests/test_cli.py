"""CLI tests — Click commands against a mocked HTTP backend.

Learn: _client() is patched to return an httpx.AsyncClient backed by
httpx.MockTransport, so commands run end to end without a server.
"""

import json

import httpx
import pytest
from click.testing import CliRunner

from userservice.cli import main as cli


@pytest.fixture()
def requests_seen():
    return []


@pytest.fixture()
def mock_api(monkeypatch, requests_seen):
    """Install a fake backend; tests set `routes[(method, path)] = (status, body)`."""
    routes: dict[tuple[str, str], tuple[int, dict]] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        status, body = routes.get(
            (request.method, request.url.path), (404, {"detail": "no route"})
        )
        return httpx.Response(status, json=body)

    monkeypatch.setattr(
        cli,
        "_client",
        lambda: httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://test"
        ),
    )
    return routes


def test_signup(mock_api, requests_seen):
    mock_api[("POST", "/api/v1/auth/signup")] = (
        201,
        {"id": 1, "username": "alice", "nickname": "Ali"},
    )

    result = CliRunner().invoke(cli.main, [
        "signup", "alice", "--nickname", "Ali", "--birth-date", "19900101",
        "--password", "pw1",
    ])

    assert result.exit_code == 0, result.output
    assert "Account created: alice (id=1)" in result.output
    sent = json.loads(requests_seen[0].content)
    assert sent["username"] == "alice"
    assert sent["password"] == "pw1"
    assert sent["birth_time"] is None


def test_signup_conflict_exits_nonzero(mock_api):
    mock_api[("POST", "/api/v1/auth/signup")] = (
        409,
        {"detail": "Username is already in use"},
    )

    result = CliRunner().invoke(cli.main, [
        "signup", "alice", "--nickname", "Ali", "--birth-date", "19900101",
        "--password", "pw1",
    ])

    assert result.exit_code == 1
    assert "Username is already in use" in result.output


def test_login_prints_tokens(mock_api):
    mock_api[("POST", "/api/v1/auth/login")] = (
        200,
        {"access_token": "a", "refresh_token": "r", "token_type": "bearer"},
    )

    result = CliRunner().invoke(cli.main, ["login", "alice", "--password", "pw1"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["refresh_token"] == "r"


def test_me_sends_bearer_token(mock_api, requests_seen):
    mock_api[("GET", "/api/v1/users/me")] = (200, {"id": 1, "username": "alice"})

    result = CliRunner().invoke(cli.main, ["me", "--token", "tok"])

    assert result.exit_code == 0, result.output
    assert requests_seen[0].headers["Authorization"] == "Bearer tok"


def test_me_without_token(mock_api, monkeypatch):
    monkeypatch.delenv("USERSERVICE_TOKEN", raising=False)

    result = CliRunner().invoke(cli.main, ["me"])

    assert result.exit_code == 1
    assert "--token required" in result.output


def test_check_username(mock_api, requests_seen):
    mock_api[("GET", "/api/v1/auth/check-username")] = (
        200,
        {"value": "alice", "available": False},
    )

    result = CliRunner().invoke(cli.main, ["check-username", "alice"])

    assert result.exit_code == 0
    assert "alice: taken" in result.output
    assert requests_seen[0].url.params["username"] == "alice"


def test_delete_me(mock_api):
    mock_api[("DELETE", "/api/v1/users/me")] = (200, {"deleted": True})

    result = CliRunner().invoke(cli.main, ["delete-me", "--token", "tok", "--yes"])

    assert result.exit_code == 0, result.output
    assert "Account deleted." in result.output


def test_logout(mock_api, requests_seen):
    mock_api[("POST", "/api/v1/auth/logout")] = (200, {"logged_out": True})

    result = CliRunner().invoke(cli.main, ["logout", "--token", "tok"])

    assert result.exit_code == 0, result.output
    assert "Logged out." in result.output
    assert requests_seen[0].headers["Authorization"] == "Bearer tok"


def test_update_me_sends_only_given_fields(mock_api, requests_seen):
    mock_api[("PUT", "/api/v1/users/me")] = (
        200,
        {"id": 1, "username": "alice", "nickname": "Alicia"},
    )

    result = CliRunner().invoke(
        cli.main, ["update-me", "--token", "tok", "--nickname", "Alicia"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["nickname"] == "Alicia"
    assert json.loads(requests_seen[0].content) == {"nickname": "Alicia"}


def test_update_me_nickname_taken(mock_api):
    mock_api[("PUT", "/api/v1/users/me")] = (
        409,
        {"detail": "Nickname is already in use"},
    )

    result = CliRunner().invoke(
        cli.main, ["update-me", "--token", "tok", "--nickname", "Bobby"]
    )

    assert result.exit_code == 1
    assert "Nickname is already in use" in result.output


def test_update_me_without_changes(mock_api, requests_seen):
    result = CliRunner().invoke(cli.main, ["update-me", "--token", "tok"])

    assert result.exit_code == 1
    assert "nothing to update" in result.output
    assert requests_seen == []
