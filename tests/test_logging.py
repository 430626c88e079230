"""structlog configuration."""

import json

import structlog

from userservice.logging_config import configure_logging


def test_configure_logging_json(capsys):
    configure_logging(level="DEBUG", json_logs=True)
    try:
        structlog.contextvars.bind_contextvars(request_id="req-1")
        structlog.get_logger("test").info("user.logged_in", user_id=3)
        line = capsys.readouterr().out.strip().splitlines()[-1]
        entry = json.loads(line)
        assert entry["event"] == "user.logged_in"
        assert entry["user_id"] == 3
        assert entry["request_id"] == "req-1"
        assert entry["level"] == "info"
    finally:
        structlog.contextvars.clear_contextvars()
        structlog.reset_defaults()
