"""structlog setup.

Learn: Every module logs through structlog.get_logger() with dotted event
names ("user.signed_up", "user.logout_failed"). Request-scoped values such
as request_id are bound via structlog.contextvars in the middleware and
merged into every entry here.
"""

import logging
import sys

import structlog

from userservice.config import settings


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure structlog and the stdlib root logger."""
    level_name = (level or settings.log_level).upper()
    json_logs = settings.log_json if json_logs is None else json_logs

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.INFO)
        ),
        cache_logger_on_first_use=True,
    )
