"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (logging, database engine).
Middleware, CORS, error translation and routers are all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from userservice import __version__
from userservice.api import api_router
from userservice.config import settings
from userservice.errors import (
    AuthenticationError,
    InvalidTokenError,
    ResourceNotFoundError,
    UsernameAlreadyExistsError,
)
from userservice.logging_config import configure_logging
from userservice.middleware import RequestContextMiddleware

logger = structlog.get_logger()

# Each domain error gets its own user-facing outcome
ERROR_STATUS = {
    UsernameAlreadyExistsError: 409,
    ResourceNotFoundError: 404,
    InvalidTokenError: 401,
    AuthenticationError: 401,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    configure_logging()
    logger.info(
        "userservice.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    yield

    logger.info("userservice.shutdown")

    from userservice.db.engine import engine
    await engine.dispose()


def _error_handler(status_code: int):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "error": type(exc).__name__},
            headers=headers,
        )

    return handle


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="User Service",
        description="Account registration, login, token refresh and soft delete",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for exc_class, status_code in ERROR_STATUS.items():
        app.add_exception_handler(exc_class, _error_handler(status_code))

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: userservice.main:app)
app = create_app()
