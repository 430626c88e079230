"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running
and the database is reachable.
"""

from fastapi import APIRouter
from sqlalchemy import text

from userservice import __version__
from userservice.db.engine import engine

router = APIRouter()


@router.get("/health")
async def health_check():
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"status": status, **checks}
