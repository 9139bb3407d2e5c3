import logging

from fastapi import APIRouter
from sqlalchemy import text

from shopease.database import engine
from shopease.utils.cache import redis_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    summary="Health check",
    description="Liveness probe; does not touch any dependency."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check that the database and the Redis broker are reachable."
)
def readiness_check():
    """
    Readiness check for all dependencies.

    Returns status of:
    - Database connection
    - Redis connection (Celery broker and alert deduplication)
    """
    checks = {
        "database": False,
        "redis": False
    }

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        logger.warning(f"Readiness: database unreachable: {e}")
        checks["database_error"] = str(e)

    try:
        redis_client.ping()
        checks["redis"] = True
    except Exception as e:
        logger.warning(f"Readiness: redis unreachable: {e}")
        checks["redis_error"] = str(e)

    all_healthy = checks["database"] and checks["redis"]

    return {
        "status": "ready" if all_healthy else "not_ready",
        "checks": checks
    }
