from __future__ import annotations

import os

from fastapi import APIRouter, Response, status

from foodorder.infrastructure.cache.redis_client import ping_redis
from foodorder.infrastructure.db.session import ping_database

router = APIRouter()


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(response: Response) -> dict[str, object]:
    # Backends that are not configured run in memory and are always ready.
    checks: dict[str, object] = {
        "postgres": ping_database(timeout_seconds=1.0) if os.getenv("DATABASE_URL") else "memory",
        "redis": ping_redis(timeout_seconds=1.0) if os.getenv("REDIS_URL") else "memory",
    }

    if all(value is not False for value in checks.values()):
        return {"status": "ok", "checks": checks}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "unavailable", "checks": checks}
