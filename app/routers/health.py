"""
Health Check Router - Lawyer Performance Scoring
app/routers/health.py

Reports the storage backend and Redis reachability with real connection checks.
Redis is optional: an unreachable cache degrades the status but never fails it.
"""
from datetime import datetime, timezone
from typing import Dict

import redis
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from snowflake.connector.errors import Error as SnowflakeError

from app.config import get_settings
from app.core.exceptions import RepositoryException
from app.services.cache import get_cache
from app.services.snowflake import get_snowflake_connection

router = APIRouter(tags=["Health"])


#  Schemas


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    storage_backend: str
    dependencies: Dict[str, str]


#  Dependency Health Checks


def _short(error: Exception) -> str:
    msg = str(error)
    return msg[:100] + "..." if len(msg) > 100 else msg


async def check_storage() -> str:
    settings = get_settings()
    if settings.STORAGE_BACKEND == "memory":
        return "healthy (in-memory)"
    try:
        conn = get_snowflake_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT CURRENT_USER()")
            user = cursor.fetchone()[0]
            cursor.close()
        finally:
            conn.close()
        return f"healthy (User: {user})"
    except (SnowflakeError, RepositoryException) as e:
        return f"unhealthy: {_short(e)}"


async def check_redis() -> str:
    cache = get_cache()
    if not cache:
        return "unavailable: caching disabled"
    try:
        cache.client.ping()
        return "healthy"
    except redis.RedisError as e:
        return f"unavailable: {_short(e)}"


#  Routes


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "Storage reachable (cache may be degraded)"},
        503: {"description": "Storage unreachable"},
    },
    summary="Health check",
)
async def health_check():
    settings = get_settings()
    dependencies = {
        "storage": await check_storage(),
        "redis": await check_redis(),
    }
    storage_healthy = dependencies["storage"].startswith("healthy")
    cache_healthy = dependencies["redis"].startswith("healthy")

    if not storage_healthy:
        overall = "unhealthy"
    elif not cache_healthy:
        overall = "degraded"
    else:
        overall = "healthy"

    response = HealthResponse(
        status=overall,
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        storage_backend=settings.STORAGE_BACKEND,
        dependencies=dependencies,
    )

    if storage_healthy:
        return response
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )
