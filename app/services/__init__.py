"""
Services module for Lawyer Performance Scoring.

Ingestion and remote processing live in app.services.ingestion_service and
app.services.remote_processor; import them from there.
"""

from app.services.cache import get_cache, reset_cache
from app.services.redis_cache import RedisCache
from app.services.snowflake import get_snowflake_connection

__all__ = [
    "get_cache",
    "reset_cache",
    "RedisCache",
    "get_snowflake_connection",
]
