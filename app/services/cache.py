"""
Lawyer Cache - Lawyer Performance Scoring
app/services/cache.py

Process-wide Redis handle and the lawyer cache keys. When Redis cannot be
reached the handle is None and callers read straight from the repository.
"""
import logging
from typing import Optional

import redis

from app.services.redis_cache import RedisCache

logger = logging.getLogger(__name__)

CACHE_KEY_LAWYERS_ALL = "lawyers:all"
CACHE_PATTERN_LAWYERS = "lawyers:*"

_cache: Optional[RedisCache] = None


def get_cache() -> Optional[RedisCache]:
    """Connect on first use; None while Redis is unreachable."""
    global _cache
    if _cache is not None:
        return _cache
    try:
        candidate = RedisCache()
        candidate.client.ping()
    except (redis.RedisError, ConnectionError) as e:
        logger.warning(f"Redis unavailable, lawyer list will not be cached: {e}")
        return None
    _cache = candidate
    return _cache


def reset_cache() -> None:
    """Forget the handle so the next get_cache() reconnects."""
    global _cache
    _cache = None
