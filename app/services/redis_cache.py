"""
Redis Cache - Lawyer Performance Scoring
app/services/redis_cache.py

Typed wrapper over redis-py. Values are Pydantic models stored as JSON;
an entry that no longer validates against its model is dropped on read.
"""

import logging
from typing import Optional, Type, TypeVar

import redis
from pydantic import BaseModel, ValidationError

from app.config import settings

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class RedisCache:
    def __init__(self, url: Optional[str] = None):
        self.client = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )

    def get(self, key: str, model: Type[ModelT]) -> Optional[ModelT]:
        payload = self.client.get(key)
        if not payload:
            return None
        try:
            return model.model_validate_json(payload)
        except ValidationError:
            logger.warning(f"Dropping stale cache entry {key}")
            self.client.delete(key)
            return None

    def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        self.client.setex(key, ttl_seconds, value.model_dump_json())

    def delete(self, key: str) -> int:
        return self.client.delete(key)

    def delete_pattern(self, pattern: str) -> int:
        """Remove every key matching `pattern`; returns how many went."""
        return sum(self.client.delete(key) for key in self.client.scan_iter(match=pattern))
