import json
import logging
import redis
from typing import Any

from shopease.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Create Redis client
redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)


class CacheService:
    """
    Small Redis key/value helper with TTLs.

    Used for short-lived bookkeeping such as low-stock alert deduplication.
    Product and sale rows are never cached here; every read goes to the
    database. Redis failures degrade to "nothing cached" and never raise.
    """

    def __init__(self, client: redis.Redis = None, ttl: int = None):
        self.client = client or redis_client
        self.ttl = ttl or settings.LOW_STOCK_ALERT_COOLDOWN

    def _make_key(self, prefix: str, key: str) -> str:
        """Create a namespaced cache key."""
        return f"{prefix}:{key}"

    def add(self, prefix: str, key: str, value: Any, ttl: int = None) -> bool:
        """
        Set a value only if the key does not exist yet (SET NX EX).

        Returns:
            True if this call stored the value, False if the key already
            existed. Also True when Redis is unreachable, so callers fall
            back to acting rather than staying silent.
        """
        cache_key = self._make_key(prefix, key)
        ttl = ttl or self.ttl
        try:
            serialized = json.dumps(value, default=str)
            return bool(self.client.set(cache_key, serialized, ex=ttl, nx=True))
        except redis.RedisError as e:
            logger.warning(f"Redis unavailable for key {cache_key}: {e}")
            return True

    def delete(self, prefix: str, key: str) -> bool:
        """
        Delete a value from cache.

        Returns:
            True if deleted, False otherwise
        """
        cache_key = self._make_key(prefix, key)
        try:
            self.client.delete(cache_key)
            return True
        except redis.RedisError:
            return False


# Singleton cache service instance
cache_service = CacheService()
