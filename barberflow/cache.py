"""
Redis caching utilities
Used for webhook idempotency; every operation degrades to a no-op without Redis
"""
import json
import logging
from typing import Any, Optional

from .config import REDIS_ENABLED
from .rate_limiter import get_redis_client

logger = logging.getLogger(__name__)

WEBHOOK_IDEMPOTENCY_TTL = 86400  # 24 hours


class Cache:
    """Redis cache wrapper with automatic serialization"""

    def __init__(self):
        self.redis_client = None

    def _get_client(self):
        """Lazy load Redis client"""
        if self.redis_client is None:
            if not REDIS_ENABLED:
                return None
            try:
                self.redis_client = get_redis_client()
            except Exception as e:
                logger.warning(f"⚠️ Redis cache unavailable: {e}")
                return None
        return self.redis_client

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        client = self._get_client()
        if not client:
            return None

        try:
            value = client.get(key)
            if value:
                logger.debug(f"✅ Cache HIT: {key}")
                return json.loads(value)
            logger.debug(f"❌ Cache MISS: {key}")
            return None
        except Exception as e:
            logger.error(f"❌ Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """Set value in cache with TTL (default 1 hour)"""
        client = self._get_client()
        if not client:
            return False

        try:
            client.setex(key, ttl, json.dumps(value))
            logger.debug(f"✅ Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"❌ Cache set error for {key}: {e}")
            return False


# Global cache instance
cache = Cache()


def webhook_already_processed(event_id: str) -> bool:
    return bool(cache.get(f"webhook_processed:{event_id}"))


def mark_webhook_processed(event_id: str) -> bool:
    return cache.set(f"webhook_processed:{event_id}", True, ttl=WEBHOOK_IDEMPOTENCY_TTL)
