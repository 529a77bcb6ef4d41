"""
Redis cache for geocoding answers.

Postal codes and typed addresses resolve to the same places for a long time,
so repeated lookups are served from Redis instead of the public Nominatim
instance. With Redis disabled every lookup goes to the provider.
"""

import json
import logging
from typing import Any, Optional

import redis

from .config import GEOCODING_CACHE_SECONDS
from .rate_limiter import get_redis_client

logger = logging.getLogger(__name__)


class GeocodingCache:
    """JSON values under ``geo:<kind>:<query>`` keys"""

    def __init__(self, ttl: int = GEOCODING_CACHE_SECONDS):
        self.ttl = ttl
        self._client: Optional[redis.Redis] = None

    @staticmethod
    def key(kind: str, query: str) -> str:
        return f"geo:{kind}:{query.strip().lower()}"

    def _redis(self) -> Optional[redis.Redis]:
        if self._client is None:
            try:
                self._client = get_redis_client()
            except redis.RedisError as e:
                logger.warning(f"⚠️ Geocoding cache unavailable: {e}")
        return self._client

    def get(self, kind: str, query: str) -> Optional[Any]:
        client = self._redis()
        if client is None:
            return None

        key = self.key(kind, query)
        try:
            raw = client.get(key)
        except redis.RedisError as e:
            logger.error(f"❌ Cache read failed for {key}: {e}")
            return None

        if raw is None:
            return None
        logger.debug(f"✅ Cache hit: {key}")
        return json.loads(raw)

    def set(self, kind: str, query: str, value: Any) -> None:
        client = self._redis()
        if client is None:
            return

        key = self.key(kind, query)
        try:
            client.setex(key, self.ttl, json.dumps(value))
        except redis.RedisError as e:
            logger.error(f"❌ Cache write failed for {key}: {e}")


geocoding_cache = GeocodingCache()
