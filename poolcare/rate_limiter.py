"""
Per-IP request limits for login and geocoding.

Counting happens in process memory. When Redis is enabled, each window is
seeded from and periodically written back to Redis so several workers end
up sharing roughly the same limit.
"""

import logging
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request

from .config import REDIS_DB, REDIS_ENABLED, REDIS_HOST, REDIS_PASSWORD, REDIS_PORT, REDIS_SSL, REDIS_URL

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None
_redis_failed_at: Optional[float] = None

# {key: {"count": int, "reset_time": int, "last_redis_sync": int}}
memory_cache: dict[str, dict] = {}
cache_lock = Lock()

REDIS_SYNC_INTERVAL = 10
REDIS_RETRY_SECONDS = 30
CLEANUP_INTERVAL = 60
_last_cleanup = 0

CONNECTION_OPTIONS = {
    "decode_responses": True,
    "socket_connect_timeout": 5,
    "socket_timeout": 5,
    "retry_on_timeout": True,
    "health_check_interval": 30,
    "max_connections": 20,
}


def _mask(url: str) -> str:
    if "@" not in url:
        return "****"
    scheme = url.split(":", 1)[0]
    return f"{scheme}://****@{url.rsplit('@', 1)[1]}"


def _connect() -> redis.Redis:
    if REDIS_URL:
        logger.info(f"📡 Connecting to Redis at {_mask(REDIS_URL)}")
        return redis.from_url(REDIS_URL, **CONNECTION_OPTIONS)

    logger.info(f"📡 Connecting to Redis at {REDIS_HOST}:{REDIS_PORT} (db={REDIS_DB}, ssl={REDIS_SSL})")
    return redis.Redis(
        host=REDIS_HOST,
        port=REDIS_PORT,
        password=REDIS_PASSWORD,
        db=REDIS_DB,
        ssl=REDIS_SSL,
        **CONNECTION_OPTIONS,
    )


def get_redis_client() -> Optional[redis.Redis]:
    """
    Shared Redis client, created on first use.

    Returns None when REDIS_ENABLED is false. Raises when Redis is enabled
    but does not answer a ping. After a failed ping no new connection is
    attempted for REDIS_RETRY_SECONDS; calls in between raise straight away.
    """
    global redis_client, _redis_failed_at

    if not REDIS_ENABLED:
        return None
    if redis_client is not None:
        return redis_client

    now = time.monotonic()
    if _redis_failed_at is not None and now - _redis_failed_at < REDIS_RETRY_SECONDS:
        raise redis.ConnectionError("Redis unavailable, waiting before reconnecting")

    client = _connect()
    try:
        client.ping()
    except redis.RedisError as e:
        _redis_failed_at = now
        logger.error(f"❌ Failed to connect to Redis, next attempt in {REDIS_RETRY_SECONDS}s: {e}")
        raise

    redis_client = client
    _redis_failed_at = None
    logger.info("✅ Redis connected")
    return redis_client


def _drop_expired(now: int) -> None:
    global _last_cleanup
    if now - _last_cleanup < CLEANUP_INTERVAL:
        return

    expired = [key for key, window in memory_cache.items() if now >= window["reset_time"]]
    for key in expired:
        del memory_cache[key]
    if expired:
        logger.debug(f"🧹 Dropped {len(expired)} expired rate limit windows")
    _last_cleanup = now


def _new_window(key: str, now: int, window_seconds: int, client: Optional[redis.Redis]) -> dict:
    window = {"count": 0, "reset_time": now + window_seconds, "last_redis_sync": now}
    if client is None:
        return window

    # Continue a window another worker already opened
    try:
        stored, ttl = client.get(key), client.ttl(key)
    except redis.RedisError as e:
        logger.warning(f"⚠️ Could not read {key} from Redis, counting locally: {e}")
        return window
    if stored and ttl > 0:
        window["count"] = int(stored)
        window["reset_time"] = now + ttl
    return window


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: Optional[redis.Redis] = None
) -> tuple[bool, int, int]:
    """Count one request against ``key``.

    Returns:
        (allowed, requests counted in the window, seconds until the window resets)
    """
    now = int(time.time())

    with cache_lock:
        _drop_expired(now)

        window = memory_cache.get(key)
        if window is None:
            window = memory_cache[key] = _new_window(key, now, window_seconds, client)
        elif now >= window["reset_time"]:
            window.update(count=0, reset_time=now + window_seconds, last_redis_sync=0)

        allowed = window["count"] < limit
        if allowed:
            window["count"] += 1

        if client is not None and now - window["last_redis_sync"] >= REDIS_SYNC_INTERVAL:
            try:
                client.set(key, window["count"], ex=window_seconds)
                window["last_redis_sync"] = now
            except redis.RedisError as e:
                logger.warning(f"⚠️ Could not sync {key} to Redis: {e}")

        return allowed, window["count"], max(0, window["reset_time"] - now)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit", use_ip: bool = True):
    """
    Build a dependency that allows ``limit`` requests per ``window_seconds``.

    Example usage:
        rate_limit_login = create_rate_limiter(limit=10, window_seconds=60, key_prefix="login")

        @router.post("/login")
        async def login(data: LoginRequest, _: None = Depends(rate_limit_login)):
            ...
    """

    async def rate_limiter(request: Request):
        try:
            client = get_redis_client()
        except redis.RedisError as e:
            logger.warning(f"⚠️ Redis unavailable, rate limiting in memory only: {e}")
            client = None

        key = f"{key_prefix}:{client_ip(request)}" if use_ip else f"{key_prefix}:global"
        allowed, count, ttl = check_rate_limit(key, limit, window_seconds, client)

        if not allowed:
            logger.warning(f"🚫 Rate limit exceeded for {key} ({count}/{limit})")
            raise HTTPException(
                status_code=429,
                detail={
                    "message": f"Too many requests. Maximum {limit} per {window_seconds} seconds.",
                    "retry_after": ttl,
                },
                headers={"Retry-After": str(ttl)},
            )

        request.state.rate_limit_remaining = limit - count

    return rate_limiter
