"""
Fixed-window rate limiting for the auth and webhook endpoints

Windows are counted in process memory and pushed to Redis every few seconds,
so a restarted worker picks up where the fleet left off without a Redis round
trip on every request.
"""

import logging
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request, status

from .config import (
    RATE_LIMIT_ENABLED,
    REDIS_DB,
    REDIS_ENABLED,
    REDIS_HOST,
    REDIS_PASSWORD,
    REDIS_PORT,
    REDIS_SSL,
    REDIS_URL,
)

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None

# key -> {"count": int, "reset_time": epoch seconds, "last_redis_sync": epoch seconds}
memory_cache: dict[str, dict] = {}
cache_lock = Lock()

REDIS_SYNC_INTERVAL = 10
CLEANUP_INTERVAL = 60
last_cleanup_time = 0

REDIS_CLIENT_OPTIONS = {
    "decode_responses": True,
    "socket_connect_timeout": 5,
    "socket_timeout": 10,
    "retry_on_timeout": True,
    "health_check_interval": 30,
    "max_connections": 20,
}


def _mask_redis_url(url: str) -> str:
    if "@" not in url:
        return "****"
    scheme = url.split(":", 1)[0]
    return f"{scheme}:****@{url.rsplit('@', 1)[1]}"


def get_redis_client() -> redis.Redis:
    """Shared Redis client, connected and pinged on first use"""
    global redis_client

    if redis_client is not None:
        return redis_client

    try:
        if REDIS_URL:
            logger.info(f"📡 Connecting to Redis at {_mask_redis_url(REDIS_URL)}")
            client = redis.from_url(REDIS_URL, **REDIS_CLIENT_OPTIONS)
        else:
            logger.info(f"📡 Connecting to Redis at {REDIS_HOST}:{REDIS_PORT} (ssl={REDIS_SSL})")
            client = redis.Redis(
                host=REDIS_HOST,
                port=REDIS_PORT,
                password=REDIS_PASSWORD,
                db=REDIS_DB,
                ssl=REDIS_SSL,
                **REDIS_CLIENT_OPTIONS,
            )
        client.ping()
    except Exception as e:
        logger.error(f"❌ Failed to connect to Redis: {e}")
        raise

    redis_client = client
    return redis_client


def _drop_expired_windows(now: int) -> None:
    global last_cleanup_time

    if now - last_cleanup_time < CLEANUP_INTERVAL:
        return
    last_cleanup_time = now

    with cache_lock:
        expired = [key for key, entry in memory_cache.items() if now >= entry["reset_time"]]
        for key in expired:
            del memory_cache[key]

    if expired:
        logger.debug(f"🧹 Dropped {len(expired)} expired rate limit windows")


def _load_window(key: str, window_seconds: int, client: Optional[redis.Redis], now: int) -> dict:
    """Seed a window from Redis when another worker already started one"""
    if client is None:
        return {"count": 0, "reset_time": now + window_seconds, "last_redis_sync": now}

    try:
        stored_count = client.get(key)
        stored_ttl = client.ttl(key)
    except Exception as e:
        logger.warning(f"⚠️ Redis read failed for {key}, counting in memory only: {e}")
        stored_count, stored_ttl = None, -2

    if stored_count and stored_ttl > 0:
        return {"count": int(stored_count), "reset_time": now + stored_ttl, "last_redis_sync": now}
    return {"count": 0, "reset_time": now + window_seconds, "last_redis_sync": now}


def check_rate_limit(
    key: str, limit: int, window_seconds: int, redis_client: Optional[redis.Redis]
) -> tuple[bool, int, int]:
    """
    Count one request against `key`. Without a Redis client the window lives in memory only.

    Returns:
        (is_allowed, requests counted in the window, seconds until the window resets)
    """
    try:
        now = int(time.time())
        _drop_expired_windows(now)

        with cache_lock:
            window = memory_cache.get(key)
            if window is None:
                window = memory_cache[key] = _load_window(key, window_seconds, redis_client, now)

            if now >= window["reset_time"]:
                window.update(count=0, reset_time=now + window_seconds, last_redis_sync=0)

            is_allowed = window["count"] < limit
            if is_allowed:
                window["count"] += 1

            if redis_client is not None and now - window["last_redis_sync"] >= REDIS_SYNC_INTERVAL:
                try:
                    redis_client.set(key, window["count"], ex=window_seconds)
                    window["last_redis_sync"] = now
                except Exception as e:
                    logger.warning(f"⚠️ Failed to sync {key} to Redis: {e}")

            return is_allowed, window["count"], max(0, window["reset_time"] - now)

    except Exception as e:
        logger.error(f"❌ Rate limit check failed for {key}, denying (fail-closed): {e}")
        return False, limit, 0


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def rate_limit_dependency(
    request: Request,
    limit: int,
    window_seconds: int,
    key_prefix: str = "rate_limit",
    use_ip: bool = True,
    fail_open: bool = False,
):
    """
    Raise 429 once the caller (or everyone, when use_ip is False) exceeds the window.

    With REDIS_ENABLED off windows are counted in this process only. When Redis is
    enabled but unreachable the request gets a 503, unless `fail_open` is set, in
    which case counting falls back to this process.
    """
    if not RATE_LIMIT_ENABLED:
        return

    key = f"{key_prefix}:{_client_ip(request) if use_ip else 'global'}"

    client = None
    if REDIS_ENABLED:
        try:
            client = get_redis_client()
        except Exception as e:
            if not fail_open:
                logger.warning(f"🔒 Rate limiting unavailable for {key}, denying request: {e}")
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail="Rate limiting service temporarily unavailable",
                ) from e
            logger.warning(f"⚠️ Redis unavailable for {key}, counting in memory only: {e}")

    is_allowed, current_count, ttl = check_rate_limit(key, limit, window_seconds, client)

    if not is_allowed:
        logger.warning(f"🚫 Rate limit exceeded for {key} ({current_count}/{limit})")
        raise HTTPException(
            status_code=429,
            detail={
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after": ttl,
            },
            headers={"Retry-After": str(ttl)},
        )

    request.state.rate_limit_remaining = limit - current_count


def create_rate_limiter(
    limit: int,
    window_seconds: int,
    key_prefix: str = "rate_limit",
    use_ip: bool = True,
    fail_open: bool = False,
):
    """
    Build a dependency enforcing `limit` requests per `window_seconds`

        rate_limit_login = create_rate_limiter(limit=10, window_seconds=900, key_prefix="login")

        @router.post("/login")
        async def login(data: LoginRequest, _: None = Depends(rate_limit_login)):
            ...
    """

    async def rate_limiter(request: Request):
        return await rate_limit_dependency(
            request, limit, window_seconds, key_prefix, use_ip, fail_open
        )

    return rate_limiter
