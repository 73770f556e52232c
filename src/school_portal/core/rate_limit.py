"""
Rate Limiting Module

Sliding-window rate limiting for public forms and admin actions.
Uses the shared Redis client when available and falls back to an
in-process store otherwise (not shared between workers).

Limited endpoints:
- Admin sign-in (brute force)
- Public PPDB registration submission (spam, storage abuse)
- Admin registration status changes and deletes
"""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import Any

from fastapi import HTTPException, Request, status

from school_portal.core import redis as redis_module

logger = logging.getLogger(__name__)

# key -> list of request timestamps inside the window
_memory_store: dict[str, list[float]] = {}

# (limit, window_seconds)
LOGIN_LIMIT = (5, 60)
REGISTRATION_SUBMIT_LIMIT = (5, 600)
ADMIN_ACTION_LIMIT = (30, 60)


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Terlalu banyak permintaan. Maksimal {limit} permintaan "
                f"per {window_seconds} detik.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(client, key: str, limit: int, window_seconds: int) -> bool:
    """
    Check rate limit using a Redis sorted set per key.

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, window_start)
    pipe.zcard(key)
    pipe.zadd(key, {f"{now}": now})
    pipe.expire(key, window_seconds)
    results = await pipe.execute()

    return results[1] < limit


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """In-process fallback with the same sliding-window semantics."""
    now = time.time()
    window_start = now - window_seconds

    hits = [ts for ts in _memory_store.get(key, []) if ts > window_start]
    if len(hits) >= limit:
        _memory_store[key] = hits
        return False

    hits.append(now)
    _memory_store[key] = hits
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check if a request is within rate limits.

    Args:
        key: Unique key for this rate limit (e.g., "login:10.0.0.1")
        limit: Maximum requests allowed in the window
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    client = redis_module.redis_client
    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


def client_ip(request: Request) -> str:
    """Best-effort client address, honouring a proxy X-Forwarded-For header."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def rate_limit(
    limit: int = 10,
    window_seconds: int = 60,
    key_func: Callable[[Request], str] | None = None,
):
    """
    Rate limiting decorator for FastAPI endpoints.

    The decorated endpoint must accept a `request: Request` parameter.

    Usage:
        @router.post("/login")
        @rate_limit(*LOGIN_LIMIT)
        async def login(request: Request, ...):
            ...

    Raises:
        RateLimitExceeded: When rate limit is exceeded (HTTP 429)
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            request: Request | None = kwargs.get("request")
            if request is None:
                request = next((a for a in args if isinstance(a, Request)), None)

            if request is None:
                logger.warning(
                    f"Rate limit decorator on {func.__name__} couldn't find Request object"
                )
                return await func(*args, **kwargs)

            if key_func:
                key = key_func(request)
            else:
                key = f"rate_limit:{client_ip(request)}:{request.url.path}"

            if not await check_rate_limit(key, limit, window_seconds):
                logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
                raise RateLimitExceeded(limit, window_seconds)

            return await func(*args, **kwargs)

        return wrapper

    return decorator


async def enforce_admin_rate_limit(admin_id: Any, action: str) -> None:
    """
    Apply the admin action limit for one admin and action name.

    Raises:
        RateLimitExceeded: If the admin exceeded the limit
    """
    limit, window_seconds = ADMIN_ACTION_LIMIT
    key = f"admin:{action}:{admin_id}"
    if not await check_rate_limit(key, limit, window_seconds):
        logger.warning(f"Rate limit exceeded for admin {admin_id} on '{action}'")
        raise RateLimitExceeded(limit, window_seconds)


__all__ = [
    "rate_limit",
    "check_rate_limit",
    "enforce_admin_rate_limit",
    "client_ip",
    "RateLimitExceeded",
    "LOGIN_LIMIT",
    "REGISTRATION_SUBMIT_LIMIT",
    "ADMIN_ACTION_LIMIT",
]
