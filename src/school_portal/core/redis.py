"""
Redis Configuration

Async Redis client used for rate limiting and signed-out token tracking.
Redis is optional outside production; callers must handle `None`.
"""

import logging

from redis.asyncio import Redis, from_url

from school_portal.core.config import settings

logger = logging.getLogger(__name__)

# Redis client instance
redis_client: Redis | None = None

REVOKED_TOKEN_PREFIX = "revoked_token:"


async def init_redis() -> Redis:
    """
    Initialize Redis connection.

    Call this on application startup.
    """
    global redis_client
    redis_client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    # Test connection
    await redis_client.ping()
    return redis_client


async def get_redis() -> Redis | None:
    """
    Get Redis client instance.

    Returns None if Redis is not available.
    """
    return redis_client


def is_redis_available() -> bool:
    """Check if Redis client is initialized and available."""
    return redis_client is not None


async def close_redis() -> None:
    """Close Redis connection."""
    global redis_client
    if redis_client:
        await redis_client.close()
        redis_client = None


async def revoke_token(jti: str, ttl_seconds: int) -> bool:
    """
    Mark a token ID as signed out until it would have expired anyway.

    Returns:
        True if the revocation was stored, False when Redis is unavailable
    """
    if redis_client is None:
        logger.warning("Redis unavailable - sign-out cannot revoke the token server side")
        return False

    await redis_client.set(f"{REVOKED_TOKEN_PREFIX}{jti}", "1", ex=max(1, ttl_seconds))
    return True


async def is_token_revoked(jti: str | None) -> bool:
    """Check whether a token ID was signed out."""
    if not jti or redis_client is None:
        return False

    try:
        return bool(await redis_client.exists(f"{REVOKED_TOKEN_PREFIX}{jti}"))
    except Exception as e:
        logger.warning(f"Could not check token revocation: {e}")
        return False
