"""Lazily created Redis client backing the auth rate limiter.

Balances never touch Redis; PostgreSQL is the only store of money.
"""

import redis.asyncio as aioredis

from config.settings import settings

_client: aioredis.Redis | None = None


def _build_client() -> aioredis.Redis:
    return aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
    )


async def get_redis() -> aioredis.Redis:
    global _client  # noqa: PLW0603
    if _client is None:
        _client = _build_client()
    return _client


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is None:
        return
    client, _client = _client, None
    await client.aclose()
