"""Redis transport — PUBLISH over a shared redis.asyncio connection pool.

Learn: Redis pub/sub is fire-and-forget. If no subscriber is listening the
message is lost, and PUBLISH never waits for a subscriber to process it.
It only tells us how many subscribers received it.

One ConnectionPool is shared by every emitter built from the same
transport. Each publish borrows a dedicated client from it, PINGs it
before use (so a dead socket fails here, not halfway through a write),
publishes, and hands the connection back on every exit path.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis
import structlog
from redis.asyncio.connection import UnixDomainSocketConnection
from redis.exceptions import RedisError

from socketio_emitter.config import EmitterSettings
from socketio_emitter.errors import TransportError
from socketio_emitter.transport.base import Connection, Transport

logger = structlog.get_logger()


def build_pool(settings: EmitterSettings) -> aioredis.ConnectionPool:
    """Create the connection pool for the configured target."""
    common = {
        "password": settings.password,
        "db": settings.db,
        "max_connections": settings.max_connections,
    }
    if settings.protocol == "unix":
        return aioredis.ConnectionPool(
            connection_class=UnixDomainSocketConnection,
            path=settings.address,
            **common,
        )
    host, port = settings.resolve_host_port()
    return aioredis.ConnectionPool(host=host, port=port, **common)


class RedisConnection(Connection):
    """A pooled Redis client borrowed for one publish."""

    def __init__(self, client: aioredis.Redis):
        self._client = client

    async def publish(self, channel: str, payload: bytes) -> int:
        try:
            return await self._client.publish(channel, payload)
        except (RedisError, OSError) as e:
            raise TransportError(f"PUBLISH to {channel!r} failed: {e}") from e


class RedisTransport(Transport):
    def __init__(self, redis: aioredis.Redis):
        self._redis = redis

    @classmethod
    def from_settings(cls, settings: EmitterSettings) -> "RedisTransport":
        """Build a transport (and its pool) from emitter settings.

        No connection is opened here; the first publish dials Redis.
        """
        pool = build_pool(settings)
        logger.info(
            "transport.redis_pool_created",
            address=settings.resolve_address(),
            protocol=settings.protocol,
            max_connections=settings.max_connections,
        )
        return cls(aioredis.Redis.from_pool(pool))

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[RedisConnection]:
        """Borrow a connection, PING it, and return it to the pool on exit."""
        try:
            async with self._redis.client() as client:
                await client.ping()
                yield RedisConnection(client)
        except (RedisError, OSError) as e:
            raise TransportError(f"Redis unavailable: {e}") from e

    async def close(self) -> None:
        await self._redis.aclose()
        logger.info("transport.closed")
