"""Transport base — pluggable interface for pub/sub backends.

Learn: A Transport hands out pooled connections through ``acquire()``,
an async context manager. Leaving the ``async with`` block returns the
connection to the pool, whether the publish succeeded or raised:

    async with transport.acquire() as conn:
        await conn.publish("socket.io#/#", payload)

Implementations wrap their backend's errors in TransportError.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class Connection(ABC):
    """A borrowed, liveness-checked connection."""

    @abstractmethod
    async def publish(self, channel: str, payload: bytes) -> int:
        """Fire-and-forget PUBLISH. Returns how many subscribers got it."""


class Transport(ABC):
    """Abstract base for pub/sub transports."""

    @abstractmethod
    def acquire(self) -> AbstractAsyncContextManager[Connection]:
        """Borrow a connection for the duration of an ``async with`` block."""

    async def publish(self, channel: str, payload: bytes) -> int:
        """Borrow, publish once, release."""
        async with self.acquire() as conn:
            return await conn.publish(channel, payload)

    async def close(self) -> None:
        """Release pooled resources. Default: nothing to release."""
