"""Emitter — chainable targeting + emission onto the Socket.IO bus.

Learn: An Emitter accumulates targeting across chained calls, then emits:

    await emitter.to("room1").broadcast().emit("chat", "hello")

State after each successful emit:
- flags (join/volatile/broadcast) are one-shot → cleared
- the namespace chosen with of() is one-shot → cleared
- rooms persist → the next emit goes to the same rooms

emit() snapshots and clears the one-shot state before its first await,
so coroutines sharing an emitter on one event loop never see each
other's flags. Sharing one emitter across threads still needs a lock.
"""

from types import MappingProxyType
from typing import Any, Optional

import structlog

from socketio_emitter.channels import Targeting
from socketio_emitter.config import EmitterSettings, load_settings
from socketio_emitter.errors import TransportError
from socketio_emitter.protocol.binary import has_binary
from socketio_emitter.protocol.envelope import (
    NAMESPACE_FLAG,
    build_envelope,
    encode_envelope,
)
from socketio_emitter.protocol.packet import (
    BINARY_EVENT,
    DEFAULT_KEY,
    EVENT,
    FLAG_BROADCAST,
    FLAG_JOIN,
    FLAG_VOLATILE,
    PacketType,
)
from socketio_emitter.transport.base import Transport
from socketio_emitter.transport.redis import RedisTransport

logger = structlog.get_logger()


class Emitter:
    def __init__(
        self,
        transport: Transport,
        *,
        key: str = DEFAULT_KEY,
        raise_on_publish_error: bool = True,
    ):
        self.transport = transport
        self.key = key
        self.raise_on_publish_error = raise_on_publish_error

        self.rooms: list[str] = []
        self.flags: dict[str, Any] = {}
        self.pending_namespace: Optional[str] = None

        # Subscribers reached by the last publish; None if it failed
        self.last_receivers: Optional[int] = None

    @classmethod
    def from_settings(
        cls, settings: Optional[EmitterSettings] = None, **overrides
    ) -> "Emitter":
        """Build an emitter backed by Redis.

        Usage:
            Emitter.from_settings(host="localhost", port=6379)
            Emitter.from_settings(address="redis.internal:6380", key="myapp")
        """
        if settings is None:
            settings = load_settings(**overrides)
        return cls(
            RedisTransport.from_settings(settings),
            key=settings.key,
            raise_on_publish_error=settings.raise_on_publish_error,
        )

    async def __aenter__(self) -> "Emitter":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    # ─── Targeting ─────────────────────────────────────────

    def in_(self, room: str) -> "Emitter":
        """Limit emission to ``room``. Adding the same room twice is a no-op."""
        if room not in self.rooms:
            self.rooms.append(room)
        return self

    def to(self, room: str) -> "Emitter":
        return self.in_(room)

    def of(self, namespace: str) -> "Emitter":
        """Target ``namespace`` for the next emit only. Overwrites any previous one."""
        self.pending_namespace = namespace or None
        return self

    def flag(self, name: str, value: Any = True) -> "Emitter":
        if name == NAMESPACE_FLAG:
            return self.of(value)
        self.flags[name] = value
        return self

    def join(self) -> "Emitter":
        return self.flag(FLAG_JOIN)

    def volatile(self) -> "Emitter":
        return self.flag(FLAG_VOLATILE)

    def broadcast(self) -> "Emitter":
        return self.flag(FLAG_BROADCAST)

    def snapshot(self) -> Targeting:
        """Immutable copy of the current targeting state."""
        return Targeting(
            namespace=self.pending_namespace,
            rooms=tuple(self.rooms),
            flags=MappingProxyType(dict(self.flags)),
        )

    @property
    def channel(self) -> str:
        """Channel the next emit would publish on."""
        return self.snapshot().channel(self.key)

    # ─── Emission ──────────────────────────────────────────

    async def emit(self, event: str, *data: Any) -> "Emitter":
        """Emit ``event``; BINARY_EVENT if any argument carries raw bytes."""
        packet_type = BINARY_EVENT if has_binary(*data) else EVENT
        return await self._emit(packet_type, event, data)

    async def emit_binary(self, event: str, *data: Any) -> "Emitter":
        """Emit ``event`` as BINARY_EVENT without inspecting the arguments."""
        return await self._emit(BINARY_EVENT, event, data)

    async def _emit(self, packet_type: PacketType, event: str, data: tuple) -> "Emitter":
        targeting = self.snapshot()
        envelope = build_envelope(
            packet_type,
            event,
            data,
            namespace=targeting.namespace,
            rooms=targeting.rooms,
            flags=targeting.flags,
        )
        # EncodingError propagates with the one-shot state untouched
        payload = encode_envelope(envelope)

        self.flags = {}
        self.pending_namespace = None

        channel = targeting.channel(self.key)
        self.last_receivers = None
        try:
            receivers = await self.transport.publish(channel, payload)
        except TransportError as e:
            if self.raise_on_publish_error:
                raise
            logger.error(
                "emitter.publish_failed",
                channel=channel,
                event_name=event,
                error=str(e),
            )
            return self

        self.last_receivers = receivers
        logger.debug(
            "emitter.published",
            channel=channel,
            event_name=event,
            type=int(packet_type),
            size=len(payload),
            rooms=list(targeting.rooms),
            receivers=receivers,
        )
        return self
