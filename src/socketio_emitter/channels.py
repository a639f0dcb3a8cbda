"""Channel naming and targeting snapshots.

Learn: Subscribers listen on one channel per namespace, plus one per
room they have local members in:

    socket.io#/#          namespace-wide
    socket.io#/#lobby#    room-scoped

Room-scoped channels are only a fan-out shortcut. With exactly one room
we publish there; with zero or several rooms we publish namespace-wide
and the subscriber filters on ``options.rooms`` inside the envelope.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional

from socketio_emitter.protocol.packet import (
    CHANNEL_SEPARATOR,
    DEFAULT_KEY,
    DEFAULT_NAMESPACE,
)


def namespace_channel(key: str = DEFAULT_KEY, namespace: Optional[str] = None) -> str:
    """``{key}#{namespace}#``; namespace defaults to "/"."""
    nsp = namespace or DEFAULT_NAMESPACE
    return f"{key}{CHANNEL_SEPARATOR}{nsp}{CHANNEL_SEPARATOR}"


def room_channel(key: str, namespace: Optional[str], room: str) -> str:
    """``{key}#{namespace}#{room}#``."""
    return f"{namespace_channel(key, namespace)}{room}{CHANNEL_SEPARATOR}"


def resolve_channel(
    key: str = DEFAULT_KEY,
    namespace: Optional[str] = None,
    rooms: tuple[str, ...] = (),
) -> str:
    if len(rooms) == 1:
        return room_channel(key, namespace, rooms[0])
    return namespace_channel(key, namespace)


@dataclass(frozen=True)
class Targeting:
    """Immutable copy of an emitter's targeting state at emit time."""

    namespace: Optional[str] = None
    rooms: tuple[str, ...] = ()
    flags: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def channel(self, key: str = DEFAULT_KEY) -> str:
        return resolve_channel(key, self.namespace, self.rooms)
