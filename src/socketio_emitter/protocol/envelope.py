"""Envelope codec — the bytes every Socket.IO Redis subscriber expects.

Learn: One emission is packed as a MessagePack array of three elements:

    [sender_id, packet, options]

    packet  = {"type": 2 | 5, "data": [event, *args], "nsp": "/chat"}
    options = {"rooms": ["lobby"], "flags": {"broadcast": True}}

``nsp`` is only present when a namespace was chosen. Raw bytes are packed
as msgpack ``bin`` (use_bin_type=True) and text as ``str``, which is what
the adapters in other languages decode.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

import msgpack

from socketio_emitter.errors import EncodingError
from socketio_emitter.protocol.packet import SENDER_ID, PacketType

NAMESPACE_FLAG = "nsp"


@dataclass(frozen=True)
class Envelope:
    """One event plus its targeting, ready to be packed.

    Built fresh for every emission and discarded after encoding.
    """

    packet_type: PacketType
    data: tuple  # (event, *args)
    namespace: Optional[str] = None
    rooms: tuple[str, ...] = ()
    flags: Mapping[str, Any] = field(default_factory=dict)
    sender_id: str = SENDER_ID

    @property
    def event(self) -> str:
        return self.data[0]

    @property
    def args(self) -> tuple:
        return self.data[1:]

    def to_wire(self) -> list:
        """The plain list/dict structure that gets packed."""
        packet: dict[str, Any] = {
            "type": int(self.packet_type),
            "data": list(self.data),
        }
        if self.namespace:
            packet["nsp"] = self.namespace
        options = {
            "rooms": list(self.rooms),
            "flags": dict(self.flags),
        }
        return [self.sender_id, packet, options]


def build_envelope(
    packet_type: PacketType,
    event: str,
    data: tuple,
    *,
    namespace: Optional[str] = None,
    rooms: tuple[str, ...] = (),
    flags: Optional[Mapping[str, Any]] = None,
) -> Envelope:
    """Prepend the event name to its arguments and attach targeting.

    A namespace smuggled in as an ``nsp`` flag is lifted out of the flags
    and into the packet; it is never serialized inside ``flags``. An empty
    namespace means the default one, same as the channel name.
    """
    flags = dict(flags or {})
    flag_namespace = flags.pop(NAMESPACE_FLAG, None)
    namespace = namespace or flag_namespace or None

    return Envelope(
        packet_type=PacketType(packet_type),
        data=(event, *data),
        namespace=namespace,
        rooms=tuple(rooms),
        flags=flags,
    )


def encode_envelope(envelope: Envelope) -> bytes:
    """Pack an envelope. Raises EncodingError for unsupported values."""
    try:
        return msgpack.packb(envelope.to_wire(), use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as e:
        raise EncodingError(
            f"Cannot encode {envelope.event!r} payload: {e}"
        ) from e


def decode_envelope(buf: bytes) -> Envelope:
    """Unpack bytes produced by any compliant emitter.

    Raises EncodingError when the bytes are not an envelope.
    """
    try:
        wire = msgpack.unpackb(buf, raw=False)
    except (ValueError, TypeError, msgpack.exceptions.UnpackException) as e:
        raise EncodingError(f"Not a MessagePack envelope: {e}") from e

    if not isinstance(wire, list) or len(wire) != 3:
        raise EncodingError("Envelope must be an array of 3 elements")
    sender_id, packet, options = wire
    if not isinstance(packet, dict) or not isinstance(options, dict):
        raise EncodingError("Envelope packet and options must be maps")

    data = packet.get("data")
    if not isinstance(data, list) or not data:
        raise EncodingError("Envelope packet.data must be a non-empty array")
    try:
        packet_type = PacketType(packet.get("type"))
    except ValueError:
        raise EncodingError(f"Unknown packet type {packet.get('type')!r}")

    rooms = options.get("rooms")
    if rooms is None:
        rooms = []
    if not isinstance(rooms, list):
        raise EncodingError("Envelope options.rooms must be an array")
    flags = options.get("flags")
    if flags is None:
        flags = {}
    if not isinstance(flags, dict):
        raise EncodingError("Envelope options.flags must be a map")

    return Envelope(
        packet_type=packet_type,
        data=tuple(data),
        namespace=packet.get("nsp"),
        rooms=tuple(rooms),
        flags=flags,
        sender_id=sender_id,
    )
