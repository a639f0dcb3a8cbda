"""Protocol constants shared with every Socket.IO Redis adapter.

Learn: These literals are part of the wire contract. Subscribers written
in other languages compare against the same values, so they never change.
"""

from enum import IntEnum


class PacketType(IntEnum):
    """Socket.IO packet types carried in ``packet.type``."""

    EVENT = 2
    BINARY_EVENT = 5


EVENT = PacketType.EVENT
BINARY_EVENT = PacketType.BINARY_EVENT

# ─── Envelope ────────────────────────────────────────────

SENDER_ID = "emitter"

# ─── Channel naming ──────────────────────────────────────

DEFAULT_KEY = "socket.io"
DEFAULT_NAMESPACE = "/"
CHANNEL_SEPARATOR = "#"

# ─── Delivery flags ──────────────────────────────────────

FLAG_JOIN = "join"
FLAG_VOLATILE = "volatile"
FLAG_BROADCAST = "broadcast"

KNOWN_FLAGS = (FLAG_JOIN, FLAG_VOLATILE, FLAG_BROADCAST)
