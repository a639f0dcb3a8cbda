"""socketio-emitter — publish Socket.IO events from any backend process.

Learn: The realtime layer (Socket.IO servers behind a Redis adapter) runs
in a separate, horizontally-scaled process. This package never talks to
browsers. It frames an event plus its targeting (namespace, rooms, flags)
into a MessagePack envelope and PUBLISHes it on the channel the adapter
subscribers listen to:

    async with Emitter.from_settings() as io:
        await io.to("lobby").emit("chat", {"text": "hello"})
"""

from socketio_emitter.channels import Targeting
from socketio_emitter.config import EmitterSettings, load_settings
from socketio_emitter.emitter import Emitter
from socketio_emitter.errors import (
    ConfigurationError,
    EmitterError,
    EncodingError,
    TransportError,
)
from socketio_emitter.protocol.binary import has_binary
from socketio_emitter.protocol.envelope import Envelope, decode_envelope, encode_envelope
from socketio_emitter.protocol.packet import BINARY_EVENT, EVENT, PacketType

__version__ = "0.1.0"

__all__ = [
    "BINARY_EVENT",
    "EVENT",
    "ConfigurationError",
    "Emitter",
    "EmitterError",
    "EmitterSettings",
    "EncodingError",
    "Envelope",
    "PacketType",
    "Targeting",
    "TransportError",
    "decode_envelope",
    "encode_envelope",
    "has_binary",
    "load_settings",
]
