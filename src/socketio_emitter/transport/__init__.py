"""Transport — how envelopes reach the pub/sub bus.

Learn: The emitter only needs "borrow a connection, PUBLISH once, give it
back". That contract lives in base.py so the codec and the emitter can be
tested with an in-memory transport; redis.py is the production one.
"""

from socketio_emitter.transport.base import Connection, Transport
from socketio_emitter.transport.redis import RedisConnection, RedisTransport

__all__ = [
    "Connection",
    "RedisConnection",
    "RedisTransport",
    "Transport",
]
