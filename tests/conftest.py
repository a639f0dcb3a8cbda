"""Test fixtures — an in-memory transport that records every publish.

Learn: The emitter only talks to the Transport interface, so tests swap
Redis for RecordingTransport. It counts acquire/release pairs so tests
can check that connections go back to the pool on every exit path.
"""

import asyncio
import os
from contextlib import asynccontextmanager

import pytest

from socketio_emitter.emitter import Emitter
from socketio_emitter.transport.base import Connection, Transport


class RecordingConnection(Connection):
    def __init__(self, transport: "RecordingTransport"):
        self.transport = transport

    async def publish(self, channel: str, payload: bytes) -> int:
        if self.transport.delay:
            await asyncio.sleep(self.transport.delay)
        if self.transport.fail_with is not None:
            raise self.transport.fail_with
        self.transport.published.append((channel, payload))
        return self.transport.receivers


class RecordingTransport(Transport):
    def __init__(self):
        self.published: list[tuple[str, bytes]] = []
        self.fail_with = None
        self.delay = 0.0
        self.receivers = 1
        self.acquired = 0
        self.released = 0
        self.closed = False

    @asynccontextmanager
    async def acquire(self):
        self.acquired += 1
        try:
            yield RecordingConnection(self)
        finally:
            self.released += 1

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep SOCKETIO_EMITTER_* from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("SOCKETIO_EMITTER_"):
            monkeypatch.delenv(name)


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def emitter(transport):
    return Emitter(transport)
