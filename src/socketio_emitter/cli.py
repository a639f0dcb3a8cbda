"""socketio-emit CLI — publish Socket.IO events from the shell.

Usage:
    socketio-emit emit chat hello --room lobby             # publish via Redis
    socketio-emit emit news '{"title": "up"}' -n /feed -f broadcast
    socketio-emit encode chat hello --room lobby           # channel + hex, no Redis
    socketio-emit decode 93a7656d6974746572...             # envelope as JSON

Arguments are parsed as JSON when they are valid JSON ('42', '{"a": 1}'),
otherwise passed through as strings. Connection settings come from
SOCKETIO_EMITTER_* env vars unless --address / --key are given.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import sys
from typing import Any, NoReturn

import click

from socketio_emitter import __version__
from socketio_emitter.channels import Targeting
from socketio_emitter.config import load_settings
from socketio_emitter.emitter import Emitter
from socketio_emitter.errors import EmitterError
from socketio_emitter.protocol.binary import has_binary
from socketio_emitter.protocol.envelope import (
    build_envelope,
    decode_envelope,
    encode_envelope,
)
from socketio_emitter.protocol.packet import BINARY_EVENT, EVENT, KNOWN_FLAGS

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Drive a coroutine to completion from a click command.

    Click commands are synchronous. When a loop is already running in this
    thread (a CliRunner call from an async test), asyncio.run would refuse,
    so the coroutine gets a fresh loop on a worker thread instead.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    # Loop already running here; a worker thread gets its own
    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as worker:
        return worker.submit(asyncio.run, coro).result()


def _parse_arg(value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return str(value)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=_json_default)


def _fail(message: str) -> NoReturn:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


def _targeting_options(fn):
    """Options shared by `emit` and `encode`."""
    fn = click.option("--binary", is_flag=True, help="Force BINARY_EVENT packet type")(fn)
    fn = click.option(
        "--flag", "-f", "flags", multiple=True,
        type=click.Choice(KNOWN_FLAGS), help="Delivery flag (repeatable)",
    )(fn)
    fn = click.option("--namespace", "-n", default=None, help="Namespace, e.g. /chat")(fn)
    fn = click.option("--room", "-r", "rooms", multiple=True, help="Target room (repeatable)")(fn)
    fn = click.option("--key", default=None, help="Pub/sub key (default: socket.io)")(fn)
    fn = click.argument("args", nargs=-1)(fn)
    fn = click.argument("event")(fn)
    return fn


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="socketio-emit")
def main():
    """socketio-emit — publish events to Socket.IO servers through Redis."""


# ---------------------------------------------------------------------------
# socketio-emit emit
# ---------------------------------------------------------------------------


@main.command()
@_targeting_options
@click.option("--address", default=None, help="Redis address, host:port or socket path")
def emit(event, args, key, rooms, namespace, flags, binary, address):
    """Publish EVENT with ARGS to the Socket.IO bus."""
    try:
        channel, receivers = _run(
            _emit(event, args, key, rooms, namespace, flags, binary, address)
        )
    except EmitterError as e:
        _fail(str(e))
    click.secho(f"Published {event!r} on {channel} ({receivers} subscriber(s))", fg="green")


async def _emit(event, args, key, rooms, namespace, flags, binary, address):
    settings = load_settings(address=address, key=key)
    async with Emitter.from_settings(settings) as io:
        for room in rooms:
            io.to(room)
        if namespace:
            io.of(namespace)
        for name in flags:
            io.flag(name)
        channel = io.channel

        data = [_parse_arg(a) for a in args]
        if binary:
            await io.emit_binary(event, *data)
        else:
            await io.emit(event, *data)

    return channel, io.last_receivers


# ---------------------------------------------------------------------------
# socketio-emit encode
# ---------------------------------------------------------------------------


@main.command()
@_targeting_options
def encode(event, args, key, rooms, namespace, flags, binary):
    """Print the channel and hex envelope for EVENT without publishing."""
    try:
        settings = load_settings(key=key)
        data = tuple(_parse_arg(a) for a in args)
        targeting = Targeting(
            namespace=namespace,
            rooms=tuple(dict.fromkeys(rooms)),
            flags={name: True for name in flags},
        )
        packet_type = BINARY_EVENT if binary or has_binary(*data) else EVENT
        envelope = build_envelope(
            packet_type,
            event,
            data,
            namespace=targeting.namespace,
            rooms=targeting.rooms,
            flags=targeting.flags,
        )
        payload = encode_envelope(envelope)
    except EmitterError as e:
        _fail(str(e))

    click.echo(f"channel: {targeting.channel(settings.key)}")
    click.echo(f"payload: {payload.hex()}")


# ---------------------------------------------------------------------------
# socketio-emit decode
# ---------------------------------------------------------------------------


@main.command()
@click.argument("payload")
def decode(payload: str):
    """Decode a hex-encoded envelope and print it as JSON."""
    try:
        raw = bytes.fromhex(payload)
    except ValueError:
        _fail("PAYLOAD must be a hex string")
    try:
        envelope = decode_envelope(raw)
    except EmitterError as e:
        _fail(str(e))
    click.echo(_pretty_json(envelope.to_wire()))


if __name__ == "__main__":
    main()
