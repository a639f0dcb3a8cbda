"""Tests for the socketio-emit CLI."""

from unittest.mock import patch

import msgpack
import pytest
from click.testing import CliRunner

from socketio_emitter.cli import main
from socketio_emitter.emitter import Emitter
from socketio_emitter.errors import TransportError
from socketio_emitter.protocol.envelope import decode_envelope

CHAT_HELLO_HEX = (
    "93a7656d6974746572"
    "82a47479706502a464617461" "92a463686174a568656c6c6f"
    "82a5726f6f6d7390a5666c61677380"
)


@pytest.fixture()
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_encode_prints_channel_and_payload(runner):
    result = runner.invoke(main, ["encode", "chat", "hello"])
    assert result.exit_code == 0, result.output
    assert "channel: socket.io#/#" in result.output
    assert f"payload: {CHAT_HELLO_HEX}" in result.output


def test_encode_with_targeting(runner):
    result = runner.invoke(
        main,
        ["encode", "news", '{"id": 7}', "-r", "lobby", "-n", "/feed", "-f", "broadcast"],
    )
    assert result.exit_code == 0, result.output
    lines = dict(line.split(": ", 1) for line in result.output.splitlines())
    assert lines["channel"] == "socket.io#/feed#lobby#"

    envelope = decode_envelope(bytes.fromhex(lines["payload"]))
    assert envelope.data == ("news", {"id": 7})
    assert envelope.namespace == "/feed"
    assert envelope.flags == {"broadcast": True}


def test_encode_custom_key_and_binary(runner):
    result = runner.invoke(main, ["encode", "chat", "--key", "myapp", "--binary"])
    assert result.exit_code == 0, result.output
    lines = dict(line.split(": ", 1) for line in result.output.splitlines())
    assert lines["channel"] == "myapp#/#"
    assert decode_envelope(bytes.fromhex(lines["payload"])).packet_type == 5


def test_decode(runner):
    result = runner.invoke(main, ["decode", CHAT_HELLO_HEX])
    assert result.exit_code == 0, result.output
    assert '"emitter"' in result.output
    assert '"chat"' in result.output
    assert '"hello"' in result.output


def test_decode_rejects_garbage(runner):
    result = runner.invoke(main, ["decode", "zz"])
    assert result.exit_code == 1
    assert "hex" in result.output

    result = runner.invoke(main, ["decode", "c1"])
    assert result.exit_code == 1


def test_emit_publishes(runner, transport):
    with patch.object(Emitter, "from_settings", return_value=Emitter(transport)):
        result = runner.invoke(main, ["emit", "chat", "hello", "-r", "lobby"])

    assert result.exit_code == 0, result.output
    assert "socket.io#/#lobby#" in result.output
    channel, payload = transport.published[0]
    assert channel == "socket.io#/#lobby#"
    assert decode_envelope(payload).data == ("chat", "hello")
    assert transport.closed


def test_emit_reports_transport_errors(runner, transport):
    transport.fail_with = TransportError("redis down")
    with patch.object(Emitter, "from_settings", return_value=Emitter(transport)):
        result = runner.invoke(main, ["emit", "chat"])

    assert result.exit_code == 1
    assert "redis down" in result.output


def test_bad_configuration(runner):
    result = runner.invoke(main, ["emit", "chat", "--address", "no-port"])
    assert result.exit_code == 1
    assert "Invalid emitter configuration" in result.output


def test_decode_rejects_bad_rooms(runner):
    payload = msgpack.packb(["emitter", {"type": 2, "data": ["x"]}, {"rooms": 5, "flags": {}}])
    result = runner.invoke(main, ["decode", payload.hex()])
    assert result.exit_code == 1
    assert "options.rooms" in result.output
