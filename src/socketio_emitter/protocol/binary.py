"""Binary payload detection.

Learn: Socket.IO subscribers need to know whether a packet carries raw
bytes (BINARY_EVENT) or only JSON-able values (EVENT). We walk the whole
argument structure (list/tuple elements and mapping values) and answer
True as soon as any bytes-like value turns up, however deep.

Scalars (str, int, None, ...) never stop the scan: a string sitting
before a bytes value in the same list does not hide the bytes.

Payloads nested too deep to walk (or containing themselves) could never
be packed either, so they fail here with EncodingError.
"""

from collections.abc import Mapping
from typing import Any

from socketio_emitter.errors import EncodingError

BINARY_TYPES = (bytes, bytearray, memoryview)


def has_binary(*data: Any) -> bool:
    """True if any argument contains raw bytes at any depth."""
    try:
        return any(_contains_binary(item) for item in data)
    except RecursionError as e:
        raise EncodingError(
            "Payload is nested too deeply (or references itself) to encode"
        ) from e


def _contains_binary(value: Any) -> bool:
    if isinstance(value, BINARY_TYPES):
        return True
    if isinstance(value, (list, tuple)):
        return any(_contains_binary(item) for item in value)
    if isinstance(value, Mapping):
        return any(_contains_binary(item) for item in value.values())
    return False
