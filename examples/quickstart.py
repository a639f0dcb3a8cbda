#!/usr/bin/env python3
"""
socketio-emitter quickstart — emit to a running Socket.IO + Redis setup.

Sends one event per targeting style: namespace-wide, single room,
several rooms, another namespace, and raw bytes.
Run with: python examples/quickstart.py

Requires: pip install -e .
Redis must be running: localhost:6379 (or set SOCKETIO_EMITTER_ADDRESS)
"""

import asyncio
import sys

from socketio_emitter import Emitter, EmitterError


async def main():
    async with Emitter.from_settings() as io:
        # ── Namespace-wide ────────────────────────────────────────────
        print("1. Broadcasting to every client in '/'...")
        await io.broadcast().emit("announcement", {"text": "deploy at 17:00"})
        print(f"   reached {io.last_receivers} subscriber(s)")

        # ── One room (room-scoped channel) ────────────────────────────
        print("\n2. Emitting to room 'lobby'...")
        print(f"   channel: {io.to('lobby').channel}")
        await io.emit("chat", "hello lobby")

        # ── Rooms persist; two rooms go namespace-wide ────────────────
        print("\n3. Adding room 'staff' (rooms persist between emits)...")
        print(f"   channel: {io.to('staff').channel}")
        await io.emit("chat", "hello lobby and staff")

        # ── Another namespace, next emit only ─────────────────────────
        print("\n4. Emitting in namespace '/admin'...")
        await io.of("/admin").emit("reload")
        print(f"   next channel is back to: {io.channel}")

        # ── Binary payload ────────────────────────────────────────────
        print("\n5. Emitting raw bytes...")
        await io.emit("thumbnail", b"\x89PNG\r\n\x1a\n", {"w": 16, "h": 16})

    print("\nDone.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except EmitterError as e:
        print(f"ERROR: {e}")
        sys.exit(1)
