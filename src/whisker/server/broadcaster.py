"""HMR broadcaster — pushes payloads to every connected client.

Each connected browser owns a queue of JSON-encoded payloads. The
transport (an SSE or WebSocket endpoint) drains the queue with
``client_generator``; the HMR handler only ever calls ``send``.
"""

from __future__ import annotations

import asyncio
import json
import threading
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from whisker._errors import TransportError
from whisker.hmr.payload import ConnectedPayload

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from whisker._types import ClientID
    from whisker.hmr.payload import HmrPayload

# Payloads buffered per client before new ones are dropped for it.
MAX_QUEUED = 256


@dataclass(frozen=True, slots=True)
class ClientConnection:
    """A connected HMR client.

    Attributes:
        client_id: Unique identifier for this connection.
        queue: Encoded payloads waiting to be written to the client.

    """

    client_id: ClientID
    queue: asyncio.Queue[str] = field(
        default_factory=lambda: asyncio.Queue(maxsize=MAX_QUEUED),
        compare=False,
        hash=False,
    )


def encode(payload: HmrPayload) -> str:
    """Serialize a payload to its JSON wire form."""
    return json.dumps(payload.to_dict(), separators=(",", ":"))


class Broadcaster:
    """Manages client connections and fans payloads out to all of them.

    Thread-safe: the client registry is protected by a lock, since
    transports may accept connections from their own worker threads.

    """

    def __init__(self) -> None:
        self._clients: set[ClientConnection] = set()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def client_count(self) -> int:
        """Number of connected clients."""
        with self._lock:
            return len(self._clients)

    def connect(self, client_id: ClientID | None = None) -> ClientConnection:
        """Register a client; its queue starts with a ``connected`` payload."""
        conn = ClientConnection(client_id=client_id or uuid.uuid4().hex)
        conn.queue.put_nowait(encode(ConnectedPayload()))
        with self._lock:
            if self._closed:
                msg = "broadcaster is closed"
                raise TransportError(msg)
            self._clients.add(conn)
        return conn

    def disconnect(self, conn: ClientConnection) -> None:
        """Remove a client."""
        with self._lock:
            self._clients.discard(conn)

    def send(self, payload: HmrPayload) -> int:
        """Encode *payload* once and queue it for every client.

        Returns:
            Number of clients the payload was queued for.

        """
        data = encode(payload)
        with self._lock:
            if self._closed:
                msg = "broadcaster is closed"
                raise TransportError(msg)
            clients = frozenset(self._clients)

        count = 0
        for conn in clients:
            try:
                conn.queue.put_nowait(data)
                count += 1
            except asyncio.QueueFull:
                pass  # Slow client, drop
        return count

    def close(self) -> None:
        """Stop accepting payloads and forget every client."""
        with self._lock:
            self._closed = True
            self._clients.clear()

    async def client_generator(self, conn: ClientConnection) -> AsyncIterator[str]:
        """Async generator yielding one client's encoded payloads.

        Catches ``CancelledError`` (client disconnect) and ``GeneratorExit``
        so transport shutdown does not surface as loop noise, and always
        unregisters the client.

        """
        try:
            while True:
                yield await conn.queue.get()
        except (asyncio.CancelledError, GeneratorExit):
            return
        finally:
            self.disconnect(conn)
