"""SSE broadcaster — pushes session feedback changes to connected browsers.

Every browser tab subscribes with its session id.  When a session's
feedback, progress, notifications or modal change, the broadcaster queues
a ``FeedbackMessage`` for each of that session's connections; the SSE
endpoint turns queued messages into Chirp ``SSEEvent`` objects.
"""

from __future__ import annotations

import asyncio
import json
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@dataclass(frozen=True, slots=True)
class FeedbackMessage:
    """One server-sent event: ``event`` name and JSON ``data``."""

    event: str
    data: str


@dataclass(frozen=True, slots=True)
class SSEConnection:
    """A connected SSE client.

    Attributes:
        client_id: Unique identifier for this connection.
        session_id: The feedback session this client renders.
        queue: Messages waiting to be sent to the client.
        loop: Event loop that consumes ``queue``.  Publishers on other
            threads hand messages over through this loop.

    """

    client_id: str
    session_id: str
    queue: asyncio.Queue[Any] = field(default_factory=asyncio.Queue, compare=False, hash=False)
    loop: asyncio.AbstractEventLoop | None = field(default=None, compare=False, hash=False)


class Broadcaster:
    """Manages SSE connections and fans session changes out to them.

    Thread-safe: subscriber map protected by a lock, and queue writes from
    foreign threads go through the connection's event loop.

    """

    def __init__(self) -> None:
        self._subscribers: dict[str, set[SSEConnection]] = defaultdict(set)
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        """Total number of active SSE connections across all sessions."""
        with self._lock:
            return sum(len(conns) for conns in self._subscribers.values())

    def subscribe(self, conn: SSEConnection) -> None:
        with self._lock:
            self._subscribers[conn.session_id].add(conn)

    def unsubscribe(self, conn: SSEConnection) -> None:
        with self._lock:
            conns = self._subscribers.get(conn.session_id)
            if conns is None:
                return
            conns.discard(conn)
            if not conns:
                del self._subscribers[conn.session_id]

    def get_subscribers(self, session_id: str) -> frozenset[SSEConnection]:
        """Snapshot of a session's connections (no lock held on return)."""
        with self._lock:
            return frozenset(self._subscribers.get(session_id, set()))

    def get_subscribed_sessions(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._subscribers.keys())

    def publish(self, session_id: str, kind: str, payload: dict[str, Any]) -> int:
        """Queue a ``hiss:<kind>`` event for every connection of a session.

        Matches the ``SessionChangeListener`` signature, so it can be passed
        straight to ``SessionRegistry(on_change=...)``.  Safe to call from
        worker threads: connections bound to an event loop receive the
        message through that loop.

        Returns:
            Number of connections the event was handed to.  Connections
            with a full queue or a closed loop are skipped.

        """
        message = FeedbackMessage(event=f"hiss:{kind}", data=json.dumps(payload, default=str))
        return self._fan_out(session_id, message)

    def publish_error(self, session_id: str, payload: str) -> int:
        """Queue a ``hiss:error`` event carrying a pre-formatted JSON payload."""
        return self._fan_out(session_id, FeedbackMessage(event="hiss:error", data=payload))

    def _fan_out(self, session_id: str, message: FeedbackMessage) -> int:
        return sum(_deliver(conn, message) for conn in self.get_subscribers(session_id))

    async def client_generator(self, conn: SSEConnection) -> AsyncIterator[FeedbackMessage]:
        """Yield messages from a connection's queue until the client goes away.

        ``CancelledError`` (client disconnect) and ``GeneratorExit``
        (generator cleanup) end the stream quietly.
        """
        try:
            while True:
                yield await conn.queue.get()
        except (asyncio.CancelledError, GeneratorExit):
            return


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _put_or_drop(queue: asyncio.Queue[Any], message: FeedbackMessage) -> bool:
    try:
        queue.put_nowait(message)
    except asyncio.QueueFull:
        return False  # the next snapshot request resynchronises the client
    return True


def _deliver(conn: SSEConnection, message: FeedbackMessage) -> bool:
    """Hand ``message`` to ``conn`` on the loop that owns its queue."""
    loop = conn.loop
    if loop is None or loop is _running_loop():
        return _put_or_drop(conn.queue, message)
    try:
        loop.call_soon_threadsafe(_put_or_drop, conn.queue, message)
    except RuntimeError:
        return False  # loop closed
    return True
