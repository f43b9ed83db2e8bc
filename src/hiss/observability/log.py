"""Event log — the in-process record of failures, signals and side-channel changes.

A bounded ring buffer of ``FeedbackEvent`` objects.  Every read accepts a
``session_id`` so one browser session's history can be inspected (or
forgotten) without touching the others.  A lock guards the buffer; reads
work on a copy taken under it.
"""

import threading
from collections import Counter, deque
from typing import Any

from hiss.observability.events import FeedbackEvent


class EventLog:
    """Bounded, session-aware event store.

    Args:
        max_events: Capacity; the oldest events fall off once it is reached.

    """

    __slots__ = ("_capacity", "_buffer", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._capacity = max_events
        self._buffer: deque[FeedbackEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: FeedbackEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def _events(self, session_id: str | None) -> list[FeedbackEvent]:
        with self._lock:
            events = list(self._buffer)
        if session_id is None:
            return events
        return [event for event in events if event.session_id == session_id]

    def query(
        self,
        *,
        event_type: type | tuple[type, ...] | None = None,
        session_id: str | None = None,
        since_ns: int = 0,
        limit: int = 100,
    ) -> list[FeedbackEvent]:
        """Matching events, newest first.

        Args:
            event_type: Event class (or classes) to keep.
            session_id: Session to keep; ``None`` keeps all sessions.
            since_ns: Drop events stamped before this time.
            limit: Stop after this many matches.

        """
        matches: list[FeedbackEvent] = []
        for event in reversed(self._events(session_id)):
            if len(matches) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if since_ns and event.timestamp_ns < since_ns:
                continue
            matches.append(event)
        return matches

    def recent(self, n: int = 20, *, session_id: str | None = None) -> list[FeedbackEvent]:
        """The last ``n`` events (of one session, if given) in the order they happened."""
        if n <= 0:
            return []
        return self._events(session_id)[-n:]

    def clear(self, session_id: str | None = None) -> int:
        """Forget every event, or only one session's.  Returns how many were dropped."""
        with self._lock:
            before = len(self._buffer)
            if session_id is None:
                self._buffer.clear()
            else:
                kept = [event for event in self._buffer if event.session_id != session_id]
                self._buffer.clear()
                self._buffer.extend(kept)
            return before - len(self._buffer)

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def stats(self, session_id: str | None = None) -> dict[str, Any]:
        """Counts per event class and per session.

        With ``session_id``, only that session's events are counted;
        ``max_events`` always reports the shared capacity.
        """
        events = self._events(session_id)
        return {
            "total": len(events),
            "max_events": self._capacity,
            "by_type": dict(Counter(type(event).__name__ for event in events)),
            "by_session": dict(Counter(event.session_id for event in events)),
        }
