"""Progress channels — scoped handles for long-running operations.

A channel goes ``Unopened -> Open -> Closed``.  Open it through
``ProgressRegistry.scope()`` so it is closed on every exit path, including
guard/validation signals and errors::

    with session.progress.scope("Running simulation") as bar:
        for i in range(steps):
            step(i)
            session.progress.inc(bar, 1 / steps, detail=f"step {i + 1}")

Updating or closing a closed channel is a no-op so cleanup code may run
twice while unwinding.  Fractions are clamped to [0, 1] but need not be
monotonic; multi-phase tasks may start over.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from hiss._errors import UsageError

if TYPE_CHECKING:
    from hiss._types import ChangeListener, ProgressId
    from hiss.observability.collector import FeedbackCollector

# Sentinel distinguishing "leave fraction alone" from None (indeterminate)
_UNSET: Any = object()


@dataclass(slots=True)
class ProgressChannel:
    """An in-flight operation's reported progress.

    Attributes:
        id: Opaque handle, unique within the registry.
        message: Main status text.
        detail: Secondary status text.
        fraction: Completion in [0, 1], or None when indeterminate.
        closed: True once the owning scope has exited.

    """

    id: str
    message: str = ""
    detail: str = ""
    fraction: float | None = 0.0
    closed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "detail": self.detail,
            "fraction": self.fraction,
            "closed": self.closed,
        }


def _clamp(fraction: float | None) -> float | None:
    if fraction is None:
        return None
    return min(1.0, max(0.0, float(fraction)))


class ProgressRegistry:
    """The set of progress channels of one session.

    Channels are kept in opening order; the most recently opened channel
    is the innermost operation and is rendered on top.

    Args:
        session_id: Owning session (for event records).
        collector: Receives ``ProgressEvent`` records.
        on_change: Called with ``("progress", payload)`` after each change.
        strict_handles: Raise ``UsageError`` for handles this registry never
            opened.  Closed handles stay no-ops either way.

    """

    __slots__ = ("_channels", "_collector", "_on_change", "_opened", "_session_id", "_strict")

    def __init__(
        self,
        *,
        session_id: str = "",
        collector: FeedbackCollector | None = None,
        on_change: ChangeListener | None = None,
        strict_handles: bool = False,
    ) -> None:
        self._channels: dict[str, ProgressChannel] = {}
        self._opened: set[str] = set()
        self._session_id = session_id
        self._collector = collector
        self._on_change = on_change
        self._strict = strict_handles

    def open(
        self, message: str = "", detail: str = "", *, fraction: float | None = 0.0
    ) -> ProgressChannel:
        """Open a new channel and return its handle.

        Prefer ``scope()``, which guarantees the channel is closed.
        """
        channel = ProgressChannel(
            id=uuid.uuid4().hex[:12],
            message=message,
            detail=detail,
            fraction=_clamp(fraction),
        )
        self._channels[channel.id] = channel
        self._opened.add(channel.id)
        self._changed(channel, "open")
        return channel

    def update(
        self,
        handle: ProgressChannel | ProgressId,
        fraction: float | None = _UNSET,
        message: str | None = None,
        detail: str | None = None,
    ) -> None:
        """Set the fraction and/or texts of an open channel.

        Omitted arguments keep their current value; ``fraction=None``
        switches the channel to indeterminate.  No-op on a closed channel.
        """
        channel = self._resolve(handle, "update")
        if channel is None:
            return
        if fraction is not _UNSET:
            channel.fraction = _clamp(fraction)
        if message is not None:
            channel.message = message
        if detail is not None:
            channel.detail = detail
        self._changed(channel, "update")

    def inc(
        self,
        handle: ProgressChannel | ProgressId,
        amount: float = 0.1,
        message: str | None = None,
        detail: str | None = None,
    ) -> None:
        """Advance the fraction by ``amount``; indeterminate channels start from 0."""
        channel = self._resolve(handle, "inc")
        if channel is None:
            return
        self.update(channel, (channel.fraction or 0.0) + amount, message, detail)

    def close(self, handle: ProgressChannel | ProgressId) -> None:
        """Close a channel.  Idempotent."""
        channel = self._resolve(handle, "close")
        if channel is None:
            return
        channel.closed = True
        del self._channels[channel.id]
        self._changed(channel, "close")

    @contextmanager
    def scope(
        self, message: str = "", detail: str = "", *, fraction: float | None = 0.0
    ) -> Iterator[ProgressChannel]:
        """Open a channel for the duration of a ``with`` block.

        The channel is closed when the block exits, whether it returns,
        raises a signal, or raises an error.
        """
        channel = self.open(message, detail, fraction=fraction)
        try:
            yield channel
        finally:
            self.close(channel)

    def active(self) -> tuple[ProgressChannel, ...]:
        """Open channels in opening order."""
        return tuple(self._channels.values())

    def __len__(self) -> int:
        return len(self._channels)

    def _resolve(self, handle: ProgressChannel | ProgressId, action: str) -> ProgressChannel | None:
        key = handle.id if isinstance(handle, ProgressChannel) else handle
        channel = self._channels.get(key)
        if channel is None and self._strict and key not in self._opened:
            msg = f"Cannot {action} progress {key!r}: never opened in this session"
            raise UsageError(msg)
        return channel

    def _changed(self, channel: ProgressChannel, action: str) -> None:
        if self._collector is not None:
            self._collector.record_progress(
                channel.id, action, fraction=channel.fraction, session_id=self._session_id
            )
        if self._on_change is not None:
            self._on_change("progress", {"action": action, **channel.to_dict()})


# ---------------------------------------------------------------------------
# Tagged progress messages from UI-agnostic workers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProgressStarted:
    """Work began; ``total`` steps expected (None when unknown)."""

    total: int | None = None
    message: str = ""


@dataclass(frozen=True, slots=True)
class ProgressAdvanced:
    """``done`` steps are complete."""

    done: int
    detail: str = ""


@dataclass(frozen=True, slots=True)
class ProgressFinished:
    """Work finished; the channel is filled and closed."""

    message: str = ""


type ProgressMessage = ProgressStarted | ProgressAdvanced | ProgressFinished


class ProgressReporter:
    """Forwards tagged progress messages from a worker onto a channel.

    Workers that know nothing about sessions report through a plain
    callback; the reporter turns each message into registry calls::

        with session.progress.scope("Loading") as bar:
            load_files(paths, progress=ProgressReporter(session.progress, bar))

    """

    __slots__ = ("_channel", "_registry", "_total")

    def __init__(self, registry: ProgressRegistry, channel: ProgressChannel) -> None:
        self._registry = registry
        self._channel = channel
        self._total: int | None = None

    def __call__(self, msg: ProgressMessage) -> None:
        if isinstance(msg, ProgressStarted):
            self._total = msg.total
            fraction = 0.0 if msg.total else None
            self._registry.update(self._channel, fraction, message=msg.message or None)
            return

        if isinstance(msg, ProgressAdvanced):
            fraction = msg.done / self._total if self._total else None
            self._registry.update(self._channel, fraction, detail=msg.detail or None)
            return

        if isinstance(msg, ProgressFinished):
            self._registry.update(self._channel, 1.0, message=msg.message or None)
            self._registry.close(self._channel)
            return

        msg_text = f"Unsupported progress message: {type(msg).__name__}"
        raise TypeError(msg_text)
