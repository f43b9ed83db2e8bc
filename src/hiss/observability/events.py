"""Event model for feedback-layer observability.

All events are frozen dataclasses with:
- ``session_id``: The session the event belongs to ("" when unknown)
- ``timestamp_ns``: Monotonic nanosecond timestamp

Signals and failures are separate event types: an engine that wants an
error feed queries ``ComputationFailed`` only and never sees a signal.

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Computation events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ComputationFailed:
    """A computation unit raised a genuine error.

    Attributes:
        unit: Name of the computation unit (or route) that failed.
        error_type: Qualified name of the exception class.
        message: ``str()`` of the exception.
        session_id: Owning session, if known.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    unit: str
    error_type: str
    message: str
    session_id: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class SignalRaised:
    """A computation unit halted with a guard or validation signal.

    Only recorded when ``HissConfig.trace_signals`` is enabled.

    Attributes:
        unit: Name of the computation unit.
        kind: Which signal was raised.
        message: Validation message ("" for guards).
        session_id: Owning session, if known.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    unit: str
    kind: Literal["guard", "validation"]
    message: str
    session_id: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Side-channel events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """A progress channel changed state.

    Attributes:
        progress_id: Handle of the channel.
        action: Lifecycle step.
        fraction: Fraction after the change (None = indeterminate).
        session_id: Owning session.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    progress_id: str
    action: Literal["open", "update", "close"]
    fraction: float | None
    session_id: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class NotificationEvent:
    """A notification was shown, updated or removed.

    Attributes:
        notification_id: Stable id of the notification.
        action: Lifecycle step.
        session_id: Owning session.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    notification_id: str
    action: Literal["show", "update", "remove"]
    session_id: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ModalEvent:
    """The session's modal dialog opened, closed or was resolved.

    Attributes:
        action: Lifecycle step.
        title: Modal title (or "").
        resolved_with: Footer action id for ``resolve`` events.
        session_id: Owning session.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    action: Literal["open", "close", "resolve"]
    title: str
    resolved_with: str
    session_id: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type FeedbackEvent = (
    ComputationFailed
    | SignalRaised
    | ProgressEvent
    | NotificationEvent
    | ModalEvent
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
