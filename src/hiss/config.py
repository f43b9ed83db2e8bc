"""Hiss configuration.

HissConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass

from hiss._errors import ConfigError


@dataclass(frozen=True, slots=True)
class HissConfig:
    """Configuration for a hiss feedback layer.

    Attributes:
        default_notification_duration: Seconds a notification stays visible
            when ``notify()`` is called without an explicit duration.
            ``None`` makes notifications persist until removed.
        strict_handles: Raise ``UsageError`` when a progress or notification
            handle that was never opened in the session is used.  Closed
            handles are no-ops either way, so cleanup may run twice.
        trace_signals: Record ``SignalRaised`` events in the event log.
            Signals are never recorded as failures either way.
        verbose: Print one-line summaries of computation failures to stderr.
        max_events: Maximum number of events retained by the event log.
        queue_size: Per-connection SSE queue bound (0 = unbounded).
        events_endpoint: Path of the SSE endpoint streaming session state.
        state_endpoint: Path of the JSON endpoint returning a session snapshot.

    """

    default_notification_duration: float | None = 5.0
    strict_handles: bool = False
    trace_signals: bool = False
    verbose: bool = True
    max_events: int = 10_000
    queue_size: int = 256
    events_endpoint: str = "/__hiss/events"
    state_endpoint: str = "/__hiss/state"

    def __post_init__(self) -> None:
        duration = self.default_notification_duration
        if duration is not None and duration <= 0:
            msg = f"default_notification_duration must be positive or None, got {duration!r}"
            raise ConfigError(msg)
        if self.max_events < 1:
            msg = f"max_events must be at least 1, got {self.max_events!r}"
            raise ConfigError(msg)
        if self.queue_size < 0:
            msg = f"queue_size must not be negative, got {self.queue_size!r}"
            raise ConfigError(msg)
        for name in ("events_endpoint", "state_endpoint"):
            path = getattr(self, name)
            if not path.startswith("/"):
                msg = f"{name} must start with '/', got {path!r}"
                raise ConfigError(msg)
        if self.events_endpoint == self.state_endpoint:
            msg = "events_endpoint and state_endpoint must differ"
            raise ConfigError(msg)
