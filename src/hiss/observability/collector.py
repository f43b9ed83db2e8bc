"""Feedback collector — the single sink for feedback-layer events.

Computation failures are appended to the ``EventLog`` and, when verbose,
summarised on stderr.  Signals are a separate path: they are recorded as
``SignalRaised`` only when tracing is switched on, and never printed.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from hiss.observability.events import (
    ComputationFailed,
    ModalEvent,
    NotificationEvent,
    ProgressEvent,
    SignalRaised,
    now_ns,
)
from hiss.observability.log import EventLog
from hiss.signals import ValidationSignal

if TYPE_CHECKING:
    from hiss.signals import Signal


class FeedbackCollector:
    """Unified event collector for the feedback layer.

    Args:
        log: The EventLog to store events in.
        verbose: Print a one-line summary of each failure to stderr.
        trace_signals: Record ``SignalRaised`` events.

    """

    __slots__ = ("_log", "_trace_signals", "_verbose")

    def __init__(
        self,
        log: EventLog | None = None,
        *,
        verbose: bool = True,
        trace_signals: bool = False,
    ) -> None:
        self._log = log if log is not None else EventLog()
        self._verbose = verbose
        self._trace_signals = trace_signals

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Computation outcomes -----

    def record_failure(self, unit: str, exc: BaseException, *, session_id: str = "") -> None:
        """Record a genuine computation error."""
        event = ComputationFailed(
            unit=unit,
            error_type=type(exc).__qualname__,
            message=str(exc),
            session_id=session_id,
            timestamp_ns=now_ns(),
        )
        self._log.append(event)
        if self._verbose:
            print(
                f"  Computation error in {unit}: {event.error_type}: {event.message}",
                file=sys.stderr,
            )

    def record_signal(self, unit: str, signal: Signal, *, session_id: str = "") -> None:
        """Record a guard or validation signal (only when tracing)."""
        if not self._trace_signals:
            return
        if isinstance(signal, ValidationSignal):
            kind, message = "validation", str(signal.message)
        else:
            kind, message = "guard", ""
        self._log.append(
            SignalRaised(
                unit=unit,
                kind=kind,  # type: ignore[arg-type]
                message=message,
                session_id=session_id,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Side channels -----

    def record_progress(
        self,
        progress_id: str,
        action: str,
        *,
        fraction: float | None = None,
        session_id: str = "",
    ) -> None:
        self._log.append(
            ProgressEvent(
                progress_id=progress_id,
                action=action,  # type: ignore[arg-type]
                fraction=fraction,
                session_id=session_id,
                timestamp_ns=now_ns(),
            )
        )

    def record_notification(
        self, notification_id: str, action: str, *, session_id: str = ""
    ) -> None:
        self._log.append(
            NotificationEvent(
                notification_id=notification_id,
                action=action,  # type: ignore[arg-type]
                session_id=session_id,
                timestamp_ns=now_ns(),
            )
        )

    def record_modal(
        self,
        action: str,
        *,
        title: str = "",
        resolved_with: str = "",
        session_id: str = "",
    ) -> None:
        self._log.append(
            ModalEvent(
                action=action,  # type: ignore[arg-type]
                title=title,
                resolved_with=resolved_with,
                session_id=session_id,
                timestamp_ns=now_ns(),
            )
        )
