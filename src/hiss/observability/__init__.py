"""Observability — structured events for the feedback layer.

Records computation failures, optional signal traces, and lifecycle steps
of progress channels, notifications and modals as frozen dataclasses in a
bounded ``EventLog``.

Quick Start:
    >>> from hiss.observability import EventLog, FeedbackCollector
    >>> log = EventLog()
    >>> collector = FeedbackCollector(log)
    >>> # Pass collector to FeedbackSession / ComputationGraph

"""

from hiss.observability.collector import FeedbackCollector
from hiss.observability.events import (
    ComputationFailed,
    FeedbackEvent,
    ModalEvent,
    NotificationEvent,
    ProgressEvent,
    SignalRaised,
    now_ns,
)
from hiss.observability.log import EventLog

__all__ = [
    "ComputationFailed",
    "EventLog",
    "FeedbackCollector",
    "FeedbackEvent",
    "ModalEvent",
    "NotificationEvent",
    "ProgressEvent",
    "SignalRaised",
    "now_ns",
]
