"""Reactive layer — signal propagation and delivery to the browser.

Classifies computation outcomes, propagates pending/failed states through
a graph of computation units, renders outputs, and pushes session feedback
changes to connected browsers over SSE.
"""

from hiss.reactive.broadcaster import Broadcaster, FeedbackMessage, SSEConnection
from hiss.reactive.graph import ComputationGraph
from hiss.reactive.middleware import make_signal_middleware, signal_middleware
from hiss.reactive.outcome import Failed, Ok, Outcome, Pending, run_computation
from hiss.reactive.outputs import OutputSlot, RenderedOutput

__all__ = [
    "Broadcaster",
    "ComputationGraph",
    "Failed",
    "FeedbackMessage",
    "Ok",
    "Outcome",
    "OutputSlot",
    "Pending",
    "RenderedOutput",
    "SSEConnection",
    "make_signal_middleware",
    "run_computation",
    "signal_middleware",
]
