"""Hiss application wiring — one feedback layer per Chirp app.

``FeedbackLayer`` owns the shared pieces (config, event log, collector,
session registry, broadcaster) and installs the signal middleware and the
feedback endpoints on a Chirp ``App``.  ``install()`` is the entry point.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from hiss.config import HissConfig
from hiss.config_loader import load_config
from hiss.observability import EventLog, FeedbackCollector
from hiss.reactive.broadcaster import Broadcaster
from hiss.reactive.graph import ComputationGraph
from hiss.reactive.middleware import format_error_event, make_signal_middleware
from hiss.session import FeedbackSession, SessionRegistry

if TYPE_CHECKING:
    from chirp import App


class FeedbackLayer:
    """Shared feedback infrastructure of one application.

    Args:
        config: Layer configuration (defaults when omitted).

    """

    def __init__(self, config: HissConfig | None = None) -> None:
        self.config = config if config is not None else HissConfig()
        self.collector = FeedbackCollector(
            EventLog(self.config.max_events),
            verbose=self.config.verbose,
            trace_signals=self.config.trace_signals,
        )
        self.broadcaster = Broadcaster()
        self.sessions = SessionRegistry(
            self.config,
            collector=self.collector,
            on_change=self.broadcaster.publish,
        )

    def session(self, session_id: str | None = None) -> FeedbackSession:
        """Return the session with this id, creating it if needed."""
        return self.sessions.create(session_id)

    def computations(self, session: FeedbackSession) -> ComputationGraph:
        """A fresh computation graph reporting into this layer's collector."""
        return ComputationGraph(collector=self.collector, session_id=session.session_id)

    def report_error(self, session: FeedbackSession, exc: BaseException, *, unit: str = "") -> int:
        """Record a genuine failure and push a ``hiss:error`` event to the session.

        Returns:
            Number of connections notified.

        """
        self.collector.record_failure(unit or "session", exc, session_id=session.session_id)
        return self.broadcaster.publish_error(session.session_id, format_error_event(exc))

    def attach(self, app: App, *, debug: bool = False) -> None:
        """Add the signal middleware and feedback endpoints to ``app``."""
        from hiss.reactive.endpoints import register_endpoints

        app.add_middleware(make_signal_middleware(self.collector, debug=debug))
        register_endpoints(app, self.sessions, self.broadcaster)


def install(
    app: App, root: str | Path = ".", *, debug: bool = False, **overrides: object
) -> FeedbackLayer:
    """Create a feedback layer from ``root``'s hiss config and attach it to ``app``.

    Args:
        app: The Chirp application.
        root: Directory searched for hiss.yaml / hiss.yml / hiss.toml.
        debug: Show tracebacks on error pages.
        **overrides: Override HissConfig fields.

    """
    layer = FeedbackLayer(load_config(Path(root), **overrides))
    layer.attach(app, debug=debug)
    return layer
