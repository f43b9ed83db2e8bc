"""Per-session feedback state.

Each user session owns one ``FeedbackSession``: a field-feedback map, a
progress registry, a notification center and a modal controller.  State is
passed explicitly (no module-level globals) and nothing is shared between
sessions.

The read accessors below are what a rendering layer polls after each
computation pass; listeners registered with ``subscribe()`` get pushed the
same changes as they happen.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from hiss.config import HissConfig
from hiss.feedback.fields import FeedbackStore, FieldFeedback
from hiss.feedback.modal import Modal, ModalController
from hiss.feedback.notifications import Notification, NotificationCenter
from hiss.feedback.progress import ProgressChannel, ProgressRegistry

if TYPE_CHECKING:
    from hiss._types import ChangeKind, ChangeListener, InputId, SessionChangeListener, SessionId
    from hiss.observability.collector import FeedbackCollector


class FeedbackSession:
    """All feedback state of one user session.

    Args:
        session_id: Identifier; generated when omitted.
        config: Layer configuration (defaults when omitted).
        collector: Receives lifecycle events of all side channels.

    """

    def __init__(
        self,
        session_id: SessionId | None = None,
        *,
        config: HissConfig | None = None,
        collector: FeedbackCollector | None = None,
    ) -> None:
        self.session_id: str = session_id or uuid.uuid4().hex
        self.config = config if config is not None else HissConfig()
        self._listeners: list[ChangeListener] = []

        self.feedback = FeedbackStore(on_change=self._dispatch)
        self.progress = ProgressRegistry(
            session_id=self.session_id,
            collector=collector,
            on_change=self._dispatch,
            strict_handles=self.config.strict_handles,
        )
        self.notifications = NotificationCenter(
            session_id=self.session_id,
            collector=collector,
            on_change=self._dispatch,
            default_duration=self.config.default_notification_duration,
            strict_handles=self.config.strict_handles,
        )
        self.modal = ModalController(
            session_id=self.session_id,
            collector=collector,
            on_change=self._dispatch,
        )

    # ----- Read accessors -----

    def current_feedback(self, input_id: InputId) -> FieldFeedback | None:
        return self.feedback.current(input_id)

    def active_progress(self) -> tuple[ProgressChannel, ...]:
        return self.progress.active()

    def active_notifications(self) -> tuple[Notification, ...]:
        return self.notifications.active()

    def current_modal(self) -> Modal | None:
        return self.modal.current()

    def snapshot(self) -> dict[str, Any]:
        """JSON-serialisable view of everything a renderer needs."""
        modal = self.modal.current()
        return {
            "session_id": self.session_id,
            "feedback": {k: v.to_dict() for k, v in self.feedback.snapshot().items()},
            "progress": [c.to_dict() for c in self.progress.active()],
            "notifications": [n.to_dict() for n in self.notifications.active()],
            "modal": modal.to_dict() if modal is not None else None,
        }

    # ----- Change listeners -----

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Call ``listener(kind, payload)`` after every visible change.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _dispatch(self, kind: ChangeKind, payload: dict[str, Any]) -> None:
        for listener in tuple(self._listeners):
            listener(kind, payload)

    def __repr__(self) -> str:
        return f"FeedbackSession({self.session_id!r})"


class SessionRegistry:
    """Creates, looks up and discards feedback sessions.

    Thread-safe: the session map is protected by a lock, since web workers
    may create sessions concurrently.  Each session's own state is only
    touched from that session's execution context.

    Args:
        config: Configuration handed to every session.
        collector: Shared event collector.
        on_change: Subscribed to every session created by this registry.

    """

    def __init__(
        self,
        config: HissConfig | None = None,
        *,
        collector: FeedbackCollector | None = None,
        on_change: SessionChangeListener | None = None,
    ) -> None:
        self._config = config if config is not None else HissConfig()
        self._collector = collector
        self._on_change = on_change
        self._sessions: dict[str, FeedbackSession] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> HissConfig:
        return self._config

    def create(self, session_id: SessionId | None = None) -> FeedbackSession:
        """Create a session (or return the existing one with this id)."""
        with self._lock:
            if session_id is not None and session_id in self._sessions:
                return self._sessions[session_id]
            session = FeedbackSession(session_id, config=self._config, collector=self._collector)
            self._sessions[session.session_id] = session

        if self._on_change is not None:
            forward = self._on_change
            sid = session.session_id
            session.subscribe(lambda kind, payload: forward(sid, kind, payload))
        return session

    def get(self, session_id: SessionId) -> FeedbackSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def discard(self, session_id: SessionId) -> FeedbackSession | None:
        """Forget a session (e.g. on disconnect).  Returns it, if it existed."""
        with self._lock:
            return self._sessions.pop(session_id, None)

    def ids(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
