"""Notifications — addressable, mutable, dismissible messages.

A notification outlives the computation that created it unless that
computation removes it.  For "operation in progress" messages whose end
cannot be predicted, use ``scope()``: the notification has no duration
and is removed however the block exits::

    with session.notifications.scope("Reading data...", dismissible=False):
        data = read_big_file(path)

``duration`` is a display hint for the rendering layer; nothing here
expires notifications on a timer.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from hiss._errors import UsageError

if TYPE_CHECKING:
    from hiss._types import ChangeListener, NotificationId, NotificationType
    from hiss.observability.collector import FeedbackCollector

_UNSET: Any = object()

NOTIFICATION_TYPES: frozenset[str] = frozenset({"default", "message", "warning", "error"})


@dataclass(slots=True)
class Notification:
    """A message shown to the user.

    Attributes:
        id: Stable identifier, unchanged by updates.
        message: Display content.
        duration: Seconds to display, or None to persist until removed.
        dismissible: Whether the user may close it.
        type: Styling hint.
        action: Optional extra content shown beside the message.
        closed: True once removed.

    """

    id: str
    message: Any
    duration: float | None = 5.0
    dismissible: bool = True
    type: NotificationType = "default"
    action: Any = None
    closed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "message": str(self.message),
            "duration": self.duration,
            "dismissible": self.dismissible,
            "type": self.type,
            "action": None if self.action is None else str(self.action),
            "closed": self.closed,
        }


class NotificationCenter:
    """The notifications of one session.

    Args:
        session_id: Owning session (for event records).
        collector: Receives ``NotificationEvent`` records.
        on_change: Called with ``("notification", payload)`` after each change.
        default_duration: Duration used when ``notify()`` gets none.
        strict_handles: Raise ``UsageError`` for ids never shown in this session.

    """

    def __init__(
        self,
        *,
        session_id: str = "",
        collector: FeedbackCollector | None = None,
        on_change: ChangeListener | None = None,
        default_duration: float | None = 5.0,
        strict_handles: bool = False,
    ) -> None:
        self._open: dict[str, Notification] = {}
        self._seen: set[str] = set()
        self._session_id = session_id
        self._collector = collector
        self._on_change = on_change
        self._default_duration = default_duration
        self._strict = strict_handles

    def notify(
        self,
        message: Any,
        *,
        duration: float | None = _UNSET,
        dismissible: bool = True,
        type: NotificationType = "default",  # noqa: A002
        action: Any = None,
        id: NotificationId | None = None,  # noqa: A002
    ) -> NotificationId:
        """Show a notification and return its id.

        Passing the id of an open notification updates that notification
        in place instead of showing a second one.
        """
        _check_type(type)
        if id is not None and id in self._open:
            self.update(id, message, type=type, action=action)
            return id

        notification = Notification(
            id=id or uuid.uuid4().hex[:12],
            message=message,
            duration=self._default_duration if duration is _UNSET else duration,
            dismissible=dismissible,
            type=type,
            action=action,
        )
        self._open[notification.id] = notification
        self._seen.add(notification.id)
        self._changed(notification, "show")
        return notification.id

    def update(
        self,
        id: NotificationId,  # noqa: A002
        message: Any = _UNSET,
        *,
        type: NotificationType | None = None,  # noqa: A002
        action: Any = _UNSET,
    ) -> None:
        """Replace the content of an open notification.

        Identity and duration are preserved.  No-op for removed or unknown
        ids; an update never reopens a notification.
        """
        if type is not None:
            _check_type(type)
        notification = self._resolve(id, "update")
        if notification is None:
            return
        if message is not _UNSET:
            notification.message = message
        if type is not None:
            notification.type = type
        if action is not _UNSET:
            notification.action = action
        self._changed(notification, "update")

    def remove(self, id: NotificationId) -> None:  # noqa: A002
        """Remove a notification.  Idempotent."""
        notification = self._resolve(id, "remove")
        if notification is None:
            return
        notification.closed = True
        del self._open[id]
        self._changed(notification, "remove")

    def dismiss(self, id: NotificationId) -> bool:  # noqa: A002
        """Handle a user's close click.  Returns True if the notification was removed."""
        notification = self._open.get(id)
        if notification is None or not notification.dismissible:
            return False
        self.remove(id)
        return True

    @contextmanager
    def scope(
        self,
        message: Any,
        *,
        dismissible: bool = False,
        type: NotificationType = "message",  # noqa: A002
    ) -> Iterator[NotificationId]:
        """Show a persistent notification for the duration of a ``with`` block."""
        notification_id = self.notify(message, duration=None, dismissible=dismissible, type=type)
        try:
            yield notification_id
        finally:
            self.remove(notification_id)

    def get(self, id: NotificationId) -> Notification | None:  # noqa: A002
        return self._open.get(id)

    def active(self) -> tuple[Notification, ...]:
        """Open notifications, oldest first."""
        return tuple(self._open.values())

    def __len__(self) -> int:
        return len(self._open)

    def _resolve(self, id: str, action: str) -> Notification | None:  # noqa: A002
        notification = self._open.get(id)
        if notification is None and self._strict and id not in self._seen:
            msg = f"Cannot {action} notification {id!r}: never shown in this session"
            raise UsageError(msg)
        return notification

    def _changed(self, notification: Notification, action: str) -> None:
        if self._collector is not None:
            self._collector.record_notification(
                notification.id, action, session_id=self._session_id
            )
        if self._on_change is not None:
            self._on_change(
                "notification", {"action": action, "notification": notification.to_dict()}
            )


def _check_type(type_: str) -> None:
    if type_ not in NOTIFICATION_TYPES:
        msg = f"Unknown notification type {type_!r}; expected one of {sorted(NOTIFICATION_TYPES)}"
        raise ValueError(msg)
