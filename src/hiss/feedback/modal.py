"""Modal dialogs — at most one per session.

Opening a modal while another is open replaces it.  This is a known
simplification: there is no queue, the last writer wins.

The controller does not block input while a modal is open; the rendering
layer is expected to funnel interaction through the modal's actions and
report the chosen one back via ``resolve()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hiss._types import ChangeListener, ModalSize
    from hiss.observability.collector import FeedbackCollector

MODAL_SIZES: frozenset[str] = frozenset({"s", "m", "l", "xl"})


@dataclass(frozen=True, slots=True)
class ModalAction:
    """A footer button of a modal."""

    id: str
    label: str


@dataclass(frozen=True, slots=True)
class Modal:
    """An open modal dialog.

    Attributes:
        content: Body content.
        actions: Footer actions, in display order.
        title: Optional heading.
        easy_close: Whether clicking outside or pressing Escape closes it.
        size: Width hint.

    """

    content: Any
    actions: tuple[ModalAction, ...] = field(default_factory=tuple)
    title: str | None = None
    easy_close: bool = False
    size: ModalSize = "m"

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": str(self.content),
            "actions": [{"id": a.id, "label": a.label} for a in self.actions],
            "title": self.title,
            "easy_close": self.easy_close,
            "size": self.size,
        }


class ModalController:
    """Holds the single modal of one session (``Closed`` or ``Open``)."""

    __slots__ = ("_collector", "_current", "_on_change", "_session_id")

    def __init__(
        self,
        *,
        session_id: str = "",
        collector: FeedbackCollector | None = None,
        on_change: ChangeListener | None = None,
    ) -> None:
        self._current: Modal | None = None
        self._session_id = session_id
        self._collector = collector
        self._on_change = on_change

    @property
    def is_open(self) -> bool:
        return self._current is not None

    def current(self) -> Modal | None:
        return self._current

    def open(
        self,
        content: Any,
        actions: Iterable[ModalAction | tuple[str, str]] = (),
        *,
        title: str | None = None,
        easy_close: bool = False,
        size: ModalSize = "m",
    ) -> Modal:
        """Show a modal, replacing any modal that is already open.

        Actions may be given as ``ModalAction`` or ``(id, label)`` pairs.
        """
        if size not in MODAL_SIZES:
            msg = f"Unknown modal size {size!r}; expected one of {sorted(MODAL_SIZES)}"
            raise ValueError(msg)
        normalized = tuple(a if isinstance(a, ModalAction) else ModalAction(*a) for a in actions)
        ids = [a.id for a in normalized]
        if len(set(ids)) != len(ids):
            msg = f"Duplicate modal action ids: {ids}"
            raise ValueError(msg)

        self._current = Modal(
            content=content,
            actions=normalized,
            title=title,
            easy_close=easy_close,
            size=size,
        )
        self._changed("open", title=title or "")
        return self._current

    def close(self) -> None:
        """Close the modal.  Closing when nothing is open is a no-op."""
        modal = self._current
        if modal is None:
            return
        self._current = None
        self._changed("close", title=modal.title or "")

    def resolve(self, action_id: str) -> str | None:
        """Record that the user chose ``action_id`` and close the modal.

        Returns:
            The action id, or None if no modal was open.

        Raises:
            ValueError: If the open modal has no such action.

        """
        modal = self._current
        if modal is None:
            return None
        if action_id not in {a.id for a in modal.actions}:
            msg = f"Modal has no action {action_id!r}"
            raise ValueError(msg)
        self._current = None
        self._changed("resolve", title=modal.title or "", resolved_with=action_id)
        return action_id

    def _changed(self, action: str, *, title: str, resolved_with: str = "") -> None:
        if self._collector is not None:
            self._collector.record_modal(
                action, title=title, resolved_with=resolved_with, session_id=self._session_id
            )
        if self._on_change is not None:
            payload: dict[str, Any] = {"action": action, "resolved_with": resolved_with}
            payload["modal"] = self._current.to_dict() if self._current is not None else None
            self._on_change("modal", payload)
