"""Per-input feedback — danger/warning/success annotations on named inputs.

Feedback is advisory: setting it never halts a computation.  Combine it
with ``guard()`` when an invalid input should also stop downstream work::

    even = n % 2 == 0
    store.toggle("n", not even, "warning", "Please select an even number")
    guard(even)

"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hiss._types import ChangeListener, InputId, Severity

SEVERITIES: frozenset[str] = frozenset({"none", "success", "warning", "danger"})


@dataclass(frozen=True, slots=True)
class FieldFeedback:
    """Feedback attached to one input.

    Attributes:
        input_id: Identifier of the annotated input.
        severity: Styling level.
        message: Text shown next to the input ("" shows only the styling).
        visible: Whether the rendering layer should display it.

    """

    input_id: str
    severity: Severity
    message: str = ""
    visible: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class FeedbackStore:
    """Map of input id -> current feedback for one session.

    Latest write wins per input; writes to different inputs are independent.

    Args:
        on_change: Called with ``("feedback", payload)`` after each visible change.

    """

    __slots__ = ("_entries", "_on_change")

    def __init__(self, *, on_change: ChangeListener | None = None) -> None:
        self._entries: dict[str, FieldFeedback] = {}
        self._on_change = on_change

    def set(self, input_id: InputId, severity: Severity, message: str = "") -> bool:
        """Attach feedback to ``input_id``, or clear it with ``severity="none"``.

        Idempotent: repeating the same call changes nothing.

        Returns:
            True if the visible feedback changed.

        Raises:
            ValueError: If ``severity`` is not a known level.

        """
        if severity not in SEVERITIES:
            msg = f"Unknown feedback severity {severity!r}; expected one of {sorted(SEVERITIES)}"
            raise ValueError(msg)
        if severity == "none":
            return self.clear(input_id)

        entry = FieldFeedback(input_id=input_id, severity=severity, message=message)
        if self._entries.get(input_id) == entry:
            return False
        self._entries[input_id] = entry
        self._emit(input_id, entry)
        return True

    def success(self, input_id: InputId, message: str = "") -> bool:
        return self.set(input_id, "success", message)

    def warning(self, input_id: InputId, message: str = "") -> bool:
        return self.set(input_id, "warning", message)

    def danger(self, input_id: InputId, message: str = "") -> bool:
        return self.set(input_id, "danger", message)

    def toggle(self, input_id: InputId, show: Any, severity: Severity, message: str = "") -> bool:
        """Show feedback when ``show`` is truthy, clear it otherwise.

        Returns ``bool(show)`` so the result can feed a guard directly.
        """
        if show:
            self.set(input_id, severity, message)
        else:
            self.clear(input_id)
        return bool(show)

    def clear(self, input_id: InputId) -> bool:
        """Remove feedback for ``input_id``.  Returns True if any was present."""
        if self._entries.pop(input_id, None) is None:
            return False
        self._emit(input_id, None)
        return True

    def current(self, input_id: InputId) -> FieldFeedback | None:
        return self._entries.get(input_id)

    def snapshot(self) -> dict[str, FieldFeedback]:
        """Copy of all current feedback keyed by input id."""
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _emit(self, input_id: str, entry: FieldFeedback | None) -> None:
        if self._on_change is None:
            return
        payload = entry.to_dict() if entry is not None else {
            "input_id": input_id,
            "severity": "none",
            "message": "",
            "visible": False,
        }
        self._on_change("feedback", payload)
