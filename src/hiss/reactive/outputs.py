"""Output slots — what a rendering consumer shows for each outcome.

===================  ==========================================
Outcome              Rendered
===================  ==========================================
Ok(value)            the value (through the slot's formatter)
Pending(guard)       nothing — or, with ``cancel_output=True``,
                     whatever the slot showed before
Pending(validation)  the validation message
Failed(error)        an error indicator (type + message)
===================  ==========================================

``cancel_output`` travels with the signal object, so an output several
units downstream of the guard keeps its previous render just like a
direct consumer would.  A slot that never rendered stays blank.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from hiss.reactive.outcome import Failed, Ok, Outcome, Pending, run_computation

if TYPE_CHECKING:
    from hiss.observability.collector import FeedbackCollector

type OutputKind = Literal["value", "blank", "message", "error"]


@dataclass(frozen=True, slots=True)
class RenderedOutput:
    """What an output currently displays.

    Attributes:
        kind: Which of the four display states applies.
        value: The formatted value (``kind == "value"``).
        message: Validation text or error message.
        severity: Validation severity ("" otherwise).
        error_type: Exception class name (``kind == "error"``).

    """

    kind: OutputKind
    value: Any = None
    message: str = ""
    severity: str = ""
    error_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "value": self.value,
            "message": self.message,
            "severity": self.severity,
            "error_type": self.error_type,
        }


BLANK = RenderedOutput(kind="blank")


class OutputSlot:
    """A named output that renders the outcome of one computation unit.

    Args:
        name: Output id (e.g. the DOM id it is rendered into).
        formatter: Turns a value into display form.  It runs as part of the
            render, so it may itself call ``guard()`` or ``validate()``.
        collector: Receives errors (and, when tracing, signals) raised by
            the formatter.  Outcomes passed in were reported upstream.
        session_id: Owning session, for event records.

    """

    __slots__ = ("_collector", "_formatter", "_session_id", "last", "name")

    def __init__(
        self,
        name: str,
        formatter: Callable[[Any], Any] | None = None,
        *,
        collector: FeedbackCollector | None = None,
        session_id: str = "",
    ) -> None:
        self.name = name
        self._formatter = formatter
        self._collector = collector
        self._session_id = session_id
        self.last: RenderedOutput = BLANK

    def render(self, outcome: Outcome) -> RenderedOutput:
        """Render ``outcome`` and remember the result."""
        if isinstance(outcome, Ok) and self._formatter is not None:
            outcome = run_computation(self._formatter, outcome.value, unit=self.name)
            self._report(outcome)
        self.last = self._display(outcome)
        return self.last

    def _display(self, outcome: Outcome) -> RenderedOutput:
        if isinstance(outcome, Ok):
            return RenderedOutput(kind="value", value=outcome.value)
        if isinstance(outcome, Pending):
            if outcome.is_validation:
                return RenderedOutput(
                    kind="message",
                    message=str(outcome.message),
                    severity=getattr(outcome.signal, "severity", "danger"),
                )
            return self.last if outcome.cancel_output else BLANK
        if isinstance(outcome, Failed):
            return RenderedOutput(
                kind="error",
                message=str(outcome.error),
                error_type=type(outcome.error).__qualname__,
            )
        msg = f"Unknown outcome: {outcome!r}"
        raise TypeError(msg)

    def __repr__(self) -> str:
        return f"OutputSlot({self.name!r}, last={self.last.kind})"

    def _report(self, outcome: Outcome) -> None:
        if self._collector is None:
            return
        if isinstance(outcome, Pending):
            self._collector.record_signal(self.name, outcome.signal, session_id=self._session_id)
        elif isinstance(outcome, Failed):
            self._collector.record_failure(self.name, outcome.error, session_id=self._session_id)
