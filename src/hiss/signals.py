"""Guard and validation signals — control flow that is not failure.

A computation that cannot (yet) produce a value raises a ``Signal``.
Signals unwind like exceptions, so ``with`` blocks and ``finally`` clauses
run as usual, but the execution engine treats them as "no new value"
rather than as errors: they are never logged or reported as failures.

Two kinds exist:

- ``GuardSignal`` — silent.  Raised by ``guard()`` when an input is not
  ready yet (empty text box, unselected option, unpressed button).
  Outputs depending on the computation render nothing.
- ``ValidationSignal`` — carries a user-facing message.  Raised by
  ``validate()`` / ``need()``.  Outputs render the message in place of
  the value.

Quick start::

    from hiss.signals import guard, need, validate

    def greeting(language, name):
        guard(language, name)
        return f"{GREETINGS[language]} {name}!"

    def transformed(x, trans):
        if x < 0 and trans == "log":
            validate("x can not be negative")
        return apply(trans, x)

"""

from __future__ import annotations

from collections.abc import Callable, Sized
from typing import Any

from hiss._types import Severity

__all__ = [
    "ActionValue",
    "GuardSignal",
    "Signal",
    "ValidationSignal",
    "guard",
    "is_signal",
    "is_truthy",
    "need",
    "validate",
]


class Signal(Exception):  # noqa: N818
    """Base class for control-flow signals.

    Not a subclass of ``HissError``: ``except HissError`` never swallows a
    signal, and engines can filter signals with ``is_signal()``.
    """


class GuardSignal(Signal):
    """Raised when a precondition is unmet.  Carries no payload.

    Attributes:
        cancel_output: When True, consumers keep their last rendered
            output instead of blanking it.

    """

    def __init__(self, *, cancel_output: bool = False) -> None:
        super().__init__("guard")
        self.cancel_output = cancel_output


class ValidationSignal(Signal):
    """Raised to replace an output with a user-facing message.

    Attributes:
        message: Display content (usually a string).
        severity: Styling hint for the rendering layer.

    """

    def __init__(self, message: Any, *, severity: Severity = "danger") -> None:
        super().__init__(str(message))
        self.message = message
        self.severity = severity


class ActionValue(int):
    """Click counter of an action button.

    A button that has never been pressed (count 0) is not ready, unlike a
    plain integer 0.
    """

    __slots__ = ()


def is_signal(exc: BaseException) -> bool:
    """Return True if ``exc`` is control flow rather than a failure."""
    return isinstance(exc, Signal)


def is_truthy(value: Any) -> bool:
    """Decide whether a value counts as "ready".

    Not ready:

    - ``None`` and ``False``
    - empty strings and empty collections
    - sequences whose every element is ``None`` or ``False``
    - an ``ActionValue`` of 0 (button never pressed)

    Everything else is ready, including ``0``, ``0.0`` and ``"0"``.

    """
    if value is None or value is False:
        return False
    if isinstance(value, ActionValue):
        return value != 0
    if isinstance(value, str | bytes):
        return len(value) > 0
    if isinstance(value, list | tuple):
        if not value:
            return False
        return not all(item is None or item is False for item in value)
    if isinstance(value, Sized) and not _is_scalar(value):
        return len(value) > 0
    return True


def _is_scalar(value: Any) -> bool:
    # numpy scalars and similar report a size but are single values
    return getattr(value, "ndim", None) == 0


def guard(*conditions: Any, cancel_output: bool = False) -> Any:
    """Halt the current computation unless every condition is ready.

    Conditions are checked left to right and checking stops at the first
    one that is not ready.  A callable condition is only called when it is
    reached, so expensive checks can follow cheap ones.

    Args:
        *conditions: Values (or zero-argument callables) to check.
        cancel_output: Keep the consumer's previous output instead of
            blanking it.

    Returns:
        The first condition's value (after calling it, if callable), or
        ``None`` when no conditions were given.

    Raises:
        GuardSignal: If any condition is not ready.

    """
    first: Any = None
    for index, condition in enumerate(conditions):
        value = condition() if callable(condition) else condition
        if not is_truthy(value):
            raise GuardSignal(cancel_output=cancel_output)
        if index == 0:
            first = value
    return first


def validate(message: Any, *, severity: Severity = "danger") -> None:
    """Replace the current output with ``message``.

    Always raises; the caller decides whether to call it.

    Raises:
        ValidationSignal: Unconditionally.

    """
    raise ValidationSignal(message, severity=severity)


def need(condition: Any | Callable[[], Any], message: Any = None) -> None:
    """Validate that ``condition`` is ready.

    With a message, a failing condition raises ``ValidationSignal`` so the
    message is shown.  Without one it fails silently like ``guard()``.

    Raises:
        ValidationSignal: If the condition is not ready and a message is given.
        GuardSignal: If the condition is not ready and no message is given.

    """
    value = condition() if callable(condition) else condition
    if is_truthy(value):
        return
    if message is None:
        raise GuardSignal()
    validate(message)
