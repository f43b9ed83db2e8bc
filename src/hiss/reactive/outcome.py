"""Computation outcomes — signals and errors as values.

An engine calls ``run_computation()`` instead of calling a unit directly
and pattern-matches the result:

- ``Ok`` — the unit produced a value.
- ``Pending`` — the unit raised a guard or validation signal.  No new
  value, nothing to report.
- ``Failed`` — the unit raised a genuine error.

Only ``Exception`` subclasses are captured; ``KeyboardInterrupt``,
``SystemExit`` and task cancellation keep propagating.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from hiss._errors import ComputationError
from hiss.signals import GuardSignal, Signal, ValidationSignal


@dataclass(frozen=True, slots=True)
class Ok:
    """A value was produced."""

    value: Any


@dataclass(frozen=True, slots=True)
class Pending:
    """A signal halted the computation.

    Attributes:
        signal: The guard or validation signal, shared by every unit the
            pending state propagated to.

    """

    signal: Signal

    @property
    def is_validation(self) -> bool:
        return isinstance(self.signal, ValidationSignal)

    @property
    def cancel_output(self) -> bool:
        return isinstance(self.signal, GuardSignal) and self.signal.cancel_output

    @property
    def message(self) -> Any:
        """The validation message, or None for guards."""
        if isinstance(self.signal, ValidationSignal):
            return self.signal.message
        return None


@dataclass(frozen=True, slots=True)
class Failed:
    """A genuine error ended the computation.

    Attributes:
        error: The original exception.
        unit: Name of the unit the error originated in ("" if unknown).

    """

    error: Exception
    unit: str = ""

    def to_error(self) -> ComputationError:
        """Wrap the original exception for re-raising."""
        message = f"{type(self.error).__qualname__}: {self.error}"
        wrapped = ComputationError(self.unit, message)
        wrapped.__cause__ = self.error
        return wrapped


type Outcome = Ok | Pending | Failed


def run_computation(fn: Callable[..., Any], *args: Any, unit: str = "", **kwargs: Any) -> Outcome:
    """Invoke a computation unit and classify how it ended."""
    try:
        return Ok(fn(*args, **kwargs))
    except Signal as signal:
        return Pending(signal)
    except Exception as exc:
        return Failed(exc, unit=unit)
