"""Computation graph — named units, explicit dependencies, signal propagation.

Not a reactive framework: there is no automatic dependency tracking and no
scheduler.  It is the minimal engine needed to honour the signal contract:

- A unit whose dependency is ``Pending`` is not run and becomes
  ``Pending`` with the same signal.
- A unit whose dependency is ``Failed`` is not run and becomes ``Failed``
  with the same error; the error is reported once, where it originated.
- Signals are never reported as failures.

Units must be added after their dependencies, which keeps the graph
acyclic.  Outcomes are cached until ``invalidate()`` drops a unit and
everything downstream of it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from hiss._errors import ComputationError
from hiss.reactive.outcome import Failed, Ok, Outcome, Pending, run_computation

if TYPE_CHECKING:
    from hiss.observability.collector import FeedbackCollector


@dataclass(frozen=True, slots=True)
class _Unit:
    name: str
    fn: Callable[..., Any]
    depends_on: tuple[str, ...]


class ComputationGraph:
    """A DAG of computation units for one session.

    Args:
        collector: Receives failures (and, when tracing, signals).
        session_id: Owning session, for event records.

    """

    def __init__(self, *, collector: FeedbackCollector | None = None, session_id: str = "") -> None:
        self._units: dict[str, _Unit] = {}
        self._dependents: dict[str, set[str]] = {}
        self._outcomes: dict[str, Outcome] = {}
        self._collector = collector
        self._session_id = session_id

    def add(self, name: str, fn: Callable[..., Any], depends_on: Iterable[str] = ()) -> None:
        """Register a unit.

        ``fn`` is called with the values of ``depends_on`` as positional
        arguments, in the order given.

        Raises:
            ValueError: If ``name`` is taken or a dependency is unknown.

        """
        if name in self._units:
            msg = f"Computation unit {name!r} already exists"
            raise ValueError(msg)
        deps = tuple(depends_on)
        missing = [d for d in deps if d not in self._units]
        if missing:
            msg = f"Computation unit {name!r} depends on unknown unit(s): {', '.join(missing)}"
            raise ValueError(msg)

        self._units[name] = _Unit(name=name, fn=fn, depends_on=deps)
        self._dependents[name] = set()
        for dep in deps:
            self._dependents[dep].add(name)

    def evaluate(self, name: str) -> Outcome:
        """Return the outcome of ``name``, computing it (and its inputs) if needed."""
        cached = self._outcomes.get(name)
        if cached is not None:
            return cached

        unit = self._units[name]
        values: list[Any] = []
        outcome: Outcome | None = None
        for dep in unit.depends_on:
            dep_outcome = self.evaluate(dep)
            if isinstance(dep_outcome, Ok):
                values.append(dep_outcome.value)
                continue
            # First non-Ok dependency decides; the unit itself never runs.
            outcome = dep_outcome
            break

        if outcome is None:
            outcome = run_computation(unit.fn, *values, unit=name)
            origin = self._reported_origin(outcome)
            if origin is None:
                self._report(name, outcome)
            else:
                outcome = origin

        self._outcomes[name] = outcome
        return outcome

    def evaluate_all(self) -> dict[str, Outcome]:
        """Evaluate every unit, in registration order."""
        return {name: self.evaluate(name) for name in self._units}

    def value(self, name: str) -> Any:
        """Evaluate ``name`` and return its value, re-raising on failure.

        A pending unit re-raises its signal so that a caller which is
        itself a computation unit becomes pending too.  A failed unit
        raises ``ComputationError``; a calling unit then takes over the
        original failure without reporting it a second time.

        Raises:
            Signal: If the unit is pending.
            ComputationError: If the unit failed.

        """
        outcome = self.evaluate(name)
        if isinstance(outcome, Ok):
            return outcome.value
        if isinstance(outcome, Pending):
            raise outcome.signal
        raise outcome.to_error()

    def invalidate(self, name: str) -> set[str]:
        """Drop cached outcomes of ``name`` and everything downstream.

        Returns:
            Names of the invalidated units.

        """
        stale: set[str] = set()
        stack = [name]
        while stack:
            current = stack.pop()
            if current in stale:
                continue
            stale.add(current)
            self._outcomes.pop(current, None)
            stack.extend(self._dependents.get(current, ()))
        return stale

    def state(self, name: str) -> Outcome | None:
        """Cached outcome of ``name``, or None if not evaluated since invalidation."""
        return self._outcomes.get(name)

    def dependents(self, name: str) -> frozenset[str]:
        """Direct dependents of ``name``."""
        return frozenset(self._dependents.get(name, ()))

    def __contains__(self, name: object) -> bool:
        return name in self._units

    def __len__(self) -> int:
        return len(self._units)

    def _report(self, name: str, outcome: Outcome) -> None:
        if self._collector is None:
            return
        if isinstance(outcome, Pending):
            self._collector.record_signal(name, outcome.signal, session_id=self._session_id)
        elif isinstance(outcome, Failed):
            self._collector.record_failure(name, outcome.error, session_id=self._session_id)

    def _reported_origin(self, outcome: Outcome) -> Failed | None:
        """The cached failure behind a ``ComputationError`` raised by ``value()``."""
        if not isinstance(outcome, Failed) or not isinstance(outcome.error, ComputationError):
            return None
        origin = self._outcomes.get(outcome.error.unit)
        if isinstance(origin, Failed) and origin.error is outcome.error.__cause__:
            return origin
        return None
