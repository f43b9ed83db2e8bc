"""Tests for hiss.reactive.outputs — what an output shows for each outcome."""

from __future__ import annotations

import pytest

from hiss.observability import ComputationFailed, EventLog, FeedbackCollector, SignalRaised
from hiss.reactive.graph import ComputationGraph
from hiss.reactive.outcome import Failed, Ok, Pending
from hiss.reactive.outputs import BLANK, OutputSlot, RenderedOutput
from hiss.signals import GuardSignal, ValidationSignal, guard, validate


class TestOutputSlot:
    """render() maps outcomes to display states."""

    def test_initially_blank(self) -> None:
        assert OutputSlot("out").last is BLANK

    def test_value(self) -> None:
        slot = OutputSlot("out")
        assert slot.render(Ok(42)) == RenderedOutput(kind="value", value=42)

    def test_formatter(self) -> None:
        slot = OutputSlot("out", formatter=lambda v: f"{v:.3f}")
        assert slot.render(Ok(1.5)).value == "1.500"

    def test_guard_blanks(self) -> None:
        slot = OutputSlot("out")
        slot.render(Ok("old"))
        assert slot.render(Pending(GuardSignal())) is BLANK

    def test_guard_cancel_output_keeps_last(self) -> None:
        slot = OutputSlot("out")
        previous = slot.render(Ok("old"))
        assert slot.render(Pending(GuardSignal(cancel_output=True))) is previous

    def test_cancel_output_without_previous_render(self) -> None:
        slot = OutputSlot("out")
        assert slot.render(Pending(GuardSignal(cancel_output=True))) is BLANK

    def test_validation_message(self) -> None:
        slot = OutputSlot("out")
        signal = ValidationSignal("Please choose a file", severity="warning")
        rendered = slot.render(Pending(signal))
        assert rendered.kind == "message"
        assert rendered.message == "Please choose a file"
        assert rendered.severity == "warning"

    def test_failure(self) -> None:
        slot = OutputSlot("out")
        rendered = slot.render(Failed(KeyError("col")))
        assert rendered.kind == "error"
        assert rendered.error_type == "KeyError"
        assert "col" in rendered.message

    def test_formatter_may_guard(self) -> None:
        slot = OutputSlot("out", formatter=lambda v: guard(v))
        assert slot.render(Ok("")) is BLANK

    def test_formatter_may_validate(self) -> None:
        def fmt(v: int) -> str:
            if v > 100:
                validate("too large to plot")
            return str(v)

        slot = OutputSlot("out", formatter=fmt)
        assert slot.render(Ok(500)).message == "too large to plot"

    def test_formatter_error(self) -> None:
        slot = OutputSlot("out", formatter=lambda v: v["missing"])
        assert slot.render(Ok({})).kind == "error"

    def test_unknown_outcome(self) -> None:
        with pytest.raises(TypeError, match="Unknown outcome"):
            OutputSlot("out").render("nope")  # type: ignore[arg-type]

    def test_to_dict(self) -> None:
        assert BLANK.to_dict() == {
            "kind": "blank",
            "value": None,
            "message": "",
            "severity": "",
            "error_type": "",
        }


class TestFormatterReporting:
    """Formatter errors reach the collector; incoming outcomes are not re-reported."""

    def test_formatter_error_recorded(self, collector: FeedbackCollector) -> None:
        slot = OutputSlot(
            "out", formatter=lambda v: v["missing"], collector=collector, session_id="s1"
        )
        slot.render(Ok({}))

        (event,) = collector.log.query(event_type=ComputationFailed)
        assert (event.unit, event.error_type, event.session_id) == ("out", "KeyError", "s1")

    def test_formatter_signals_are_not_failures(self, collector: FeedbackCollector) -> None:
        slot = OutputSlot("out", formatter=lambda v: validate("too large"), collector=collector)
        slot.render(Ok(1))
        slot.render(Ok(2))
        assert collector.log.query(event_type=ComputationFailed) == []

    def test_formatter_signal_traced(self) -> None:
        collector = FeedbackCollector(EventLog(), verbose=False, trace_signals=True)
        slot = OutputSlot("out", formatter=lambda v: guard(v), collector=collector)
        slot.render(Ok(""))

        (event,) = collector.log.query()
        assert isinstance(event, SignalRaised)
        assert event.unit == "out"

    def test_incoming_failure_not_recorded(self, collector: FeedbackCollector) -> None:
        slot = OutputSlot("out", formatter=str, collector=collector)
        assert slot.render(Failed(KeyError("col"), unit="data")).kind == "error"
        assert len(collector.log) == 0


class TestCancelOutputDownstream:
    """cancel_output travels with the signal through the graph."""

    def test_downstream_slot_keeps_last(self) -> None:
        inputs = {"n": 3}
        graph = ComputationGraph()
        graph.add("n", lambda: guard(inputs["n"] % 2 == 1, cancel_output=True) and inputs["n"])
        graph.add("double", lambda n: n * 2, depends_on=["n"])
        slot = OutputSlot("double")

        assert slot.render(graph.evaluate("double")).value == 6

        inputs["n"] = 4
        graph.invalidate("n")
        assert slot.render(graph.evaluate("double")).value == 6
