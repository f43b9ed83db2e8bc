"""Tests for hiss.signals — guard, validate, need and the truthiness policy."""

from __future__ import annotations

import pytest

from hiss._errors import HissError
from hiss.signals import (
    ActionValue,
    GuardSignal,
    Signal,
    ValidationSignal,
    guard,
    is_signal,
    is_truthy,
    need,
    validate,
)


class TestIsTruthy:
    """The coercion policy deciding whether an input is ready."""

    @pytest.mark.parametrize(
        "value",
        [None, False, "", b"", [], (), {}, set(), [None], [False, None], ActionValue(0)],
    )
    def test_not_ready(self, value: object) -> None:
        assert is_truthy(value) is False

    @pytest.mark.parametrize(
        "value",
        [0, 0.0, "0", "False", True, 1, -1, [0], [None, 1], {"a": 1}, ActionValue(3), object()],
    )
    def test_ready(self, value: object) -> None:
        assert is_truthy(value) is True


class TestGuard:
    """Tests for guard()."""

    def test_passes_when_all_ready(self) -> None:
        assert guard("English", "Hadley") == "English"

    def test_returns_none_without_conditions(self) -> None:
        assert guard() is None

    def test_zero_is_ready(self) -> None:
        assert guard(0) == 0

    def test_raises_on_empty_string(self) -> None:
        with pytest.raises(GuardSignal):
            guard("", "Hadley")

    def test_short_circuits(self) -> None:
        calls: list[str] = []

        def later() -> str:
            calls.append("later")
            return "x"

        with pytest.raises(GuardSignal):
            guard(None, later)
        assert calls == []

    def test_callables_evaluated_in_order(self) -> None:
        calls: list[int] = []

        def make(i: int, value: object):
            def check() -> object:
                calls.append(i)
                return value
            return check

        with pytest.raises(GuardSignal):
            guard(make(1, "a"), make(2, ""), make(3, "c"))
        assert calls == [1, 2]

    def test_cancel_output_flag(self) -> None:
        with pytest.raises(GuardSignal) as info:
            guard(False, cancel_output=True)
        assert info.value.cancel_output is True

    def test_default_does_not_cancel_output(self) -> None:
        with pytest.raises(GuardSignal) as info:
            guard([])
        assert info.value.cancel_output is False

    def test_unpressed_button_not_ready(self) -> None:
        with pytest.raises(GuardSignal):
            guard(ActionValue(0))
        assert guard(ActionValue(1)) == 1

    def test_dependent_code_does_not_run(self) -> None:
        ran = False

        def computation(value: str) -> str:
            nonlocal ran
            guard(value)
            ran = True
            return value

        with pytest.raises(GuardSignal):
            computation("")
        assert ran is False


class TestValidate:
    """Tests for validate() and need()."""

    def test_validate_always_raises(self) -> None:
        with pytest.raises(ValidationSignal) as info:
            validate("x can not be negative")
        assert info.value.message == "x can not be negative"
        assert info.value.severity == "danger"

    def test_validate_severity(self) -> None:
        with pytest.raises(ValidationSignal) as info:
            validate("careful", severity="warning")
        assert info.value.severity == "warning"

    def test_validate_structured_message(self) -> None:
        content = {"title": "Oops"}
        with pytest.raises(ValidationSignal) as info:
            validate(content)
        assert info.value.message is content

    def test_need_passes(self) -> None:
        assert need("data.csv", "Please choose a file") is None

    def test_need_raises_validation_with_message(self) -> None:
        with pytest.raises(ValidationSignal, match="Please choose a file"):
            need(None, "Please choose a file")

    def test_need_without_message_is_silent(self) -> None:
        with pytest.raises(GuardSignal):
            need("")


class TestSignalTaxonomy:
    """Signals are control flow, not errors."""

    def test_signals_are_exceptions(self) -> None:
        assert issubclass(GuardSignal, Signal)
        assert issubclass(ValidationSignal, Signal)
        assert issubclass(Signal, Exception)

    def test_signals_are_not_hiss_errors(self) -> None:
        assert not issubclass(Signal, HissError)

    def test_is_signal(self) -> None:
        assert is_signal(GuardSignal())
        assert is_signal(ValidationSignal("m"))
        assert not is_signal(ValueError("boom"))

    def test_finally_runs_on_signal(self) -> None:
        cleaned = []
        with pytest.raises(GuardSignal):
            try:
                guard(None)
            finally:
                cleaned.append(True)
        assert cleaned == [True]
