"""Tests for hiss._errors."""

from hiss._errors import ComputationError, ConfigError, HissError, UsageError
from hiss.signals import GuardSignal, ValidationSignal


class TestErrorHierarchy:
    """All hiss errors inherit from HissError; signals do not."""

    def test_hiss_error_is_exception(self) -> None:
        assert issubclass(HissError, Exception)

    def test_config_error_inherits(self) -> None:
        assert issubclass(ConfigError, HissError)

    def test_usage_error_inherits(self) -> None:
        assert issubclass(UsageError, HissError)

    def test_computation_error_inherits(self) -> None:
        assert issubclass(ComputationError, HissError)

    def test_computation_error_unit(self) -> None:
        err = ComputationError("total", "ZeroDivisionError: division by zero")
        assert err.unit == "total"
        assert str(err) == "ZeroDivisionError: division by zero"

    def test_catch_all_hiss_errors(self) -> None:
        """All specific errors are catchable via HissError."""
        for error_cls in (ConfigError, UsageError):
            try:
                raise error_cls("test")
            except HissError:
                pass  # Expected — all caught by base class

    def test_signals_escape_hiss_error_handlers(self) -> None:
        for signal in (GuardSignal(), ValidationSignal("m")):
            try:
                try:
                    raise signal
                except HissError:
                    raise AssertionError("signal caught as HissError") from None
            except (GuardSignal, ValidationSignal):
                pass
