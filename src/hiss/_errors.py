"""Hiss error hierarchy.

All hiss-specific errors inherit from HissError for easy catching.
Signals (``hiss.signals``) are control flow, not errors, and deliberately
sit outside this hierarchy.
"""


class HissError(Exception):
    """Base error for all hiss operations."""


class ConfigError(HissError):
    """Invalid or missing configuration."""


class UsageError(HissError):
    """A feedback handle was used that was never opened in the session.

    Only raised when ``HissConfig.strict_handles`` is enabled; otherwise
    such calls are silent no-ops.
    """


class ComputationError(HissError):
    """A computation unit failed with a genuine error.

    The original exception is chained as ``__cause__``.

    Attributes:
        unit: Name of the computation unit that failed.

    """

    def __init__(self, unit: str, message: str) -> None:
        super().__init__(message)
        self.unit = unit
