"""Hiss — reactive feedback signaling for Chirp applications.

Lets computations tell users what is going on: halt quietly when inputs
are not ready, replace an output with a validation message, annotate form
fields, report progress, show notifications and open modal dialogs.

Quick start::

    from hiss import guard, validate

    def greeting(language, name):
        guard(language, name)          # nothing rendered until both are set
        return f"{GREETINGS[language]} {name}!"

    def log_of(x):
        if x < 0:
            validate("x can not be negative")
        return math.log(x)

Per-session side channels::

    session = layer.session(session_id)
    with session.progress.scope("Crunching numbers") as bar:
        ...
    session.notifications.notify("Saved", type="message")

Wire into a Chirp app::

    import hiss

    layer = hiss.install(app)

"""

from typing import TYPE_CHECKING

from hiss.signals import (
    GuardSignal,
    Signal,
    ValidationSignal,
    guard,
    is_signal,
    is_truthy,
    need,
    validate,
)

if TYPE_CHECKING:
    from hiss.app import FeedbackLayer, install
    from hiss.config import HissConfig
    from hiss.session import FeedbackSession, SessionRegistry

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "FeedbackLayer",
    "FeedbackSession",
    "GuardSignal",
    "HissConfig",
    "SessionRegistry",
    "Signal",
    "ValidationSignal",
    "__version__",
    "guard",
    "install",
    "is_signal",
    "is_truthy",
    "need",
    "validate",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the heavier parts of the public API.

    Keeps ``import hiss`` cheap for code that only raises signals.
    """
    if name == "HissConfig":
        from hiss.config import HissConfig

        return HissConfig

    if name in ("FeedbackSession", "SessionRegistry"):
        from hiss import session

        return getattr(session, name)

    if name in ("FeedbackLayer", "install"):
        from hiss import app

        return getattr(app, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
