"""Chirp middleware — turns signals and errors raised by route handlers into responses.

===================  =====================================================
Handler raised       Response
===================  =====================================================
GuardSignal          200, empty body (the target element renders nothing)
GuardSignal with     204, no content (htmx-style clients keep the element
``cancel_output``    as it was)
ValidationSignal     200, an escaped ``<div role="alert">`` with the message
other Exception      500, an error page; recorded as a computation failure
===================  =====================================================

Signals never reach the collector's failure path.  ``format_error_event``
formats an exception for the ``hiss:error`` SSE event.
"""

from __future__ import annotations

import html
import json
import linecache
import traceback
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from hiss.signals import GuardSignal, Signal, ValidationSignal

if TYPE_CHECKING:
    from chirp.http.request import Request
    from chirp.http.response import Response, SSEResponse, StreamingResponse
    from chirp.middleware.protocol import Next

    from hiss.observability.collector import FeedbackCollector

    type AnyResponse = Response | StreamingResponse | SSEResponse

# (body, status, content_type) -> response object
type ResponseFactory = Callable[[str, int, str], Any]

_HTML = "text/html; charset=utf-8"

_ERROR_PAGE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{error_type}</title>
<style>
body{{margin:0;font-family:ui-monospace,Menlo,Consolas,monospace;background:#161616;color:#ddd}}
main{{max-width:820px;margin:2rem auto;padding:0 1.25rem}}
h1{{font-size:1rem;color:#e5534b;margin:0 0 .5rem}}
p.message{{color:#f1a7a2;margin:0 0 1.25rem;word-break:break-word}}
pre{{background:#1f1f1f;border:1px solid #333;padding:.75rem 1rem;overflow-x:auto}}
.hit{{background:#3b1614}}
</style>
</head>
<body>
<main>
<h1>{error_type}</h1>
<p class="message">{error_message}</p>
{details}
</main>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def render_signal(signal: Signal) -> str:
    """HTML fragment shown in place of an output halted by ``signal``."""
    if isinstance(signal, ValidationSignal):
        severity = html.escape(str(signal.severity), quote=True)
        message = html.escape(str(signal.message))
        return f'<div class="hiss-validation hiss-{severity}" role="alert">{message}</div>'
    return ""


def _error_location(exc: BaseException) -> tuple[str, int]:
    """Filename and line of the innermost traceback frame."""
    tb = exc.__traceback__
    if tb is None:
        return "", 0
    while tb.tb_next is not None:
        tb = tb.tb_next
    return tb.tb_frame.f_code.co_filename, tb.tb_lineno


def _source_excerpt(filename: str, lineno: int, context: int = 4) -> str:
    if not filename or lineno <= 0:
        return ""
    rows: list[str] = []
    for i in range(max(1, lineno - context), lineno + context + 1):
        line = linecache.getline(filename, i)
        if not line and i > lineno:
            break
        text = f"{i:>5}  {html.escape(line.rstrip())}"
        rows.append(f'<span class="hit">{text}</span>' if i == lineno else text)
    if not rows:
        return ""
    return f"<p>{html.escape(filename)}:{lineno}</p><pre>" + "\n".join(rows) + "</pre>"


def render_error_page(exc: BaseException, *, debug: bool = True) -> str:
    """Full HTML error page.  Source and traceback are only shown in debug mode."""
    if not debug:
        return _ERROR_PAGE.format(
            error_type="Internal Server Error",
            error_message="Something went wrong while computing this page.",
            details="",
        )
    filename, lineno = _error_location(exc)
    trace = html.escape("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    details = (
        _source_excerpt(filename, lineno)
        + f"<details><summary>Stack trace</summary><pre>{trace}</pre></details>"
    )
    return _ERROR_PAGE.format(
        error_type=html.escape(type(exc).__qualname__),
        error_message=html.escape(str(exc)),
        details=details,
    )


def format_error_event(exc: BaseException) -> str:
    """JSON payload for a ``hiss:error`` SSE event."""
    filename, lineno = _error_location(exc)
    return json.dumps({
        "type": type(exc).__qualname__,
        "message": str(exc),
        "file": filename,
        "line": lineno,
    })


# ---------------------------------------------------------------------------
# Chirp middleware
# ---------------------------------------------------------------------------


def _chirp_response(body: str, status: int, content_type: str) -> Any:
    from chirp.http.response import Response

    return Response(body=body, status=status, content_type=content_type)


def make_signal_middleware(
    collector: FeedbackCollector | None = None,
    *,
    debug: bool = True,
    response_factory: ResponseFactory | None = None,
) -> Callable[[Request, Next], Any]:
    """Build the signal-handling middleware.

    Args:
        collector: Records genuine handler errors.
        debug: Show source and traceback on the error page.
        response_factory: Builds responses; defaults to Chirp's ``Response``.

    """
    respond = response_factory or _chirp_response

    async def signal_middleware(request: Request, next: Next) -> AnyResponse:
        try:
            return await next(request)
        except GuardSignal as signal:
            if signal.cancel_output:
                return respond("", 204, _HTML)
            return respond("", 200, _HTML)
        except ValidationSignal as signal:
            return respond(render_signal(signal), 200, _HTML)
        except Exception as exc:
            if collector is not None:
                unit = getattr(request, "path", "") or "request"
                collector.record_failure(str(unit), exc)
            return respond(render_error_page(exc, debug=debug), 500, _HTML)

    return signal_middleware


signal_middleware = make_signal_middleware()
