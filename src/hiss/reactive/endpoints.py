"""Chirp endpoints — deliver session feedback state to the browser.

- ``GET {events_endpoint}?session=<id>`` — SSE stream.  The first event is
  ``hiss:snapshot`` with the full session state, followed by one
  ``hiss:<kind>`` event per change.  A session the stream had to create is
  discarded again when its last connection closes.
- ``GET {state_endpoint}?session=<id>`` — JSON snapshot (404 if unknown).
- ``POST {state_endpoint}/dismiss?session=<id>&id=<notification>`` — the
  user closed a notification.
- ``POST {state_endpoint}/resolve?session=<id>&action=<action>`` — the
  user chose a modal footer action.
"""

from __future__ import annotations

import asyncio
import json
import uuid
from typing import TYPE_CHECKING, Any

from hiss.reactive.broadcaster import FeedbackMessage, SSEConnection

if TYPE_CHECKING:
    from chirp import App
    from chirp.http.request import Request

    from hiss.reactive.broadcaster import Broadcaster
    from hiss.session import SessionRegistry


def _json_response(payload: dict[str, Any], status: int = 200) -> Any:
    from chirp.http.response import Response

    return Response(body=json.dumps(payload), status=status, content_type="application/json")


def _not_found(session_id: str) -> Any:
    return _json_response({"error": f"unknown session {session_id!r}"}, status=404)


def register_endpoints(app: App, registry: SessionRegistry, broadcaster: Broadcaster) -> None:
    """Register the SSE, snapshot, dismiss and resolve routes on ``app``."""
    from chirp import EventStream, SSEEvent

    config = registry.config
    # Sessions created by the stream handler; released with their last connection.
    opened: set[str] = set()

    async def events_handler(request: Request) -> Any:
        requested = request.query.get("session") or None
        session = registry.get(requested) if requested else None
        if session is None:
            session = registry.create(requested)
            opened.add(session.session_id)
        conn = SSEConnection(
            client_id=str(uuid.uuid4()),
            session_id=session.session_id,
            queue=asyncio.Queue(maxsize=config.queue_size),
            loop=asyncio.get_running_loop(),
        )
        broadcaster.subscribe(conn)
        conn.queue.put_nowait(
            FeedbackMessage(event="hiss:snapshot", data=json.dumps(session.snapshot(), default=str))
        )

        async def generate():  # type: ignore[return]
            try:
                async for message in broadcaster.client_generator(conn):
                    yield SSEEvent(data=message.data, event=message.event)
            finally:
                broadcaster.unsubscribe(conn)
                sid = conn.session_id
                if sid in opened and not broadcaster.get_subscribers(sid):
                    opened.discard(sid)
                    registry.discard(sid)

        return EventStream(generate())

    async def state_handler(request: Request) -> Any:
        session_id = request.query.get("session", "")
        session = registry.get(session_id)
        if session is None:
            return _not_found(session_id)
        return _json_response(session.snapshot())

    async def dismiss_handler(request: Request) -> Any:
        session_id = request.query.get("session", "")
        session = registry.get(session_id)
        if session is None:
            return _not_found(session_id)
        removed = session.notifications.dismiss(request.query.get("id", ""))
        return _json_response({"dismissed": removed})

    async def resolve_handler(request: Request) -> Any:
        session_id = request.query.get("session", "")
        session = registry.get(session_id)
        if session is None:
            return _not_found(session_id)
        try:
            action = session.modal.resolve(request.query.get("action", ""))
        except ValueError as exc:
            return _json_response({"error": str(exc)}, status=400)
        return _json_response({"resolved": action})

    events_handler.__name__ = "hiss_events"
    state_handler.__name__ = "hiss_state"
    dismiss_handler.__name__ = "hiss_dismiss"
    resolve_handler.__name__ = "hiss_resolve"

    app.route(config.events_endpoint, name="hiss:events")(events_handler)
    app.route(config.state_endpoint, name="hiss:state")(state_handler)
    app.route(
        f"{config.state_endpoint}/dismiss", methods=["POST"], name="hiss:dismiss"
    )(dismiss_handler)
    app.route(
        f"{config.state_endpoint}/resolve", methods=["POST"], name="hiss:resolve"
    )(resolve_handler)
