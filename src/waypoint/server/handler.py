"""ASGI handler — translates ASGI scope/messages to waypoint types.

The only component that touches raw ASGI directly. Converts the scope
to a Request, awaits ``Router.route()``, and sends the response back
through ASGI ``send()``. Connection handling, TLS and timeouts stay
with the hosting server.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from waypoint._internal.asgi import Receive, Scope, Send
from waypoint.http.request import Request
from waypoint.server.sender import send_any

if TYPE_CHECKING:
    from waypoint.routing.router import Router

logger = logging.getLogger("waypoint.server")


async def handle_asgi(router: Router, scope: Scope, receive: Receive, send: Send) -> None:
    """Serve one ASGI connection scope with *router*."""
    if scope["type"] == "lifespan":
        await handle_lifespan(receive, send)
        return

    if scope["type"] != "http":
        logger.debug("Ignoring unsupported ASGI scope type %r", scope["type"])
        return

    await handle_request(router, scope, receive, send)


async def handle_request(router: Router, scope: Scope, receive: Receive, send: Send) -> None:
    """Process a single HTTP request."""
    request = Request.from_asgi(scope, receive)
    response = await router.route(request)
    await send_any(response, send)


async def handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge the ASGI lifespan protocol.

    The router has nothing to start or stop; registration is expected to
    be complete before the server starts accepting connections.
    """
    while True:
        message = await receive()
        msg_type = message["type"]

        if msg_type == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif msg_type == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
