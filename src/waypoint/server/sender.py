"""ASGI response sending — translates waypoint responses to ASGI messages.

Handles both single-body responses and streamed bodies.
"""

import contextlib
import logging

from waypoint._internal.asgi import Send
from waypoint.http.response import AnyResponse, Response, StreamingResponse

logger = logging.getLogger("waypoint.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _raw_headers(headers: tuple[tuple[str, str], ...]) -> list[tuple[bytes, bytes]]:
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers]


async def send_response(response: Response, send: Send) -> None:
    """Send a materialized Response as one start and one body message."""
    raw_headers = _raw_headers(response.headers)
    body = response.body_bytes if _body_allowed(response.status) else b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send({"type": "http.response.body", "body": body})


async def send_streaming_response(response: StreamingResponse, send: Send) -> None:
    """Send headers immediately, then one body message per chunk.

    The producer is closed whether the stream ends, fails, or the
    server's ``send`` raises because the client went away. An I/O
    failure mid-stream is logged and the body is left unterminated, so
    the server drops the connection instead of presenting a truncated
    body as complete.
    """
    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": _raw_headers(response.headers),
        }
    )

    async with contextlib.aclosing(response.iter_bytes()) as chunks:
        try:
            async for chunk in chunks:
                await send({"type": "http.response.body", "body": chunk, "more_body": True})
        except OSError:
            logger.exception("Streaming response body failed")
            return

    await send({"type": "http.response.body", "body": b"", "more_body": False})


async def send_any(response: AnyResponse, send: Send) -> None:
    """Send either response kind."""
    if isinstance(response, StreamingResponse):
        await send_streaming_response(response, send)
    else:
        await send_response(response, send)
