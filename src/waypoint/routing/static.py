"""Static file handler construction.

``Router.static()`` registers the handler built here under
``{pathname}/:path*``. The handler streams the file named by the
captured ``path`` from a root directory, or answers 404 ``Not Found``
when the file can't be opened. Open failures never escape the handler.

Security: the resolved file must stay inside the root directory.
``..`` segments, absolute paths and symlinks leading out of the root
are answered like a missing file.
"""

import logging
from collections.abc import AsyncIterator, Mapping
from pathlib import Path, PurePosixPath
from types import MappingProxyType
from urllib.parse import unquote

import anyio

from waypoint.http.response import AnyResponse, Response, StreamingResponse
from waypoint.routing.route import Handler, RequestContext

logger = logging.getLogger("waypoint.static")

# Extension (lower-case, with dot) -> media type. Unlisted extensions
# get no content-type header.
CONTENT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        ".js": "text/javascript",
        ".mjs": "text/javascript",
        ".css": "text/css",
        ".html": "text/html; charset=utf-8",
        ".htm": "text/html; charset=utf-8",
        ".json": "application/json",
        ".map": "application/json",
        ".txt": "text/plain; charset=utf-8",
        ".svg": "image/svg+xml",
        ".png": "image/png",
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".gif": "image/gif",
        ".webp": "image/webp",
        ".ico": "image/x-icon",
        ".wasm": "application/wasm",
        ".woff2": "font/woff2",
    }
)


def content_type_for(path: str, content_types: Mapping[str, str] = CONTENT_TYPES) -> str | None:
    """Media type for *path* by its extension, or None if unrecognized."""
    suffix = PurePosixPath(path).suffix.lower()
    if not suffix:
        return None
    return content_types.get(suffix)


def not_found() -> Response:
    """The static handler's local miss response."""
    return Response(body="Not Found", status=404)


async def _read_chunks(file: anyio.AsyncFile[bytes], chunk_size: int) -> AsyncIterator[bytes]:
    """Yield the file in chunks and close it when done or abandoned."""
    try:
        while chunk := await file.read(chunk_size):
            yield chunk
    finally:
        await file.aclose()


def make_static_handler(
    directory: str | Path,
    *,
    content_types: Mapping[str, str] | None = None,
    chunk_size: int = 64 * 1024,
) -> Handler:
    """Build a handler serving files below *directory*.

    *directory* is resolved against the working directory on every
    request. *content_types* extends or overrides ``CONTENT_TYPES``.
    """
    types = {**CONTENT_TYPES, **(content_types or {})}

    async def serve_static(context: RequestContext) -> AnyResponse:
        captured = context.params.get("path")
        if not captured:
            return not_found()

        relative = unquote(captured)
        try:
            root = await anyio.Path(directory).resolve()
            candidate = await (root / relative).resolve()
            if not candidate.is_relative_to(root):
                logger.debug("Rejected path outside %s: %r", root, relative)
                return not_found()
            file = await anyio.open_file(candidate, "rb")
        except (OSError, ValueError) as exc:  # ValueError: embedded NUL
            logger.debug("Static miss %r under %s: %s", relative, directory, exc)
            return not_found()

        response = StreamingResponse(chunks=_read_chunks(file, chunk_size))
        media_type = content_type_for(relative, types)
        if media_type is not None:
            response = response.with_header("content-type", media_type)
        return response

    return serve_static
