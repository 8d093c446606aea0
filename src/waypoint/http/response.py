"""HTTP response values with chainable .with_*() transformations.

Each transformation returns a new response. Handlers build one and
return it; the router and the ASGI layer only read them.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator, Mapping
from dataclasses import dataclass, replace
from typing import TypeAlias


def _find_header(headers: tuple[tuple[str, str], ...], name: str) -> str | None:
    name_lower = name.lower()
    for key, value in headers:
        if key.lower() == name_lower:
            return value
    return None


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response with a fully materialized body.

    No ``content-type`` is implied: set one with ``with_header`` or
    ``with_content_type`` when the body needs it.
    """

    body: str | bytes = b""
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a ``content-type`` header."""
        return self.with_header("content-type", content_type)

    # -- Accessors --

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or None."""
        return _find_header(self.headers, name)

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    async def read(self) -> bytes:
        """Body as bytes. Mirrors ``StreamingResponse.read()``."""
        return self.body_bytes


@dataclass(frozen=True, slots=True)
class StreamingResponse:
    """A response whose body is produced progressively.

    The ASGI layer sends headers first, then one body message per chunk.
    ``chunks`` is consumed once; if it has an ``aclose()`` coroutine it
    is called when sending stops, so resources held by the producer
    (open files) are released even when the client disconnects.
    """

    chunks: AsyncIterator[bytes] | Iterator[bytes]
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> StreamingResponse:
        """Return a new StreamingResponse with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> StreamingResponse:
        """Return a new StreamingResponse with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> StreamingResponse:
        """Return a new StreamingResponse with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or None."""
        return _find_header(self.headers, name)

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield the body chunks, closing the producer afterwards."""
        try:
            if isinstance(self.chunks, AsyncIterator):
                async for chunk in self.chunks:
                    if chunk:
                        yield chunk
            else:
                for chunk in self.chunks:
                    if chunk:
                        yield chunk
        finally:
            aclose = getattr(self.chunks, "aclose", None)
            if aclose is not None:
                await aclose()

    async def read(self) -> bytes:
        """Consume the whole stream and return the body bytes."""
        return b"".join([chunk async for chunk in self.iter_bytes()])


AnyResponse: TypeAlias = Response | StreamingResponse
