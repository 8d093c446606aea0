"""Immutable HTTP request.

Frozen metadata with async body access. The request is received data
that doesn't change; only the body cache fills in lazily.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote, urlsplit

from waypoint._internal.asgi import Message, Receive, Scope
from waypoint.http.headers import Headers

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``url`` is always absolute (``scheme://host/path?query``); routing
    matches against its path component. The body is read through
    ``.body()``, ``.text()``, ``.json()`` or ``.stream()``.
    """

    method: str
    url: str
    headers: Headers

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(repr=False, compare=False)

    # Private: mutable cache for the body bytes
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def path(self) -> str:
        """The URL path component, still percent-encoded."""
        return urlsplit(self.url).path or "/"

    @property
    def query_string(self) -> str:
        """The raw query string, without the leading ``?``."""
        return urlsplit(self.url).query

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        The receive channel is consumed once; later calls return the
        cached bytes.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes, None]:
        """Stream the request body in chunks as the server delivers them."""
        while True:
            message = await self._receive()
            if message.get("type") == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as UTF-8 text."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    # -- Factories --

    @classmethod
    def build(
        cls,
        url: str,
        *,
        method: str = "GET",
        body: bytes | str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Request:
        """Create a request directly, without a server.

        Useful for calling ``Router.route()`` from tests or from another
        host loop::

            request = Request.build("http://localhost/items/42")
            response = await router.route(request)
        """
        payload = body.encode("utf-8") if isinstance(body, str) else (body or b"")
        sent = False

        async def receive() -> Message:
            nonlocal sent
            if sent:
                return {"type": "http.disconnect"}
            sent = True
            return {"type": "http.request", "body": payload, "more_body": False}

        return cls(
            method=method.upper(),
            url=url,
            headers=Headers.from_pairs(headers or {}),
            _receive=receive,
        )

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable."""
        headers = Headers(tuple(scope.get("headers", ())))
        return cls(
            method=scope["method"],
            url=_absolute_url(scope, headers),
            headers=headers,
            _receive=receive,
        )


def _absolute_url(scope: Scope, headers: Headers) -> str:
    """Reconstruct the absolute request URL from an ASGI scope."""
    scheme = scope.get("scheme", "http")
    host = headers.get("host")
    if host is None:
        server = scope.get("server")
        if server:
            name, port = server[0], server[1]
            host = name if port in (None, _DEFAULT_PORTS.get(scheme)) else f"{name}:{port}"
        else:
            host = "localhost"

    raw_path = scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1")
    else:
        path = quote(scope.get("root_path", "") + scope["path"], safe="/:@!$&'()*+,;=-._~%")

    url = f"{scheme}://{host}{path}"
    query = scope.get("query_string", b"")
    if query:
        url = f"{url}?{query.decode('latin-1')}"
    return url
