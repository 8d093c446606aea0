"""Ordered, per-method router.

Each supported method owns a list of routes searched in registration
order. The first route whose pattern matches the request path handles
the request; a failing handler is logged and the search goes on.
"""

import inspect
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import overload

from waypoint._internal.asgi import Receive, Scope, Send
from waypoint.config import RouterConfig
from waypoint.errors import HandlerError, InvalidArgument
from waypoint.http.request import Request
from waypoint.http.response import AnyResponse, Response, StreamingResponse
from waypoint.routing.route import Handler, Method, RequestContext, Route
from waypoint.routing.static import make_static_handler
from waypoint.server.handler import handle_asgi

logger = logging.getLogger("waypoint.router")


class Router:
    """Dispatch requests to handlers by method and path pattern.

    Usage::

        router = Router()

        @router.get("/items/:id")
        def item(context):
            return Response(f"item {context.params['id']}")

        router.static()  # GET /static/:path* -> ./static

        response = await router.route(request)

    A router is also an ASGI application, so any ASGI server can host it.
    Finish registration before serving: the registry is not locked.

    Dispatch status rules, in registration order:

    - the method has no routes at all: 405
    - a route matches and its handler succeeds: that response
    - a route matches and its handler fails: logged, status becomes 500,
      and the search continues
    - a route doesn't match: status becomes 404, and the search continues

    When the search ends without a response, an empty response carrying
    the last status is returned. So a failing handler only yields 500
    when no route tested after it changes the status. Pass
    ``first_match_wins=True`` to return the 500 immediately instead.
    """

    __slots__ = ("_config", "_first_match_wins", "_routes")

    def __init__(
        self,
        config: RouterConfig | None = None,
        *,
        first_match_wins: bool | None = None,
    ) -> None:
        self._config = config or RouterConfig()
        self._first_match_wins = (
            self._config.first_match_wins if first_match_wins is None else first_match_wins
        )
        self._routes: dict[Method, list[Route]] = {method: [] for method in Method}

    @property
    def config(self) -> RouterConfig:
        return self._config

    # -- Registration --

    def add(self, method: str, pattern: str, handler: Handler) -> None:
        """Register *handler* for *method* requests matching *pattern*.

        Raises ``InvalidArgument`` if *pattern* is not a non-empty string
        (or is malformed), leaving the registry untouched. Registering
        the same pattern twice replaces the handler in place. Methods
        other than GET and POST are accepted and discarded.
        """
        if not isinstance(pattern, str) or pattern == "":
            msg = "Invalid pathname"
            raise InvalidArgument(msg)

        route = Route.create(pattern, handler)

        try:
            key = Method(method)
        except ValueError:
            logger.debug("Discarding route for unsupported method %r: %s", method, pattern)
            return

        routes = self._routes[key]
        for index, existing in enumerate(routes):
            if existing.pattern == pattern:
                routes[index] = route
                return
        routes.append(route)

    @overload
    def get(self, pattern: str) -> Callable[[Handler], Handler]: ...
    @overload
    def get(self, pattern: str, handler: Handler) -> None: ...

    def get(self, pattern: str, handler: Handler | None = None) -> Callable[[Handler], Handler] | None:
        """Register a GET handler, directly or as a decorator."""
        return self._register(Method.GET, pattern, handler)

    @overload
    def post(self, pattern: str) -> Callable[[Handler], Handler]: ...
    @overload
    def post(self, pattern: str, handler: Handler) -> None: ...

    def post(self, pattern: str, handler: Handler | None = None) -> Callable[[Handler], Handler] | None:
        """Register a POST handler, directly or as a decorator."""
        return self._register(Method.POST, pattern, handler)

    def _register(
        self,
        method: Method,
        pattern: str,
        handler: Handler | None,
    ) -> Callable[[Handler], Handler] | None:
        if handler is not None:
            self.add(method, pattern, handler)
            return None

        def decorator(func: Handler) -> Handler:
            self.add(method, pattern, func)
            return func

        return decorator

    def static(
        self,
        pathname: str | None = None,
        directory: str | Path | None = None,
        *,
        content_types: Mapping[str, str] | None = None,
    ) -> None:
        """Serve files from *directory* under ``{pathname}/:path*``.

        Defaults come from the config (``/static`` and ``static``)::

            router.static()                     # /static/app.js -> ./static/app.js
            router.static("/assets", "public")  # /assets/a.css -> ./public/a.css

        Missing or unreadable files answer 404 ``Not Found``.
        """
        pathname = self._config.static_url if pathname is None else pathname
        directory = self._config.static_dir if directory is None else directory
        handler = make_static_handler(
            directory,
            content_types={**self._config.content_types, **(content_types or {})},
            chunk_size=self._config.chunk_size,
        )
        self.add(Method.GET, f"{pathname}/:path*", handler)

    def routes(self, method: str) -> tuple[Route, ...]:
        """Snapshot of the routes registered for *method*, in search order."""
        try:
            return tuple(self._routes[Method(method)])
        except ValueError:
            return ()

    # -- Dispatch --

    async def route(self, request: Request) -> AnyResponse:
        """Dispatch *request* and return a response. Never raises for handler failures."""
        status = 405

        try:
            method = Method(request.method)
        except ValueError:
            logger.debug("%d %s %s", status, request.method, request.url)
            return Response(status=status)

        for route in tuple(self._routes[method]):
            params = route.compiled.exec(request.url)
            if params is None:
                status = 404
                continue

            try:
                return await _invoke_handler(route, RequestContext(request=request, params=params))
            except HandlerError:
                logger.exception("%s %s: handler for %r failed", method, request.url, route.pattern)
                status = 500
                if self._first_match_wins:
                    break

        logger.debug("%d %s %s", status, request.method, request.url)
        return Response(status=status)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        await handle_asgi(self, scope, receive, send)


async def _invoke_handler(route: Route, context: RequestContext) -> AnyResponse:
    """Call the route's handler, sync or async; any failure becomes ``HandlerError``."""
    try:
        result = route.handler(context)
        if inspect.isawaitable(result):
            result = await result
    except Exception as exc:
        raise HandlerError(route) from exc

    if not isinstance(result, Response | StreamingResponse):
        msg = f"Handler returned {type(result).__name__}, expected a Response"
        raise HandlerError(route) from TypeError(msg)
    return result
