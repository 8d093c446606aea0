"""Waypoint — a small asynchronous HTTP router.

Dispatches requests to handlers by method and URL path pattern, in
registration order, with fixed fallback statuses (404, 405, 500).

Basic usage::

    from waypoint import Response, Router

    router = Router()

    @router.get("/items/:id")
    def item(context):
        return Response(f"item {context.params['id']}")

    router.static()  # GET /static/:path* -> ./static

A router is an ASGI application; hand it to any ASGI server.
"""

__version__ = "0.1.0"
__all__ = [
    "HandlerError",
    "InvalidArgument",
    "Method",
    "PathPattern",
    "PatternError",
    "Request",
    "RequestContext",
    "Response",
    "Route",
    "Router",
    "RouterConfig",
    "StreamingResponse",
    "WaypointError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import waypoint`` cheap while providing a flat namespace.
    """
    if name == "Router":
        from waypoint.routing.router import Router

        return Router

    if name == "RouterConfig":
        from waypoint.config import RouterConfig

        return RouterConfig

    if name == "Request":
        from waypoint.http.request import Request

        return Request

    if name in ("Response", "StreamingResponse"):
        from waypoint.http import response as _resp

        return getattr(_resp, name)

    if name in ("Method", "RequestContext", "Route"):
        from waypoint.routing import route as _route

        return getattr(_route, name)

    if name == "PathPattern":
        from waypoint.routing.pattern import PathPattern

        return PathPattern

    if name in ("HandlerError", "InvalidArgument", "PatternError", "WaypointError"):
        from waypoint import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
