"""Waypoint exception hierarchy.

Registration errors surface to the caller; handler failures are
confined to the dispatch routine and never leave ``Router.route``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from waypoint.routing.route import Route


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class InvalidArgument(WaypointError, ValueError):  # noqa: N818 — mirrors the registration contract
    """Raised when a route is registered with an unusable pattern.

    Raised synchronously by ``Router.add()`` and friends, before any
    mutation of the registry.
    """


class PatternError(InvalidArgument):
    """A path pattern string is syntactically malformed.

    Examples: a ``:`` with no capture name, or the same capture name
    used twice in one pattern.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


class HandlerError(WaypointError):
    """A matched handler raised or returned an unusable value.

    Internal to dispatch. The original exception is chained as
    ``__cause__``.
    """

    def __init__(self, route: Route) -> None:
        self.route = route
        super().__init__(f"Handler for {route.pattern!r} failed")
