"""Method, Route and RequestContext value types."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeAlias

from waypoint.http.request import Request
from waypoint.http.response import AnyResponse
from waypoint.routing.pattern import PathPattern


class Method(StrEnum):
    """HTTP methods the router dispatches."""

    GET = "GET"
    POST = "POST"


@dataclass(frozen=True, slots=True)
class RequestContext:
    """What a handler receives: the request and the captured params.

    ``params`` maps capture names to matched substrings. Optional and
    zero-segment captures that matched nothing map to ``None``.
    """

    request: Request
    params: dict[str, str | None] = field(default_factory=dict)


Handler: TypeAlias = Callable[[RequestContext], AnyResponse | Awaitable[AnyResponse]]


@dataclass(frozen=True, slots=True)
class Route:
    """A registered (pattern, handler) pair.

    The pattern is compiled once, at registration time.
    """

    pattern: str
    handler: Handler
    compiled: PathPattern = field(repr=False, compare=False)

    @classmethod
    def create(cls, pattern: str, handler: Handler) -> Route:
        return cls(pattern=pattern, handler=handler, compiled=PathPattern(pattern))
