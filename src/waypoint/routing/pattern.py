"""Path pattern compilation and matching.

Patterns use URL-pattern capture syntax::

    /users                 literal
    /users/:id             one segment, bound to "id"
    /users/:id?            optional segment ("id" is None when absent)
    /files/:path+          one or more segments, slash-joined
    /static/:path*         zero or more segments ("path" is None when empty)
    /assets/*              anything, bound to "0" (then "1", ...)

A ``/`` directly before a capture belongs to the capture, so
``/static/:path*`` matches ``/static`` as well as ``/static/a/b.js``.
Matching is anchored and case-sensitive, and trailing slashes count.
When matching a URL, ``.`` and ``..`` path segments are resolved first,
so ``/a/./b`` and ``/a/x/../b`` both match ``/a/b``.
Captured values are the raw path substrings (still percent-encoded).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from waypoint.errors import PatternError

_NAME = re.compile(r"[^\W\d]\w*")
_SEGMENT = r"[^/]+"
_SEGMENTS = r"[^/]+(?:/[^/]+)*"
_UNSUPPORTED = frozenset("(){}")
_SINGLE_DOT = frozenset({".", "%2e"})
_DOUBLE_DOT = frozenset({"..", ".%2e", "%2e.", "%2e%2e"})


@dataclass(frozen=True, slots=True)
class _Literal:
    text: str

    def regex(self) -> str:
        return re.escape(self.text)


@dataclass(frozen=True, slots=True)
class _Capture:
    name: str
    modifier: str  # "", "?", "+", "*", or "wildcard"
    prefix: str  # "/" when the capture owns the preceding slash

    def regex(self) -> str:
        prefix = re.escape(self.prefix)
        if self.modifier == "wildcard":
            return f"{prefix}(.*)"
        if self.modifier == "?":
            return f"(?:{prefix}({_SEGMENT}))?"
        if self.modifier == "+":
            return f"{prefix}({_SEGMENTS})"
        if self.modifier == "*":
            return f"(?:{prefix}({_SEGMENTS}))?"
        return f"{prefix}({_SEGMENT})"


def _tokenize(pattern: str) -> list[_Literal | _Capture]:
    """Split *pattern* into literal runs and captures."""
    tokens: list[_Literal | _Capture] = []
    literal: list[str] = []
    names: set[str] = set()
    wildcard_index = 0
    i = 0

    def take_prefix() -> str:
        if literal and literal[-1] == "/":
            literal.pop()
            return "/"
        return ""

    def flush() -> None:
        if literal:
            tokens.append(_Literal("".join(literal)))
            literal.clear()

    while i < len(pattern):
        char = pattern[i]

        if char == "\\":
            if i + 1 == len(pattern):
                raise PatternError(pattern, "trailing backslash")
            literal.append(pattern[i + 1])
            i += 2
            continue

        if char == ":":
            found = _NAME.match(pattern, i + 1)
            if found is None:
                raise PatternError(pattern, f"capture at position {i} has no name")
            name = found.group()
            if name in names:
                raise PatternError(pattern, f"duplicate capture name {name!r}")
            names.add(name)
            i = found.end()
            modifier = ""
            if i < len(pattern) and pattern[i] in "?+*":
                modifier = pattern[i]
                i += 1
            prefix = take_prefix()
            flush()
            tokens.append(_Capture(name=name, modifier=modifier, prefix=prefix))
            continue

        if char == "*":
            name = str(wildcard_index)
            wildcard_index += 1
            names.add(name)
            flush()
            tokens.append(_Capture(name=name, modifier="wildcard", prefix=""))
            i += 1
            continue

        if char in _UNSUPPORTED:
            raise PatternError(pattern, f"unsupported character {char!r} at position {i}")

        literal.append(char)
        i += 1

    flush()
    return tokens


class PathPattern:
    """A compiled path pattern.

    Usage::

        pattern = PathPattern("/items/:id")
        pattern.test("http://localhost/items/42")   # True
        pattern.exec("http://localhost/items/42")   # {"id": "42"}
        pattern.exec("/items")                      # None
    """

    __slots__ = ("_names", "_regex", "pattern")

    def __init__(self, pattern: str) -> None:
        tokens = _tokenize(pattern)
        self.pattern = pattern
        self._names = tuple(t.name for t in tokens if isinstance(t, _Capture))
        self._regex = re.compile("".join(t.regex() for t in tokens))

    def __repr__(self) -> str:
        return f"PathPattern({self.pattern!r})"

    @property
    def names(self) -> tuple[str, ...]:
        """Capture names, in pattern order."""
        return self._names

    def match(self, path: str) -> dict[str, str | None] | None:
        """Match a bare path. Returns captured params, or None."""
        found = self._regex.fullmatch(path)
        if found is None:
            return None
        return dict(zip(self._names, found.groups(), strict=True))

    def test(self, url: str) -> bool:
        """Whether the path component of *url* matches."""
        return self._regex.fullmatch(_path_of(url)) is not None

    def exec(self, url: str) -> dict[str, str | None] | None:
        """Match the path component of *url* and return its params."""
        return self.match(_path_of(url))


def _path_of(url: str) -> str:
    """Path component of *url* with dot segments removed."""
    if "://" in url:
        path = urlsplit(url).path or "/"
    else:
        path = url.split("?", 1)[0].split("#", 1)[0]
    return _remove_dot_segments(path)


def _remove_dot_segments(path: str) -> str:
    """Resolve ``.`` and ``..`` segments the way a URL parser does.

    ``/a/./b`` becomes ``/a/b`` and ``/a/b/..`` becomes ``/a/``. The
    percent-encoded forms (``%2e``) count as dots. ``..`` never climbs
    above the root.
    """
    if not path.startswith("/"):
        return path

    output: list[str] = []
    segments = path[1:].split("/")
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        lowered = segment.lower()
        if lowered in _SINGLE_DOT:
            if index == last:
                output.append("")
        elif lowered in _DOUBLE_DOT:
            if output:
                output.pop()
            if index == last:
                output.append("")
        else:
            output.append(segment)
    return "/" + "/".join(output)
