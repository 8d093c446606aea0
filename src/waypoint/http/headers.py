"""Read-only request headers with case-insensitive lookup."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Request headers keyed by lower-cased name.

    Built from the raw ``(name, value)`` byte pairs of an ASGI scope.
    When a name repeats, the first value wins.
    """

    __slots__ = ("_values",)

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        values: dict[str, str] = {}
        for name, value in raw:
            values.setdefault(name.decode("latin-1").lower(), value.decode("latin-1"))
        self._values = values

    @classmethod
    def from_pairs(cls, pairs: Mapping[str, str] | Iterable[tuple[str, str]]) -> Headers:
        """Build headers from ``str`` pairs, e.g. the ``headers=`` of ``Request.build``."""
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        return cls((name.encode("latin-1"), value.encode("latin-1")) for name, value in items)

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)
