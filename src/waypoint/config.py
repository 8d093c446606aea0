"""Router configuration.

RouterConfig is a frozen dataclass: immutable after creation, no
string-key dict lookups.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have defaults. Override what you need::

        config = RouterConfig(static_dir="public", first_match_wins=True)
    """

    # Static files
    static_url: str = "/static"
    static_dir: str | Path = "static"
    chunk_size: int = 64 * 1024
    content_types: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    # Dispatch: stop at the first matching route even when its handler fails
    first_match_wins: bool = False
