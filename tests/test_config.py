"""Tests for waypoint.config — RouterConfig frozen dataclass."""

from pathlib import Path

import pytest

from waypoint.config import RouterConfig


class TestRouterConfig:
    def test_defaults(self) -> None:
        cfg = RouterConfig()

        assert cfg.static_url == "/static"
        assert cfg.static_dir == "static"
        assert cfg.chunk_size == 64 * 1024
        assert dict(cfg.content_types) == {}
        assert cfg.first_match_wins is False

    def test_override(self) -> None:
        cfg = RouterConfig(static_url="/assets", static_dir=Path("public"), first_match_wins=True)

        assert cfg.static_url == "/assets"
        assert cfg.static_dir == Path("public")
        assert cfg.first_match_wins is True

    def test_frozen(self) -> None:
        cfg = RouterConfig()

        with pytest.raises(AttributeError):
            cfg.first_match_wins = True  # type: ignore[misc]

    def test_default_content_types_not_shared_mutable(self) -> None:
        with pytest.raises(TypeError):
            RouterConfig().content_types[".x"] = "y"  # type: ignore[index]
