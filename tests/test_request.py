"""Tests for waypoint.http.request — frozen Request with async body access."""

import dataclasses

import pytest

from waypoint.http.request import Request


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


def _make_receive(*bodies: bytes):
    """Create an ASGI receive callable that yields bodies."""
    messages = []
    for i, body in enumerate(bodies):
        is_last = i == len(bodies) - 1
        messages.append({"type": "http.request", "body": body, "more_body": not is_last})
    if not messages:
        messages.append({"type": "http.request", "body": b"", "more_body": False})
    it = iter(messages)

    async def receive():
        return next(it)

    return receive


class TestRequestFromASGI:
    def test_method_and_path(self) -> None:
        scope = _make_scope(method="POST", path="/users", raw_path=b"/users")
        req = Request.from_asgi(scope, _make_receive())
        assert req.method == "POST"
        assert req.path == "/users"

    def test_url_uses_host_header(self) -> None:
        scope = _make_scope(
            path="/a", raw_path=b"/a", headers=[(b"host", b"example.com")]
        )
        req = Request.from_asgi(scope, _make_receive())
        assert req.url == "http://example.com/a"

    def test_url_falls_back_to_server(self) -> None:
        req = Request.from_asgi(_make_scope(path="/a", raw_path=b"/a"), _make_receive())
        assert req.url == "http://localhost:8000/a"

    def test_default_port_omitted(self) -> None:
        scope = _make_scope(server=("example.com", 443), scheme="https")
        req = Request.from_asgi(scope, _make_receive())
        assert req.url == "https://example.com/"

    def test_query_string_kept(self) -> None:
        scope = _make_scope(path="/s", raw_path=b"/s", query_string=b"q=hello&page=2")
        req = Request.from_asgi(scope, _make_receive())
        assert req.url.endswith("/s?q=hello&page=2")
        assert req.query_string == "q=hello&page=2"
        assert req.path == "/s"

    def test_raw_path_preserves_encoding(self) -> None:
        scope = _make_scope(path="/a b", raw_path=b"/a%20b")
        req = Request.from_asgi(scope, _make_receive())
        assert req.path == "/a%20b"

    def test_path_quoted_without_raw_path(self) -> None:
        scope = _make_scope(path="/a b", raw_path=None)
        req = Request.from_asgi(scope, _make_receive())
        assert req.path == "/a%20b"

    def test_headers_parsed(self) -> None:
        scope = _make_scope(headers=[(b"content-type", b"application/json")])
        req = Request.from_asgi(scope, _make_receive())
        assert req.headers["content-type"] == "application/json"
        assert req.content_type == "application/json"

    def test_frozen(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive())
        with pytest.raises(dataclasses.FrozenInstanceError):
            req.method = "POST"  # type: ignore[misc]


class TestRequestBody:
    async def test_body_single_chunk(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"hello"))
        assert await req.body() == b"hello"

    async def test_body_multiple_chunks(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"hel", b"lo"))
        assert await req.body() == b"hello"

    async def test_body_cached(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"once"))
        assert await req.body() == b"once"
        assert await req.body() == b"once"

    async def test_text(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive("héllo".encode()))
        assert await req.text() == "héllo"

    async def test_json(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b'{"x": "Y"}'))
        assert await req.json() == {"x": "Y"}

    async def test_stream_stops_on_disconnect(self) -> None:
        async def receive():
            return {"type": "http.disconnect"}

        req = Request.from_asgi(_make_scope(), receive)
        assert [chunk async for chunk in req.stream()] == []


class TestRequestBuild:
    def test_defaults_to_get(self) -> None:
        req = Request.build("http://localhost/test")
        assert req.method == "GET"
        assert req.path == "/test"

    def test_method_uppercased(self) -> None:
        assert Request.build("http://localhost/", method="post").method == "POST"

    def test_root_path_for_bare_host(self) -> None:
        assert Request.build("http://localhost").path == "/"

    def test_headers(self) -> None:
        req = Request.build("http://localhost/", headers={"Content-Type": "text/plain"})
        assert req.content_type == "text/plain"

    async def test_str_body(self) -> None:
        req = Request.build("http://localhost/", method="POST", body='{"test": "TEST"}')
        assert await req.json() == {"test": "TEST"}

    async def test_bytes_body(self) -> None:
        req = Request.build("http://localhost/", method="POST", body=b"\x00\x01")
        assert await req.body() == b"\x00\x01"

    async def test_no_body(self) -> None:
        assert await Request.build("http://localhost/").body() == b""
