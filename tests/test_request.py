"""Tests for perch.http.request — frozen Request with async body access."""

import pytest

from perch.http.request import Request


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
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
    def test_basic_fields(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST", path="/about"), _make_receive())

        assert req.method == "POST"
        assert req.path == "/about"
        assert req.http_version == "1.1"
        assert req.client == ("127.0.0.1", 54321)

    def test_headers_parsed(self) -> None:
        scope = _make_scope(headers=[(b"x-perch-spa", b"true"), (b"accept", b"*/*")])
        req = Request.from_asgi(scope, _make_receive())

        assert req.headers["X-Perch-SPA"] == "true"
        assert req.headers["accept"] == "*/*"

    def test_missing_client(self) -> None:
        scope = _make_scope()
        del scope["client"]
        assert Request.from_asgi(scope, _make_receive()).client is None

    def test_frozen(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive())
        with pytest.raises(AttributeError):
            req.path = "/other"  # type: ignore[misc]


class TestRequestProperties:
    def test_user_agent(self) -> None:
        scope = _make_scope(headers=[(b"user-agent", b"Mozilla/5.0")])
        assert Request.from_asgi(scope, _make_receive()).user_agent == "Mozilla/5.0"

    def test_user_agent_missing(self) -> None:
        assert Request.from_asgi(_make_scope(), _make_receive()).user_agent == ""

    def test_accepts_json(self) -> None:
        scope = _make_scope(headers=[(b"accept", b"Application/JSON")])
        assert Request.from_asgi(scope, _make_receive()).accepts_json is True
        assert Request.from_asgi(_make_scope(), _make_receive()).accepts_json is False

    def test_query(self) -> None:
        scope = _make_scope(query_string=b"tag=a&tag=b&empty=")
        req = Request.from_asgi(scope, _make_receive())
        assert req.query == {"tag": ["a", "b"], "empty": [""]}

    def test_url_with_query(self) -> None:
        scope = _make_scope(path="/search", query_string=b"q=perch")
        assert Request.from_asgi(scope, _make_receive()).url == "/search?q=perch"

    def test_url_without_query(self) -> None:
        assert Request.from_asgi(_make_scope(path="/about"), _make_receive()).url == "/about"


class TestRequestBody:
    async def test_body_joins_chunks(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"hello ", b"world"))
        assert await req.body() == b"hello world"

    async def test_body_cached(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"once"))
        assert await req.body() == b"once"
        # receive is exhausted; the cached bytes come back
        assert await req.body() == b"once"

    async def test_empty_body(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive())
        assert await req.body() == b""
