"""Tests for perch.server.sender response emission rules."""

import pytest

from perch.http.response import Response
from perch.server.sender import send_response


@pytest.fixture
def messages() -> list[dict]:
    return []


@pytest.fixture
def send(messages: list[dict]):
    async def _send(message: dict) -> None:
        messages.append(message)

    return _send


class TestSendResponse:
    async def test_200_preserves_body(self, messages: list[dict], send) -> None:
        await send_response(Response("ok"), send)

        assert messages[0]["type"] == "http.response.start"
        assert messages[0]["status"] == 200
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert headers[b"content-type"] == b"text/html; charset=utf-8"
        assert messages[1] == {"type": "http.response.body", "body": b"ok"}

    async def test_header_names_lowercased(self, messages: list[dict], send) -> None:
        await send_response(Response("ok").with_header("Vary", "User-Agent"), send)
        assert (b"vary", b"User-Agent") in messages[0]["headers"]

    @pytest.mark.parametrize("status", [204, 304])
    async def test_no_body_statuses(self, messages: list[dict], send, status: int) -> None:
        # A body attached by mistake is dropped for statuses that forbid one
        await send_response(Response("unexpected-body").with_status(status), send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_head_keeps_length_drops_body(self, messages: list[dict], send) -> None:
        await send_response(Response("hello"), send, head=True)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"5"
        assert messages[1]["body"] == b""

    async def test_utf8_length(self, messages: list[dict], send) -> None:
        await send_response(Response("é"), send)
        assert dict(messages[0]["headers"])[b"content-length"] == b"2"
