"""Tests for perch.context — request-scoped ContextVar."""

import pytest

from perch.app import App
from perch.context import get_request, request_var
from perch.http.request import Request
from perch.testing import TestClient


class TestRequestVar:
    def test_get_request_raises_outside_context(self) -> None:
        with pytest.raises(LookupError):
            get_request()

    def test_set_and_get_request(self) -> None:
        scope = {
            "type": "http",
            "method": "GET",
            "path": "/test",
            "headers": [],
            "query_string": b"",
            "http_version": "1.1",
        }

        async def receive():
            return {"type": "http.request", "body": b"", "more_body": False}

        request = Request.from_asgi(scope, receive)
        token = request_var.set(request)
        try:
            assert get_request() is request
        finally:
            request_var.reset(token)


class TestContextInRequestPipeline:
    async def test_request_available_in_route(self) -> None:
        app = App()

        @app.route("/ctx")
        def handler():
            return f"path={get_request().path}"

        async with TestClient(app) as client:
            response = await client.get("/ctx")
            assert response.status == 200
            assert response.text == "path=/ctx"

    async def test_request_available_in_page_controller(self, templates_dir) -> None:
        from perch.config import AppConfig

        app = App(AppConfig(template_dir=templates_dir))

        @app.page("/contact", name="contact", features=("form",))
        def contact():
            return {"email": get_request().headers.get("x-email", "none")}

        async with TestClient(app) as client:
            response = await client.get("/contact", headers={"X-Email": "a@b.c"})
            assert "a@b.c" in response.text
