"""Integration tests — kida environment wired into page rendering."""

from pathlib import Path

import pytest

from perch.app import App
from perch.config import AppConfig
from perch.testing import TestClient, assert_is_payload


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    pages = tmp_path / "pages"
    pages.mkdir()
    (pages / "price.html").write_text("<p>{{ price | currency }}</p>")
    (pages / "footer.html").write_text("<footer>{{ site_name() }}</footer>")
    (pages / "escaped.html").write_text("<p>{{ comment }}</p>")
    return tmp_path


class TestTemplateFilters:
    async def test_custom_filter(self, template_dir: Path) -> None:
        app = App(AppConfig(template_dir=template_dir))

        @app.template_filter()
        def currency(value: float) -> str:
            return f"${value:,.2f}"

        @app.page("/price", name="price")
        def price():
            return {"price": 42.5}

        async with TestClient(app) as client:
            assert "$42.50" in (await client.get("/price")).text
            payload = assert_is_payload(await client.navigate("/price"))
            assert payload.html == "<p>$42.50</p>"

    async def test_named_filter(self, template_dir: Path) -> None:
        app = App(AppConfig(template_dir=template_dir))

        @app.template_filter(name="currency")
        def format_money(value: float) -> str:
            return f"${value:,.2f}"

        @app.page("/price", name="price")
        def price():
            return {"price": 99.9}

        async with TestClient(app) as client:
            assert "$99.90" in (await client.get("/price")).text


class TestTemplateGlobals:
    async def test_global_function(self, template_dir: Path) -> None:
        app = App(AppConfig(template_dir=template_dir))

        @app.template_global()
        def site_name() -> str:
            return "Perch Docs"

        @app.page("/footer", name="footer")
        def footer():
            return None

        async with TestClient(app) as client:
            assert "<footer>Perch Docs</footer>" in (await client.get("/footer")).text


class TestAutoescape:
    async def test_page_data_escaped(self, template_dir: Path) -> None:
        app = App(AppConfig(template_dir=template_dir))

        @app.page("/escaped", name="escaped")
        def escaped():
            return {"comment": "<script>alert(1)</script>"}

        async with TestClient(app) as client:
            payload = assert_is_payload(await client.navigate("/escaped"))
            assert "<script>" not in payload.html
            assert "&lt;script&gt;" in payload.html
