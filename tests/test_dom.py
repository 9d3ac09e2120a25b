"""Tests for perch.client.dom — the headless document model."""

import logging

import pytest

from perch.client.dom import Document, Event

PAGE = """<!DOCTYPE html>
<html>
<head><title>Home</title><meta name="description" content="Welcome"></head>
<body>
<nav><a href="/about" id="outside">About</a></nav>
<main id="app" data-route="/">
  <section data-feature="hero"><a href="/about" class="cta"><span>Go</span></a></section>
  <footer data-feature="footer"></footer>
</main>
<section data-feature="sidebar"></section>
<script id="__PERCH_STATE__" type="application/json">{"data": {"x": "\\u003c/b\\u003e"}}</script>
</body>
</html>"""


class TestRenderTarget:
    def test_route_marker(self) -> None:
        assert Document(PAGE).route_marker == "/"

    def test_missing_render_target(self) -> None:
        document = Document("<p>plain</p>")
        assert document.render_target is None
        assert document.route_marker is None
        assert document.feature_names() == []
        assert document.find_feature_element("hero") is None

    def test_feature_names_scoped_to_render_target(self) -> None:
        assert Document(PAGE).feature_names() == ["hero", "footer"]

    def test_find_feature_element_ignores_outside(self) -> None:
        document = Document(PAGE)
        assert document.find_feature_element("hero") is not None
        assert document.find_feature_element("sidebar") is None

    def test_replace_content(self) -> None:
        document = Document(PAGE)
        document.replace_content('<div data-feature="team">Team</div>', route="/about")
        assert document.route_marker == "/about"
        assert document.feature_names() == ["team"]
        assert document.select_one("#outside") is not None

    def test_replace_content_without_target(self, caplog: pytest.LogCaptureFixture) -> None:
        document = Document("<p>plain</p>")
        with caplog.at_level(logging.ERROR, logger="perch.runtime"):
            document.replace_content("<div></div>", route="/x")
        assert "Render target #app not found" in caplog.text


class TestMetadata:
    def test_title(self) -> None:
        document = Document(PAGE)
        assert document.title == "Home"
        document.title = "About"
        assert document.title == "About"

    def test_title_created_when_missing(self) -> None:
        document = Document("<html><head></head><body></body></html>")
        document.title = "New"
        assert document.title == "New"

    def test_description(self) -> None:
        document = Document(PAGE)
        assert document.description == "Welcome"
        document.description = "Who we are"
        assert document.description == "Who we are"

    def test_description_without_meta_tag(self) -> None:
        document = Document("<html><head></head></html>")
        document.description = "ignored"
        assert document.description == ""


class TestBootstrapState:
    def test_parses_escaped_state(self) -> None:
        assert Document(PAGE).bootstrap_state() == {"data": {"x": "</b>"}}

    def test_missing_block(self) -> None:
        assert Document("<main id='app'></main>").bootstrap_state() == {}

    def test_invalid_json(self, caplog: pytest.LogCaptureFixture) -> None:
        html = '<script id="__PERCH_STATE__" type="application/json">{broken</script>'
        with caplog.at_level(logging.ERROR, logger="perch.runtime"):
            assert Document(html).bootstrap_state() == {}
        assert "Failed to parse bootstrap state" in caplog.text

    def test_non_object(self) -> None:
        html = '<script id="__PERCH_STATE__" type="application/json">[1, 2]</script>'
        assert Document(html).bootstrap_state() == {}

    def test_custom_state_id(self) -> None:
        html = '<script id="state" type="application/json">{"a": 1}</script>'
        assert Document(html, state_element_id="state").bootstrap_state() == {"a": 1}


class TestEvents:
    async def test_bubbles_from_target_to_document(self) -> None:
        document = Document(PAGE)
        span = document.select_one(".cta span")
        seen: list[str] = []
        document.add_event_listener(document.select_one(".cta"), "click", lambda e: seen.append("a"))
        document.add_event_listener(document.render_target, "click", lambda e: seen.append("main"))
        document.add_event_listener(document, "click", lambda e: seen.append("document"))

        event = await document.click(span)

        assert seen == ["a", "main", "document"]
        assert event.target is span
        assert event.current_target is None

    async def test_stop_propagation(self) -> None:
        document = Document(PAGE)
        seen: list[str] = []

        def stop(event: Event) -> None:
            seen.append("a")
            event.stop_propagation()

        document.add_event_listener(document.select_one(".cta"), "click", stop)
        document.add_event_listener(document, "click", lambda e: seen.append("document"))
        await document.click(document.select_one(".cta"))
        assert seen == ["a"]

    async def test_async_listener_and_prevent_default(self) -> None:
        document = Document(PAGE)

        async def listener(event: Event) -> None:
            event.prevent_default()

        document.add_event_listener(document, "click", listener)
        event = await document.click(document.select_one(".cta"))
        assert event.default_prevented

    async def test_release_removes_listener(self) -> None:
        document = Document(PAGE)
        seen: list[int] = []
        sub = document.add_event_listener(document, "click", lambda e: seen.append(1))
        sub.release()
        await document.click(document.select_one(".cta"))
        assert seen == []

    async def test_other_event_types_ignored(self) -> None:
        document = Document(PAGE)
        seen: list[int] = []
        document.add_event_listener(document, "submit", lambda e: seen.append(1))
        await document.click(document.select_one(".cta"))
        assert seen == []

    async def test_listener_error_does_not_stop_dispatch(self, caplog: pytest.LogCaptureFixture) -> None:
        document = Document(PAGE)
        seen: list[int] = []

        def boom(event: Event) -> None:
            raise RuntimeError("listener failed")

        document.add_event_listener(document.render_target, "click", boom)
        document.add_event_listener(document, "click", lambda e: seen.append(1))
        with caplog.at_level(logging.ERROR, logger="perch.runtime"):
            await document.click(document.select_one(".cta"))
        assert seen == [1]
        assert "listener failed" in caplog.text

    def test_open_clears_listeners_and_scroll(self) -> None:
        document = Document(PAGE)
        document.add_event_listener(document, "click", lambda e: None)
        document.scroll_to(0, 300)
        document.open(PAGE)
        assert document.listener_count() == 0
        assert document.scroll_position == (0, 0)
