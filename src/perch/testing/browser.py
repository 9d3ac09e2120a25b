"""Headless browser harness.

Wires a client ``Runtime`` to a perch ``App`` through
``httpx.ASGITransport``: the runtime's fetches go straight into the ASGI
app, so a test sees the real negotiation, the real payloads and the
real feature lifecycle without a socket.

Usage::

    async with Browser(app, registry) as browser:
        await browser.open("/")
        await browser.click("a[href='/about']")
        assert browser.lifecycle.active_feature_names() == ["team", "footer"]
        await browser.back()
"""

from typing import Any

import httpx
from bs4 import Tag

from perch.client.dom import Document, Event
from perch.client.features import FeatureRegistry
from perch.client.history import History
from perch.client.lifecycle import LifecycleManager
from perch.client.navigator import NavigationOutcome, Navigator
from perch.client.runtime import Runtime, RuntimeConfig, RuntimeHandle


class Browser:
    """A booted runtime bound to an ASGI app.

    ``requests`` records every request the runtime sent, in order, so
    tests can check which fetches were navigations and which were full
    loads.
    """

    __slots__ = ("_client", "_runtime", "app", "config", "registry", "requests")

    def __init__(
        self,
        app: Any,
        registry: FeatureRegistry,
        *,
        config: RuntimeConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.app = app
        self.registry = registry
        self.config = config or RuntimeConfig()
        self.requests: list[httpx.Request] = []
        self._client = httpx.AsyncClient(
            transport=transport or httpx.ASGITransport(app=app),
            base_url=self.config.base_url,
            event_hooks={"request": [self._record]},
        )
        self._runtime = Runtime(self._client, registry, config=self.config)

    async def __aenter__(self) -> "Browser":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._runtime.close()
        await self._client.aclose()

    async def _record(self, request: httpx.Request) -> None:
        self.requests.append(request)

    # -- Accessors --

    @property
    def runtime(self) -> Runtime:
        return self._runtime

    @property
    def document(self) -> Document:
        return self._runtime.document

    @property
    def history(self) -> History:
        return self._runtime.history

    @property
    def lifecycle(self) -> LifecycleManager:
        return self._runtime.lifecycle

    @property
    def navigator(self) -> Navigator:
        return self._runtime.navigator

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    # -- Actions --

    async def open(self, path: str = "/") -> RuntimeHandle:
        """First load of *path*."""
        return await self._runtime.boot(path)

    async def click(self, selector: str) -> Event:
        """Click the first element matching *selector*.

        Raises ``LookupError`` when nothing matches.
        """
        element = self.document.select_one(selector)
        if element is None:
            msg = f"No element matches {selector!r}"
            raise LookupError(msg)
        return await self.click_element(element)

    async def click_element(self, element: Tag) -> Event:
        return await self.document.click(element)

    async def navigate(self, path: str) -> NavigationOutcome:
        """Navigate in place, as if an internal link to *path* was clicked."""
        return await self.navigator.navigate_to(path)

    async def back(self) -> bool:
        return await self.history.back()

    async def forward(self) -> bool:
        return await self.history.forward()
