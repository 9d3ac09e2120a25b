"""Client runtime — first-load bootstrap and full document loads.

``Runtime.boot(path)`` performs what a browser does on first visit:
fetch the full document, parse the bootstrap state, mount the features
whose insertion points are in the render target, then start the
navigator. ``Runtime.load(path)`` is the same thing later on, after
tearing the current page down; the navigator uses it as its fallback.
"""

import logging
from collections.abc import Callable
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

import httpx

from perch.client.dom import Document
from perch.client.features import FeatureRegistry
from perch.client.history import History
from perch.client.lifecycle import LifecycleManager
from perch.client.navigator import Navigator
from perch.server.negotiation import SPA_HEADER

logger = logging.getLogger("perch.runtime")

RUNTIME_VERSION = "1.0.0-alpha.1"
RUNTIME_PHASE = 1


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Client runtime configuration. Immutable after creation."""

    base_url: str = "http://testserver"
    spa_header: str = SPA_HEADER
    default_title: str = "Perch"
    state_element_id: str = "__PERCH_STATE__"
    render_target_id: str = "app"


@dataclass(frozen=True, slots=True)
class RuntimeHandle:
    """Diagnostic handle on a booted runtime."""

    version: str
    phase: int
    lifecycle: LifecycleManager
    navigator: Navigator
    get_state: Callable[[], dict[str, Any]]


_handle_var: ContextVar[RuntimeHandle] = ContextVar("perch_runtime")


def get_runtime_handle() -> RuntimeHandle:
    """Return the handle of the runtime booted in this context.

    Raises ``LookupError`` before the first ``boot()``.
    """
    return _handle_var.get()


class Runtime:
    """Headless client runtime.

    Usage::

        async with httpx.AsyncClient(base_url="http://localhost:8000") as http:
            runtime = Runtime(http, registry)
            await runtime.boot("/")
            await runtime.navigator.navigate_to("/about")
    """

    __slots__ = (
        "_client",
        "_handle",
        "_state",
        "config",
        "document",
        "history",
        "lifecycle",
        "navigator",
    )

    def __init__(
        self,
        client: httpx.AsyncClient,
        registry: FeatureRegistry,
        *,
        config: RuntimeConfig | None = None,
    ) -> None:
        self.config = config or RuntimeConfig()
        self._client = client
        self._state: dict[str, Any] = {}
        self._handle: RuntimeHandle | None = None

        self.document = Document(
            render_target_id=self.config.render_target_id,
            state_element_id=self.config.state_element_id,
        )
        self.history = History()
        self.lifecycle = LifecycleManager(self.document, registry)
        self.navigator = Navigator(
            client,
            self.document,
            self.history,
            self.lifecycle,
            on_full_load=self.load,
            spa_header=self.config.spa_header,
            default_title=self.config.default_title,
        )

    @property
    def handle(self) -> RuntimeHandle | None:
        """Set once ``boot()`` has completed."""
        return self._handle

    def get_state(self) -> dict[str, Any]:
        """The bootstrap state of the current full document."""
        return self._state

    async def boot(self, path: str = "/") -> RuntimeHandle:
        """First load of *path*."""
        logger.debug("Booting runtime at %s", path)
        html = await self._fetch_document(path)
        self.history.replace_state(path)
        await self._mount_document(html)

        self._handle = RuntimeHandle(
            version=RUNTIME_VERSION,
            phase=RUNTIME_PHASE,
            lifecycle=self.lifecycle,
            navigator=self.navigator,
            get_state=self.get_state,
        )
        _handle_var.set(self._handle)
        logger.debug("Runtime booted; active features: %s", self.lifecycle.active_feature_names())
        return self._handle

    async def load(self, path: str) -> None:
        """Full document load of *path*, replacing the current page.

        The document is fetched before anything is torn down, so a failed
        fetch leaves the current page mounted and the navigator attached.
        """
        logger.debug("Full document load of %s", path)
        html = await self._fetch_document(path)
        self.navigator.stop()
        await self.lifecycle.destroy_current_features()
        self.history.push_state(path, {"path": path})
        await self._mount_document(html)

    async def close(self) -> None:
        """Unmount everything and detach the navigator."""
        self.navigator.stop()
        await self.lifecycle.destroy_current_features()

    async def _fetch_document(self, path: str) -> str:
        response = await self._client.get(path, headers={"Accept": "text/html"})
        if not response.is_success:
            logger.warning("Full document load of %s returned %d", path, response.status_code)
        return response.text

    async def _mount_document(self, html: str) -> None:
        self.document.open(html)
        self._state = self.document.bootstrap_state()
        data = self._state.get("data")
        await self.lifecycle.init_features(
            self.document.feature_names(),
            data if isinstance(data, dict) else {},
        )
        self.navigator.start()
