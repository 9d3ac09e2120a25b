"""Navigator — in-place navigation state machine.

Intercepts clicks on internal links inside the render target and
history traversal, fetches the navigation payload, and swaps the page
in a fixed order:

1. destroy the current features
2. replace the render target content, route marker, title, description
3. push a history entry (link navigations only)
4. mount the new route's features
5. record the current route and scroll to the top

Only one navigation runs at a time; a request that arrives while one is
in flight is rejected, not queued. Any failure to fetch or validate the
payload falls back to a full document load of the same path.
"""

import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from bs4 import Tag

from perch.client.dom import Document, Event
from perch.client.history import History, PopStateEvent
from perch.client.lifecycle import LifecycleManager
from perch.client.subscriptions import SubscriptionSet
from perch.errors import NavigationError, PayloadError
from perch.payload import NavigationPayload
from perch.server.negotiation import SPA_HEADER

logger = logging.getLogger("perch.navigator")

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


class NavigationOutcome(Enum):
    """What ``navigate_to`` did."""

    COMPLETED = "completed"
    BUSY = "busy"
    UNCHANGED = "unchanged"
    FALLBACK = "fallback"
    FAILED = "failed"


@dataclass(slots=True)
class NavigatorState:
    current_route: str | None = None
    is_navigating: bool = False


def is_internal_href(href: str | None) -> bool:
    """True for hrefs the navigator should handle in place.

    Rejects empty hrefs, fragments (``#...``), protocol-relative URLs
    (``//host``) and anything with a scheme (``https:``, ``mailto:``, ...).
    """
    if not href:
        return False
    if href.startswith(("#", "//")):
        return False
    return _SCHEME.match(href) is None


def closest_anchor(node: Tag) -> Tag | None:
    """*node* or its nearest ``<a>`` ancestor."""
    for candidate in (node, *node.parents):
        if isinstance(candidate, Tag) and candidate.name == "a":
            return candidate
    return None


class Navigator:
    """Coordinates payload fetches, DOM swaps and the feature lifecycle.

    ``on_full_load`` performs a full document load of a path; the
    runtime wires it to ``Runtime.load``. Without it, a failed
    navigation ends as ``FAILED``.
    """

    __slots__ = (
        "_client",
        "_default_title",
        "_document",
        "_history",
        "_lifecycle",
        "_on_full_load",
        "_spa_header",
        "_state",
        "_subscriptions",
    )

    def __init__(
        self,
        client: httpx.AsyncClient,
        document: Document,
        history: History,
        lifecycle: LifecycleManager,
        *,
        on_full_load: Callable[[str], Awaitable[Any]] | None = None,
        spa_header: str = SPA_HEADER,
        default_title: str = "Perch",
    ) -> None:
        self._client = client
        self._document = document
        self._history = history
        self._lifecycle = lifecycle
        self._on_full_load = on_full_load
        self._spa_header = spa_header
        self._default_title = default_title
        self._state = NavigatorState()
        self._subscriptions = SubscriptionSet()

    @property
    def state(self) -> NavigatorState:
        return self._state

    @property
    def current_route(self) -> str | None:
        return self._state.current_route

    @property
    def is_navigating(self) -> bool:
        return self._state.is_navigating

    @property
    def started(self) -> bool:
        return len(self._subscriptions) > 0

    # -- Listeners --

    def start(self) -> None:
        """Read the current route and attach click and popstate listeners."""
        if self.started:
            return
        self._state.current_route = self._document.route_marker or "/"
        self._subscriptions.add(
            self._document.add_event_listener(self._document, "click", self.handle_click)
        )
        self._subscriptions.add(self._history.on_popstate(self.handle_pop_state))
        logger.debug("Navigator started on %s", self._state.current_route)

    def stop(self) -> None:
        """Detach the listeners."""
        self._subscriptions.release_all()
        logger.debug("Navigator stopped")

    async def handle_click(self, event: Event) -> NavigationOutcome | None:
        """Document click listener. Returns ``None`` when the click is not ours."""
        if event.default_prevented:
            return None
        link = closest_anchor(event.target)
        if link is None:
            return None

        href = link.get("href")
        if not isinstance(href, str) or not is_internal_href(href):
            return None

        target = self._document.render_target
        if target is None or not self._document.contains(target, link):
            return None

        event.prevent_default()
        return await self.navigate_to(href)

    async def handle_pop_state(self, event: PopStateEvent) -> NavigationOutcome:
        """Popstate listener. Never pushes a history entry."""
        return await self.navigate_to(event.path, push_history=False)

    # -- Navigation --

    async def navigate_to(self, path: str, push_history: bool = True) -> NavigationOutcome:
        """Navigate to *path* in place."""
        if self._state.is_navigating:
            logger.info("Navigation already in progress; ignoring %s", path)
            return NavigationOutcome.BUSY
        if path == self._state.current_route:
            logger.debug("Already on route: %s", path)
            return NavigationOutcome.UNCHANGED

        logger.debug("Navigating to: %s", path)
        self._state.is_navigating = True
        try:
            try:
                payload = await self._fetch_payload(path)
            except (NavigationError, PayloadError, httpx.HTTPError) as exc:
                logger.warning("Navigation to %s failed (%s); loading full document", path, exc)
                return await self._fall_back(path)

            await self._lifecycle.destroy_current_features()
            self._update_document(payload)
            if push_history:
                self._history.push_state(path, {"path": path})
            await self._lifecycle.init_features(payload.route.features, payload.data, route=path)
            self._state.current_route = path
            self._document.scroll_to(0, 0)
            logger.debug("Navigation complete: %s", path)
            return NavigationOutcome.COMPLETED
        finally:
            self._state.is_navigating = False

    async def _fetch_payload(self, path: str) -> NavigationPayload:
        response = await self._client.get(
            path,
            headers={self._spa_header: "true", "Accept": "application/json"},
        )
        if not response.is_success:
            raise NavigationError(path, response.status_code)
        return NavigationPayload.from_json(response.content)

    def _update_document(self, payload: NavigationPayload) -> None:
        self._document.title = payload.meta.title or self._default_title
        if payload.meta.description:
            self._document.description = payload.meta.description
        self._document.replace_content(payload.html, route=payload.route.path)

    async def _fall_back(self, path: str) -> NavigationOutcome:
        if self._on_full_load is None:
            logger.error("No full-load handler; navigation to %s abandoned", path)
            return NavigationOutcome.FAILED
        try:
            await self._on_full_load(path)
        except Exception:
            logger.exception("Full document load of %s failed", path)
            return NavigationOutcome.FAILED
        return NavigationOutcome.FALLBACK
