"""Document model for the headless client runtime.

A ``Document`` wraps a BeautifulSoup tree (``html.parser`` backend) and
adds what the runtime needs from a browser document:

- the render target (``<main id="app" data-route="...">``) and its
  route marker
- title and description metadata
- feature insertion points (``[data-feature="<name>"]``)
- listener registration with removable handles and bubbling dispatch
- scroll position
- the inline bootstrap state block

``open()`` replaces the whole tree and drops every listener, which is
what a full document load does in a browser.
"""

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from bs4 import BeautifulSoup, Tag

from perch._internal.invoke import invoke
from perch.client.subscriptions import Subscription

logger = logging.getLogger("perch.runtime")

PARSER = "html.parser"

type Listener = Callable[[Event], Any]


@dataclass(slots=True)
class Event:
    """A dispatched event.

    ``target`` is the element the event was dispatched on;
    ``current_target`` is the node whose listener is running.
    """

    type: str
    target: Tag
    detail: Mapping[str, Any] = field(default_factory=dict)
    current_target: Any = None
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


@dataclass(slots=True, eq=False)
class _ListenerEntry:
    target: Any
    type: str
    listener: Listener


class Document:
    """A parsed HTML document with browser-like accessors."""

    __slots__ = (
        "_listeners",
        "_soup",
        "render_target_id",
        "scroll_position",
        "state_element_id",
    )

    def __init__(
        self,
        html: str = "",
        *,
        render_target_id: str = "app",
        state_element_id: str = "__PERCH_STATE__",
    ) -> None:
        self.render_target_id = render_target_id
        self.state_element_id = state_element_id
        self._listeners: list[_ListenerEntry] = []
        self._soup = BeautifulSoup(html, PARSER)
        self.scroll_position: tuple[int, int] = (0, 0)

    def open(self, html: str) -> None:
        """Replace the document with *html* (a full load)."""
        self._soup = BeautifulSoup(html, PARSER)
        self._listeners.clear()
        self.scroll_position = (0, 0)

    @property
    def soup(self) -> BeautifulSoup:
        return self._soup

    def select(self, selector: str) -> list[Tag]:
        return list(self._soup.select(selector))

    def select_one(self, selector: str) -> Tag | None:
        return self._soup.select_one(selector)

    def __str__(self) -> str:
        return str(self._soup)

    # -- Render target --

    @property
    def render_target(self) -> Tag | None:
        """The element whose content navigations replace."""
        return self._soup.find(id=self.render_target_id)

    @property
    def route_marker(self) -> str | None:
        """The ``data-route`` attribute of the render target."""
        target = self.render_target
        if target is None:
            return None
        value = target.get("data-route")
        return value if isinstance(value, str) else None

    def replace_content(self, html: str, *, route: str) -> None:
        """Replace the render target's children with *html* and set its route marker."""
        target = self.render_target
        if target is None:
            logger.error("Render target #%s not found; content not replaced", self.render_target_id)
            return
        fragment = BeautifulSoup(html, PARSER)
        target.clear()
        for node in list(fragment.contents):
            target.append(node.extract())
        target["data-route"] = route

    def contains(self, container: Tag, node: Tag) -> bool:
        """True if *node* is *container* or one of its descendants."""
        return node is container or any(parent is container for parent in node.parents)

    # -- Feature insertion points --

    def find_feature_element(self, name: str) -> Tag | None:
        """The first ``[data-feature=name]`` element inside the render target."""
        target = self.render_target
        if target is None:
            return None
        return target.find(attrs={"data-feature": name})

    def feature_names(self) -> list[str]:
        """Names of every insertion point in the render target, in document order."""
        target = self.render_target
        if target is None:
            return []
        names: list[str] = []
        for element in target.find_all(attrs={"data-feature": True}):
            value = element.get("data-feature")
            if isinstance(value, str):
                names.append(value)
        return names

    # -- Metadata --

    @property
    def title(self) -> str:
        tag = self._soup.title
        return tag.get_text() if tag is not None else ""

    @title.setter
    def title(self, value: str) -> None:
        tag = self._soup.title
        if tag is None:
            tag = self._soup.new_tag("title")
            (self._soup.head or self._soup).insert(0, tag)
        tag.string = value

    @property
    def description(self) -> str:
        tag = self._description_tag()
        if tag is None:
            return ""
        value = tag.get("content")
        return value if isinstance(value, str) else ""

    @description.setter
    def description(self, value: str) -> None:
        tag = self._description_tag()
        if tag is not None:
            tag["content"] = value

    def _description_tag(self) -> Tag | None:
        return self._soup.find("meta", attrs={"name": "description"})

    # -- Scrolling --

    def scroll_to(self, x: int, y: int) -> None:
        self.scroll_position = (x, y)

    # -- Bootstrap state --

    def bootstrap_state(self) -> dict[str, Any]:
        """Parse the inline state block.

        Returns ``{}`` when the block is missing, unparsable, or not an
        object. The failure is logged; it never propagates.
        """
        element = self._soup.find(id=self.state_element_id)
        if element is None:
            logger.warning("No bootstrap state block #%s found", self.state_element_id)
            return {}
        try:
            state = json.loads(element.get_text())
        except ValueError:
            logger.exception("Failed to parse bootstrap state")
            return {}
        if not isinstance(state, dict):
            logger.error("Bootstrap state is %s, expected an object", type(state).__name__)
            return {}
        return state

    # -- Events --

    def add_event_listener(
        self,
        target: "Tag | Document",
        event_type: str,
        listener: Listener,
    ) -> Subscription:
        """Register *listener* for *event_type* on *target*.

        *target* is an element or the document itself. Release the
        returned subscription to remove the listener.
        """
        entry = _ListenerEntry(target, event_type, listener)
        self._listeners.append(entry)

        def remove() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return Subscription(remove)

    def listener_count(self, target: "Tag | Document | None" = None) -> int:
        """Number of registered listeners, optionally for one target."""
        if target is None:
            return len(self._listeners)
        return sum(1 for entry in self._listeners if entry.target is target)

    async def dispatch(self, event: Event) -> Event:
        """Dispatch *event* from its target up to the document.

        Listeners run in registration order on each node. A listener
        that raises is logged and the dispatch continues.
        """
        path: list[Any] = [event.target, *event.target.parents, self]
        for node in path:
            for entry in [e for e in self._listeners if e.target is node and e.type == event.type]:
                event.current_target = node
                try:
                    await invoke(entry.listener, event)
                except Exception:
                    logger.exception("Unhandled error in %r listener", event.type)
            if event.propagation_stopped:
                break
        event.current_target = None
        return event

    async def click(self, element: Tag) -> Event:
        """Dispatch a click on *element*."""
        return await self.dispatch(Event("click", element))
