"""Session history for the headless runtime.

A stack of entries with a cursor, like a browser tab's history.
``push_state`` and ``replace_state`` never notify; ``back``, ``forward``
and ``go`` move the cursor and then dispatch a popstate event to every
listener, which is how the navigator learns about traversal.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from perch._internal.invoke import invoke
from perch.client.subscriptions import Subscription

logger = logging.getLogger("perch.runtime")


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    path: str
    state: Any = None


@dataclass(frozen=True, slots=True)
class PopStateEvent:
    """Dispatched after a traversal. ``path`` is the new current entry."""

    path: str
    state: Any = None


class History:
    """Session history stack.

    Usage::

        history = History("/")
        history.push_state("/about")
        await history.back()   # listeners see PopStateEvent("/")
    """

    __slots__ = ("_entries", "_index", "_listeners")

    def __init__(self, initial: str = "/") -> None:
        self._entries: list[HistoryEntry] = [HistoryEntry(initial)]
        self._index = 0
        self._listeners: list[Callable[[PopStateEvent], Any]] = []

    @property
    def current(self) -> str:
        """Path of the current entry."""
        return self._entries[self._index].path

    @property
    def state(self) -> Any:
        return self._entries[self._index].state

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(entry.path for entry in self._entries)

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._entries)

    def push_state(self, path: str, state: Any = None) -> None:
        """Add an entry after the current one, dropping any forward entries."""
        del self._entries[self._index + 1 :]
        self._entries.append(HistoryEntry(path, state))
        self._index += 1

    def replace_state(self, path: str, state: Any = None) -> None:
        """Overwrite the current entry."""
        self._entries[self._index] = HistoryEntry(path, state)

    async def back(self) -> bool:
        return await self.go(-1)

    async def forward(self) -> bool:
        return await self.go(1)

    async def go(self, delta: int) -> bool:
        """Move the cursor by *delta* and dispatch popstate.

        Returns ``False`` (and dispatches nothing) when the move would
        leave the stack.
        """
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return False
        self._index = target
        entry = self._entries[target]
        event = PopStateEvent(entry.path, entry.state)
        for listener in list(self._listeners):
            try:
                await invoke(listener, event)
            except Exception:
                logger.exception("Unhandled error in popstate listener")
        return True

    def on_popstate(self, listener: Callable[[PopStateEvent], Any]) -> Subscription:
        """Register a popstate listener. Release the subscription to remove it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Subscription(remove)
