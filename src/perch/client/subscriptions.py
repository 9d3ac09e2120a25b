"""Removable handles for listeners and other acquired resources.

Every registration a feature makes during ``init`` (event listeners,
popstate listeners, timers owned elsewhere) returns a ``Subscription``.
Releasing is idempotent, and a ``SubscriptionSet`` releases every member
even when one of them fails.
"""

import logging
from collections.abc import Callable, Iterator
from typing import Any

from perch.errors import FeatureError

logger = logging.getLogger("perch.features")


class Subscription:
    """A handle that undoes one registration when released."""

    __slots__ = ("_release", "_released")

    def __init__(self, release: Callable[[], Any]) -> None:
        self._release = release
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Undo the registration. Later calls are no-ops."""
        if self._released:
            return
        self._released = True
        self._release()

    def __repr__(self) -> str:
        state = "released" if self._released else "active"
        return f"<Subscription {state}>"


class SubscriptionSet:
    """An owned group of subscriptions, released together.

    Usage::

        subs = SubscriptionSet()
        subs.add(document.add_event_listener(button, "click", on_click))
        ...
        subs.release_all()
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[Subscription] = []

    def add(self, subscription: Subscription) -> Subscription:
        """Take ownership of *subscription* and return it."""
        self._items.append(subscription)
        return subscription

    def release_all(self) -> None:
        """Release every subscription, most recent first.

        All releases are attempted. If any raised, ``FeatureError`` is
        raised afterwards, chained to the first failure.
        """
        items, self._items = self._items, []
        failures: list[Exception] = []
        for subscription in reversed(items):
            try:
                subscription.release()
            except Exception as exc:
                logger.exception("Failed to release %r", subscription)
                failures.append(exc)
        if failures:
            msg = f"{len(failures)} of {len(items)} subscriptions failed to release"
            raise FeatureError(msg) from failures[0]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Subscription]:
        return iter(self._items)
