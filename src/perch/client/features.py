"""Feature contract, context, and registry.

A feature is a page-scoped unit of client behaviour. The contract is two
optional async hooks:

- ``init(context)``: attach to ``context.element``, acquire listeners
- ``destroy()``: release everything ``init`` acquired and reset state so
  the next ``init`` behaves as if freshly loaded

Any object with those attributes is a feature (a module, an instance).
The ``Feature`` base class implements the contract on top of a
``SubscriptionSet``, so subclasses only write ``mount`` and never forget
to remove a listener::

    registry = FeatureRegistry()

    @registry.register("hero")
    class Hero(Feature):
        def mount(self, context):
            button = context.element.select_one(".cta-button")
            if button is not None:
                self.listen(button, "click", self.on_cta)

        def on_cta(self, event):
            ...

Features are singletons: the registry holds one instance per name and
the lifecycle manager mounts it again on every navigation.
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, overload

from bs4 import Tag

from perch._internal.invoke import invoke
from perch.client.subscriptions import Subscription, SubscriptionSet
from perch.errors import ConfigurationError, FeatureNotFound

if TYPE_CHECKING:
    from perch.client.dom import Document, Listener

logger = logging.getLogger("perch.features")

__all__ = [
    "Feature",
    "FeatureContext",
    "FeatureRegistry",
    "Subscription",
    "SubscriptionSet",
]


@dataclass(frozen=True, slots=True)
class FeatureContext:
    """Everything a feature gets on mount. Built fresh for every mount.

    ``data`` is the page data of the navigation that mounted the feature.
    ``route`` is the path the feature was mounted for.
    """

    element: Tag
    data: Mapping[str, Any] = field(default_factory=dict)
    route: str = "/"
    document: "Document | None" = None


class Feature:
    """Base class implementing the feature contract.

    Override ``mount`` (sync or async) to attach, ``unmount`` for extra
    teardown, and ``reset`` to clear instance state. Register listeners
    with ``listen`` or hand any other ``Subscription`` to
    ``self.subscriptions``; ``destroy`` releases them all.
    """

    def __init__(self) -> None:
        self.subscriptions = SubscriptionSet()
        self.context: FeatureContext | None = None

    @property
    def element(self) -> Tag | None:
        return self.context.element if self.context is not None else None

    @property
    def mounted(self) -> bool:
        return self.context is not None

    async def init(self, context: FeatureContext) -> None:
        self.context = context
        try:
            await invoke(self.mount, context)
        except Exception:
            # A failed mount must not leave half-acquired listeners behind
            self._teardown()
            raise

    async def destroy(self) -> None:
        try:
            await invoke(self.unmount)
        finally:
            self._teardown()

    def listen(self, target: "Tag | Document", event_type: str, listener: "Listener") -> Subscription:
        """Add an event listener that ``destroy`` removes."""
        if self.context is None or self.context.document is None:
            msg = f"{type(self).__name__}.listen() called outside a mount"
            raise RuntimeError(msg)
        return self.subscriptions.add(
            self.context.document.add_event_listener(target, event_type, listener)
        )

    # -- Hooks --

    def mount(self, context: FeatureContext) -> Any:
        """Attach to the page. Default: nothing."""

    def unmount(self) -> Any:
        """Extra teardown before subscriptions are released. Default: nothing."""

    def reset(self) -> None:
        """Clear per-mount instance state. Default: nothing."""

    def _teardown(self) -> None:
        try:
            self.subscriptions.release_all()
        finally:
            self.context = None
            self.reset()


class FeatureRegistry:
    """Name -> feature mapping consulted by the lifecycle manager.

    ``register`` accepts an instance, a module, or a class (instantiated
    once). Used as a decorator it returns the class unchanged.
    """

    __slots__ = ("_features",)

    def __init__(self, features: Mapping[str, Any] | None = None) -> None:
        self._features: dict[str, Any] = {}
        for name, feature in (features or {}).items():
            self.register(name, feature)

    @overload
    def register(self, name: str) -> Callable[[type], type]: ...

    @overload
    def register(self, name: str, feature: Any) -> Any: ...

    def register(self, name: str, feature: Any = None) -> Any:
        """Register *feature* under *name*.

        Raises ``ConfigurationError`` if *name* is taken.
        """
        if feature is None:

            def decorator(cls: type) -> type:
                self._add(name, cls())
                return cls

            return decorator

        instance = feature() if isinstance(feature, type) else feature
        self._add(name, instance)
        return instance

    def _add(self, name: str, feature: Any) -> None:
        if name in self._features:
            msg = f"Feature {name!r} is already registered."
            raise ConfigurationError(msg)
        self._features[name] = feature
        logger.debug("Registered feature %s", name)

    def resolve(self, name: str) -> Any:
        """Return the feature registered as *name*.

        Raises ``FeatureNotFound`` if there is none.
        """
        try:
            return self._features[name]
        except KeyError:
            raise FeatureNotFound(name) from None

    def names(self) -> list[str]:
        return list(self._features)

    def __contains__(self, name: object) -> bool:
        return name in self._features

    def __iter__(self) -> Iterator[str]:
        return iter(self._features)

    def __len__(self) -> int:
        return len(self._features)
