"""Lifecycle manager — mounts and unmounts page features.

Owns the active-feature set. ``init_features`` mounts a route's declared
features in order against their ``[data-feature]`` insertion points;
``destroy_current_features`` unmounts everything. A failure in one
feature is logged and never stops the others.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from bs4 import Tag

from perch._internal.invoke import invoke
from perch.client.dom import Document
from perch.client.features import FeatureContext, FeatureRegistry
from perch.errors import FeatureNotFound

logger = logging.getLogger("perch.lifecycle")


@dataclass(frozen=True, slots=True)
class ActiveFeature:
    """A successfully mounted feature."""

    name: str
    feature: Any
    element: Tag
    context: FeatureContext


class LifecycleManager:
    """Tracks which features are mounted and drives their hooks.

    Usage::

        lifecycle = LifecycleManager(document, registry)
        await lifecycle.init_features(["hero", "footer"], {"headline": "Hi"})
        lifecycle.active_feature_names()   # ["hero", "footer"]
        await lifecycle.destroy_current_features()
    """

    __slots__ = ("_active", "_document", "_registry")

    def __init__(self, document: Document, registry: FeatureRegistry) -> None:
        self._document = document
        self._registry = registry
        self._active: dict[str, ActiveFeature] = {}

    @property
    def registry(self) -> FeatureRegistry:
        return self._registry

    async def init_features(
        self,
        names: Iterable[str],
        data: Mapping[str, Any],
        *,
        route: str | None = None,
    ) -> None:
        """Mount *names* in order, each with a fresh context.

        ``route`` defaults to the render target's route marker. Names
        repeated in the list or already active are skipped.
        """
        names = list(names)
        logger.debug("Initializing features: %s", names)
        if route is None:
            route = self._document.route_marker or "/"

        requested: set[str] = set()
        for name in names:
            if name in requested or name in self._active:
                logger.warning("Feature %s is already active; skipping", name)
                continue
            requested.add(name)
            await self._init_feature(name, data, route)

    async def _init_feature(self, name: str, data: Mapping[str, Any], route: str) -> None:
        try:
            feature = self._registry.resolve(name)
        except FeatureNotFound:
            logger.error("Failed to initialize feature %s: not registered", name)
            return

        element = self._document.find_feature_element(name)
        if element is None:
            logger.warning("Element not found for feature: %s", name)
            return

        init = getattr(feature, "init", None)
        if not callable(init):
            logger.warning("Feature %s has no init(); not activated", name)
            return

        context = FeatureContext(element=element, data=data, route=route, document=self._document)
        try:
            await invoke(init, context)
        except Exception:
            logger.exception("Failed to initialize feature %s", name)
            return

        self._active[name] = ActiveFeature(name=name, feature=feature, element=element, context=context)
        logger.debug("Feature initialized: %s", name)

    async def destroy_current_features(self) -> None:
        """Unmount every active feature, then clear the set.

        A missing or failing ``destroy`` is logged; the set is cleared
        regardless.
        """
        records = list(self._active.values())
        logger.debug("Destroying active features: %s", [r.name for r in records])
        try:
            for record in records:
                destroy = getattr(record.feature, "destroy", None)
                if not callable(destroy):
                    logger.warning("Feature %s has no destroy()", record.name)
                    continue
                try:
                    await invoke(destroy)
                except Exception:
                    logger.exception("Failed to destroy feature %s", record.name)
                else:
                    logger.debug("Feature destroyed: %s", record.name)
        finally:
            self._active.clear()

    # -- Introspection --

    def active_feature_names(self) -> list[str]:
        return list(self._active)

    def active_feature_count(self) -> int:
        return len(self._active)

    def is_active(self, name: str) -> bool:
        return name in self._active

    def get(self, name: str) -> ActiveFeature | None:
        return self._active.get(name)
