"""Client runtime — headless feature lifecycle and in-place navigation.

Operates on a parsed document (BeautifulSoup) and talks HTTP through an
``httpx.AsyncClient``, so it runs against a live server or directly
against a perch ``App`` through ``httpx.ASGITransport``.

Free-threading safety:
    A runtime belongs to one event loop. Every mutation of the document,
    the history stack and the active-feature set happens on that loop,
    with the navigator as the single writer of the render target.
"""

from perch.client.dom import Document, Event
from perch.client.features import (
    Feature,
    FeatureContext,
    FeatureRegistry,
    Subscription,
    SubscriptionSet,
)
from perch.client.history import History
from perch.client.lifecycle import ActiveFeature, LifecycleManager
from perch.client.navigator import NavigationOutcome, Navigator, NavigatorState
from perch.client.runtime import Runtime, RuntimeConfig, RuntimeHandle, get_runtime_handle

__all__ = [
    "ActiveFeature",
    "Document",
    "Event",
    "Feature",
    "FeatureContext",
    "FeatureRegistry",
    "History",
    "LifecycleManager",
    "NavigationOutcome",
    "Navigator",
    "NavigatorState",
    "Runtime",
    "RuntimeConfig",
    "RuntimeHandle",
    "Subscription",
    "SubscriptionSet",
    "get_runtime_handle",
]
