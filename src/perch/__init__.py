"""Perch — hybrid server-rendered / single-page web runtime.

The server answers each page request with either a full document or a
JSON navigation payload. The client runtime swaps page content in place
and mounts/unmounts page-scoped features around every navigation.

Server usage::

    from perch import App, PageData

    app = App()

    @app.page("/", name="home", features=("hero", "footer"), title="Home")
    def home():
        return PageData({"headline": "Welcome"})

Client usage::

    from perch.client import FeatureRegistry, Runtime

    registry = FeatureRegistry()
    runtime = Runtime(http_client, registry)
    await runtime.boot("/")
"""

__version__ = "1.0.0a1"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "MethodNotAllowed",
    "NavigationPayload",
    "NotFound",
    "PageData",
    "PageMeta",
    "PerchError",
    "Request",
    "Response",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from perch.app import App

        return App

    if name == "AppConfig":
        from perch.config import AppConfig

        return AppConfig

    if name == "Request":
        from perch.http.request import Request

        return Request

    if name == "Response":
        from perch.http.response import Response

        return Response

    if name in ("PageData", "PageMeta"):
        from perch.routing import table as _table

        return getattr(_table, name)

    if name == "NavigationPayload":
        from perch.payload import NavigationPayload

        return NavigationPayload

    if name == "get_request":
        from perch.context import get_request

        return get_request

    if name in ("ConfigurationError", "HTTPError", "MethodNotAllowed", "NotFound", "PerchError"):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
