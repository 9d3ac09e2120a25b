"""Perch exception hierarchy.

Shared across the server pipeline and the client runtime so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when app or runtime configuration is invalid.

    Typically surfaces during ``App._freeze()`` or registry setup.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or controllers. The ASGI handler
    catches these and dispatches to the matching ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no page or route matched the request path."""

    def __init__(self, detail: str = "Page not found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — path exists but not for this HTTP method."""

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )


# -- Client runtime errors --


class NavigationError(PerchError):
    """A navigation fetch came back with a non-success status."""

    def __init__(self, path: str, status: int) -> None:
        super().__init__(f"Navigation to {path!r} failed: {status}")
        self.path = path
        self.status = status


class PayloadError(PerchError):
    """A navigation payload was not valid JSON or missed required fields."""


class FeatureError(PerchError):
    """Base for feature registry and lifecycle errors."""


class FeatureNotFound(FeatureError):  # noqa: N818
    """No feature is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No feature registered as {name!r}")
        self.name = name
