"""Request-scoped context via ContextVar.

``request_var`` holds the current ``Request`` for this task. It is set by
the handler pipeline and reset after each request. Controllers that do not
take a ``request`` parameter can still reach it through ``get_request()``.

``ContextVar`` is task-local under asyncio. No locks needed.
"""

from contextvars import ContextVar

from perch.http.request import Request

request_var: ContextVar[Request] = ContextVar("perch_request")
"""The current request. Set by the ASGI handler before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()
