"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. The framework checks the shape, not the lineage.
Page responses carry ``render_intent`` ("document" or "payload"), so a
middleware can tell the two shapes apart without sniffing the body.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from perch.http.request import Request
from perch.http.response import Response

# The next handler in the middleware chain
type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for perch middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class NoStorePayloads:
            async def __call__(self, request: Request, next: Next) -> Response:
                response = await next(request)
                if response.render_intent == "payload":
                    return response.with_header("Cache-Control", "no-store")
                return response
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
