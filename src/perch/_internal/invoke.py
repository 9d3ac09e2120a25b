"""Invoke helpers — call sync or async callables uniformly.

Controllers, error handlers, feature hooks and event listeners can all be
``def`` or ``async def``. Any code that calls a user-provided callable
goes through this helper so the sync/async check lives in one place.

Usage::

    from perch._internal.invoke import invoke

    result = await invoke(handler, *args, **kwargs)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
