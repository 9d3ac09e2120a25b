"""ASGI handler — translates ASGI scope/messages to perch types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through middleware and routing,
and sends the Response back through ASGI send().

Page routes go through content negotiation: the controller runs once,
then the result is rendered either as the full document or as the JSON
navigation payload depending on ``classify_request()``.
"""

import inspect
import logging
from collections.abc import Callable
from contextvars import Token
from typing import Any

from kida import Environment

from perch._internal.asgi import Receive, Scope, Send
from perch._internal.invoke import invoke
from perch.config import AppConfig
from perch.context import request_var
from perch.errors import HTTPError
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Next
from perch.routing.route import RouteMatch
from perch.routing.router import Router
from perch.routing.table import RouteDescriptor
from perch.server.errors import handle_http_error, handle_internal_error
from perch.server.negotiation import classify_request, negotiate
from perch.server.payload import assemble_payload, coerce_page_data, render_document
from perch.server.sender import send_response

negotiation_logger = logging.getLogger("perch.negotiation")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    error_handlers: dict[int | type, Callable[..., Any]],
    kida_env: Environment,
    config: AppConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    # Set request context var (reset after dispatch)
    token: Token[Request] = request_var.set(request)

    try:

        async def dispatch(req: Request) -> Response:
            match = router.match(req.method, req.path)
            return await _invoke_handler(match, req, kida_env=kida_env, config=config)

        # Wrap middleware around the dispatch
        handler: Next = dispatch
        for mw in reversed(middleware):

            async def make_next(req: Request, _mw: Any = mw, _next: Next = handler) -> Response:
                return await _mw(req, _next)

            handler = make_next

        response = await handler(request)

    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, config.debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, config.debug)
    finally:
        request_var.reset(token)

    await send_response(response, send, head=request.method == "HEAD")


async def _invoke_handler(
    match: RouteMatch,
    request: Request,
    *,
    kida_env: Environment,
    config: AppConfig,
) -> Response:
    """Call the matched route handler and convert its return value."""
    route = match.route
    kwargs = _build_handler_kwargs(route.handler, request)
    result = await invoke(route.handler, **kwargs)

    if route.page is None:
        return negotiate(result)
    return _render_page(route.page, request, result, kida_env=kida_env, config=config)


def _render_page(
    descriptor: RouteDescriptor,
    request: Request,
    result: Any,
    *,
    kida_env: Environment,
    config: AppConfig,
) -> Response:
    """Render a page controller's result in the negotiated shape."""
    page = coerce_page_data(result)
    negotiation = classify_request(
        request.headers,
        bot_agents=config.bot_user_agents,
        spa_headers=config.spa_headers,
    )
    if config.debug:
        negotiation_logger.debug(
            "%s %s -> %s (%s)",
            request.method,
            request.path,
            negotiation.render_mode.value,
            negotiation.reason,
        )

    if negotiation.is_payload:
        payload = assemble_payload(kida_env, descriptor, page)
        response = Response.json(payload.to_dict()).with_render_intent("payload")
    else:
        body = render_document(kida_env, descriptor, page, config=config)
        response = Response(body=body).with_render_intent("document")

    vary = ", ".join(("User-Agent", *config.spa_headers))
    return response.with_header("Vary", vary)


def _build_handler_kwargs(handler: Callable[..., Any], request: Request) -> dict[str, Any]:
    """Inspect the handler signature and inject the request where asked for.

    A parameter named ``request`` or annotated ``Request`` receives the
    current request. Other parameters must have defaults.
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}
    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
    return kwargs
