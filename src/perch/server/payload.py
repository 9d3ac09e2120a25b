"""Payload assembly — the two shapes a page response can take.

``assemble_payload()`` builds the JSON navigation payload for in-place
navigations. ``render_document()`` renders the same page fragment inside
the full document shell for first loads and crawlers. Both render the
route's fragment template with the controller's data as context, so the
content region is identical whichever shape the client receives.
"""

import time
from collections.abc import Mapping
from typing import Any

from kida import Environment
from kida.template import Markup

from perch.config import AppConfig
from perch.payload import NavigationPayload, RouteInfo
from perch.routing.table import PageData, PageMeta, RouteDescriptor
from perch.templating.filters import state_json
from perch.templating.integration import render_template


def coerce_page_data(result: Any) -> PageData:
    """Normalise a controller's return value to ``PageData``.

    Controllers return ``PageData``, a plain mapping, or ``None``.
    """
    match result:
        case PageData():
            return result
        case None:
            return PageData()
        case Mapping():
            return PageData(data=dict(result))
        case _:
            msg = (
                f"Page controller returned {type(result).__name__}; "
                f"return PageData, a dict, or None."
            )
            raise TypeError(msg)


def resolve_meta(route: RouteDescriptor, page: PageData) -> PageMeta:
    """The controller's meta override, or the route's own."""
    return page.meta if page.meta is not None else route.meta


def render_fragment(env: Environment, route: RouteDescriptor, page: PageData) -> str:
    """Render the content region for *route*."""
    return render_template(env, route.template_name, page.data)


def assemble_payload(
    env: Environment,
    route: RouteDescriptor,
    page: PageData,
) -> NavigationPayload:
    """Build the navigation payload for *route*."""
    return NavigationPayload(
        route=RouteInfo(path=route.path, name=route.name, features=route.features),
        html=render_fragment(env, route, page),
        timestamp=int(time.time() * 1000),
        data=dict(page.data),
        meta=resolve_meta(route, page),
    )


def render_document(
    env: Environment,
    route: RouteDescriptor,
    page: PageData,
    *,
    config: AppConfig,
) -> str:
    """Render the full document for *route*.

    The bootstrap state block carries ``{data, route, runtime}`` so the
    client can mount the route's features without a second request.
    """
    meta = resolve_meta(route, page)
    state = {
        "data": dict(page.data),
        "route": RouteInfo(path=route.path, name=route.name, features=route.features).to_dict(),
        "runtime": {"version": config.runtime_version, "phase": config.runtime_phase},
    }
    return render_template(
        env,
        config.document_template,
        {
            "lang": config.lang,
            "title": meta.title or config.default_title,
            "description": meta.description,
            "stylesheet": config.stylesheet,
            "route_path": route.path,
            "content": Markup(render_fragment(env, route, page)),
            "state": state_json(state),
        },
    )
