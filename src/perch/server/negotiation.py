"""Content negotiation.

Two decisions live here:

- ``classify_request()`` decides, once per page request, whether the
  client gets a full document or a JSON navigation payload. It is a pure
  function of the request headers; nothing is retained between requests.
- ``negotiate()`` maps a plain route handler's return value to a
  ``Response``. isinstance-based dispatch, no magic, fully predictable.
"""

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from perch.http.headers import Headers
from perch.http.response import Redirect, Response

SPA_HEADER = "X-Perch-SPA"
"""Header the client runtime sends on in-place navigations."""

SPA_HEADER_ALT = "X-SPA-Navigation"
"""Vendor-neutral alias accepted for the SPA navigation signal."""

BOT_USER_AGENTS: tuple[str, ...] = (
    "googlebot",
    "bingbot",
    "slurp",
    "duckduckbot",
    "baiduspider",
    "yandexbot",
    "facebookexternalhit",
    "twitterbot",
    "rogerbot",
    "linkedinbot",
    "embedly",
    "quora link preview",
    "showyoubot",
    "outbrain",
    "pinterest",
    "slackbot",
    "vkshare",
    "w3c_validator",
    "whatsapp",
)
"""Lower-case User-Agent substrings identifying crawlers and link unfurlers."""


class RenderMode(Enum):
    """Shape of a page response."""

    FULL_DOCUMENT = "full-document"
    NAVIGATION_PAYLOAD = "navigation-payload"


@dataclass(frozen=True, slots=True)
class Negotiation:
    """Outcome of ``classify_request()``."""

    render_mode: RenderMode
    reason: str

    @property
    def is_payload(self) -> bool:
        return self.render_mode is RenderMode.NAVIGATION_PAYLOAD


BOT_DETECTED = Negotiation(RenderMode.FULL_DOCUMENT, "bot-detected")
SPA_NAVIGATION = Negotiation(RenderMode.NAVIGATION_PAYLOAD, "spa-navigation")
FIRST_LOAD = Negotiation(RenderMode.FULL_DOCUMENT, "first-load")


def is_bot(user_agent: str | None, bot_agents: tuple[str, ...] = BOT_USER_AGENTS) -> bool:
    """True if *user_agent* contains any crawler substring (case-insensitive)."""
    if not user_agent:
        return False
    ua = user_agent.lower()
    return any(bot.lower() in ua for bot in bot_agents)


def is_spa_navigation(
    headers: Headers,
    spa_headers: tuple[str, ...] = (SPA_HEADER, SPA_HEADER_ALT),
) -> bool:
    """True if any SPA signal header is present with the value ``true``."""
    return any(headers.is_true(name) for name in spa_headers)


def classify_request(
    headers: Headers | Mapping[str, str],
    *,
    bot_agents: tuple[str, ...] = BOT_USER_AGENTS,
    spa_headers: tuple[str, ...] = (SPA_HEADER, SPA_HEADER_ALT),
) -> Negotiation:
    """Decide the render mode for a page request.

    Precedence, highest first:

    1. Crawler User-Agent -> full document (``bot-detected``), even when
       the SPA header is present. Crawlers always get indexable markup.
    2. SPA navigation header -> navigation payload (``spa-navigation``).
    3. Anything else -> full document (``first-load``).
    """
    if not isinstance(headers, Headers):
        headers = Headers.from_dict(headers)

    if is_bot(headers.get("user-agent"), bot_agents):
        return BOT_DETECTED
    if is_spa_navigation(headers, spa_headers):
        return SPA_NAVIGATION
    return FIRST_LOAD


def negotiate(value: Any) -> Response:
    """Convert a plain route handler's return value to a Response.

    Dispatch order:

    1. ``Response``         -> pass through
    2. ``Redirect``         -> 302 with Location header
    3. ``str``              -> 200, text/html
    4. ``bytes``            -> 200, application/octet-stream
    5. ``dict`` / ``list``  -> 200, application/json
    6. ``(value, int)``     -> negotiate value, override status
    7. ``(value, int, dict)`` -> negotiate value, override status + headers
    """
    match value:
        case Response():
            return value
        case Redirect():
            return (
                Response(body="")
                .with_status(value.status)
                .with_header("Location", value.url)
                .with_headers(dict(value.headers))
            )
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(
                body=json_module.dumps(value, default=str),
                content_type="application/json; charset=utf-8",
            )
        case (inner, int() as status):
            return negotiate(inner).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner).with_status(status).with_headers(headers)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                f"Return str, dict, list, bytes, Response, or Redirect."
            )
            raise TypeError(msg)
