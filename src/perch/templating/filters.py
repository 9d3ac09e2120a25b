"""Built-in perch template globals and filters.

Auto-registered on every perch kida Environment. They cover the markup
contract between server templates and the client runtime: feature
insertion points and the inline bootstrap state block.
"""

import html
import json
from typing import Any

from kida.template import Markup


def feature_attrs(name: str, *, cls: str = "") -> Markup:
    """Build the attribute string marking a feature insertion point.

    The client runtime locates each feature's element by this attribute,
    so every feature a route declares needs exactly one element carrying it:

        <section{{ feature_attrs("hero", cls="hero") }}>...</section>
        → <section data-feature="hero" class="hero">...</section>
    """
    attrs = [f' data-feature="{html.escape(name, quote=True)}"']
    if cls:
        attrs.append(f' class="{html.escape(cls, quote=True)}"')
    return Markup("".join(attrs))


def state_json(value: Any) -> Markup:
    """Serialise a value for an inline ``<script type="application/json">`` block.

    ``<``, ``>`` and ``&`` are emitted as JSON unicode escapes so the payload
    can never close the surrounding script element.
    """
    payload = json.dumps(value, default=str, separators=(",", ":"))
    payload = payload.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")
    return Markup(payload)


BUILTIN_GLOBALS: dict[str, Any] = {
    "feature_attrs": feature_attrs,
}


BUILTIN_FILTERS: dict[str, Any] = {
    "state_json": state_json,
}
