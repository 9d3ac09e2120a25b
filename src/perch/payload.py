"""Navigation payload — the JSON artifact returned for in-place navigations.

Wire shape::

    {
      "route": {"path": "/about", "name": "about", "features": ["team", "footer"]},
      "data": {...},
      "meta": {"title": "...", "description": "..."},
      "html": "<section>...</section>",
      "timestamp": 1760000000000
    }

The server builds a ``NavigationPayload`` and serialises it with
``to_dict()``. The client parses untrusted JSON with ``from_json()``,
which raises ``PayloadError`` for anything that does not match the shape
above. A payload that fails validation is treated like a failed fetch.
"""

import json as json_module
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from perch.errors import PayloadError
from perch.routing.table import PageMeta


@dataclass(frozen=True, slots=True)
class RouteInfo:
    """The route portion of a payload: enough for the client to mount features."""

    path: str
    name: str
    features: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "name": self.name, "features": list(self.features)}


@dataclass(frozen=True, slots=True)
class NavigationPayload:
    """A validated navigation payload."""

    route: RouteInfo
    html: str
    timestamp: int
    data: Mapping[str, Any] = field(default_factory=dict)
    meta: PageMeta = field(default_factory=PageMeta)

    def to_dict(self) -> dict[str, Any]:
        return {
            "route": self.route.to_dict(),
            "data": dict(self.data),
            "meta": self.meta.to_dict(),
            "html": self.html,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_json(cls, raw: str | bytes) -> "NavigationPayload":
        """Parse and validate a JSON document."""
        try:
            obj = json_module.loads(raw)
        except ValueError as exc:
            msg = f"Navigation payload is not valid JSON: {exc}"
            raise PayloadError(msg) from exc
        return cls.from_dict(obj)

    @classmethod
    def from_dict(cls, obj: Any) -> "NavigationPayload":
        """Validate an already-decoded JSON value."""
        if not isinstance(obj, dict):
            msg = f"Navigation payload must be an object, got {type(obj).__name__}"
            raise PayloadError(msg)

        route = _require(obj, "route", dict)
        features = _require(route, "features", list, where="route")
        if not all(isinstance(name, str) for name in features):
            msg = "Navigation payload field 'route.features' must contain only strings"
            raise PayloadError(msg)

        meta = _require(obj, "meta", dict)
        timestamp = _require(obj, "timestamp", (int, float))
        if isinstance(timestamp, bool) or not math.isfinite(timestamp):
            msg = "Navigation payload field 'timestamp' must be a finite number"
            raise PayloadError(msg)

        return cls(
            route=RouteInfo(
                path=_require(route, "path", str, where="route"),
                name=_require(route, "name", str, where="route"),
                features=tuple(features),
            ),
            html=_require(obj, "html", str),
            timestamp=int(timestamp),
            data=_require(obj, "data", dict),
            meta=PageMeta(
                title=_optional_str(meta, "title"),
                description=_optional_str(meta, "description"),
            ),
        )


def _require(
    obj: Mapping[str, Any],
    key: str,
    expected: type | tuple[type, ...],
    *,
    where: str = "",
) -> Any:
    label = f"{where}.{key}" if where else key
    if key not in obj:
        msg = f"Navigation payload is missing field {label!r}"
        raise PayloadError(msg)
    value = obj[key]
    if not isinstance(value, expected):
        msg = f"Navigation payload field {label!r} has type {type(value).__name__}"
        raise PayloadError(msg)
    return value


def _optional_str(meta: Mapping[str, Any], key: str) -> str:
    value = meta.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        msg = f"Navigation payload field 'meta.{key}' must be a string"
        raise PayloadError(msg)
    return value
