"""Page route table — path -> route descriptor.

A route descriptor names a navigable location: which controller produces
its data, which template renders its content region, which features the
client must mount once the content is in place, and the document metadata.
Descriptors are immutable and looked up by exact path after normalisation.
"""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from perch.errors import ConfigurationError


def normalize_path(path: str) -> str:
    """Return the canonical route key for *path* (``""`` becomes ``"/"``)."""
    return path or "/"


@dataclass(frozen=True, slots=True)
class PageMeta:
    """Document metadata applied on every load of a page."""

    title: str = ""
    description: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "description": self.description}


@dataclass(frozen=True, slots=True)
class PageData:
    """What a page controller returns.

    ``data`` is handed to the page template and to every feature mounted
    on the page, so it must be JSON-serialisable. ``meta`` overrides the
    route's own metadata for this response only.

    Usage::

        @app.page("/about", name="about", features=("team",))
        def about():
            return PageData({"members": members}, meta=PageMeta(title="Team"))
    """

    data: Mapping[str, Any] = field(default_factory=dict)
    meta: PageMeta | None = None


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """A frozen page route definition."""

    path: str
    name: str
    controller: Callable[..., Any]
    features: tuple[str, ...] = ()
    meta: PageMeta = field(default_factory=PageMeta)
    template: str = ""

    @property
    def template_name(self) -> str:
        """Template rendering this page's content region."""
        return self.template or f"pages/{self.name}.html"


class RouteTable:
    """Ordered collection of route descriptors keyed by normalised path.

    Usage::

        table = RouteTable()
        table.add(RouteDescriptor("/", "home", home, features=("hero",)))
        table.find("")  # -> the "/" descriptor
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: tuple[RouteDescriptor, ...] = ()) -> None:
        self._routes: dict[str, RouteDescriptor] = {}
        for route in routes:
            self.add(route)

    def add(self, route: RouteDescriptor) -> None:
        """Register *route*. Paths must be unique after normalisation."""
        key = normalize_path(route.path)
        if key in self._routes:
            msg = (
                f"Page path {key!r} is already registered as "
                f"{self._routes[key].name!r}; cannot register {route.name!r}."
            )
            raise ConfigurationError(msg)
        self._routes[key] = route

    def find(self, path: str) -> RouteDescriptor | None:
        """Return the descriptor registered for *path*, or ``None``."""
        return self._routes.get(normalize_path(path))

    def all(self) -> list[RouteDescriptor]:
        """Return every descriptor in registration order."""
        return list(self._routes.values())

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self._routes

    def __iter__(self) -> Iterator[RouteDescriptor]:
        return iter(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)
