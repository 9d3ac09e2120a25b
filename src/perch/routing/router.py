"""Compiled router with exact-path matching.

Page paths are canonical keys, so matching is a dictionary lookup on the
normalised path followed by a method check.
"""

from perch.errors import MethodNotAllowed, NotFound
from perch.routing.route import Route, RouteMatch
from perch.routing.table import normalize_path


class Router:
    """Compiled router.

    Usage::

        router = Router()
        router.add(Route("/about", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/about")
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        # path -> method -> route
        self._routes: dict[str, dict[str, Route]] = {}
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        by_method = self._routes.setdefault(normalize_path(route.path), {})
        for method in route.methods:
            by_method[method] = route
        # HEAD is served by GET handlers unless registered explicitly
        if "GET" in route.methods:
            by_method.setdefault("HEAD", route)

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, each once, in registration order."""
        seen: set[int] = set()
        result: list[Route] = []
        for by_method in self._routes.values():
            for route in by_method.values():
                if id(route) not in seen:
                    seen.add(id(route))
                    result.append(route)
        return result

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route is registered for the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        by_method = self._routes.get(normalize_path(path))
        if not by_method:
            raise NotFound()

        route = by_method.get(method)
        if route is None:
            raise MethodNotAllowed(frozenset(by_method))

        return RouteMatch(route=route)
