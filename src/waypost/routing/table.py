"""Route table — routes keyed by method, matched in declaration order.

Routes are registered during setup and the table is frozen with
``compile()`` before serving begins.
"""

import logging
from collections.abc import Iterable

from waypost._internal.types import TypeIdentifier
from waypost.routing.matcher import compile_path
from waypost.routing.route import HandlerTarget, HTTPMethod, Route, RouteMatch, parse_method

logger = logging.getLogger("waypost.routing")


def normalize_path(path: str) -> str:
    """Trim surrounding slashes and whitespace, then re-root at a single ``/``.

    Examples::

        "users/"     -> "/users"
        "//a/b//"    -> "/a/b"
        ""           -> "/"
    """
    return "/" + path.strip().strip("/")


class RouteTable:
    """Routes grouped by HTTP method.

    Within one method, the normalized path is the key: adding a route at
    an existing key replaces the earlier one (it keeps the earlier one's
    position in the matching order).

    Usage::

        table = RouteTable()
        table.add("GET", "/users/{id}", HandlerTarget(UserController, "show"))
        table.compile()
        match = table.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: dict[HTTPMethod, dict[str, Route]] = {}
        self._compiled = False

    def add(
        self,
        method: HTTPMethod | str,
        path: str,
        target: HandlerTarget,
        middleware: Iterable[TypeIdentifier] = (),
    ) -> Route:
        """Add a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        verb = parse_method(method)
        full_path = normalize_path(path)
        route = Route(
            method=verb,
            path=full_path,
            matcher=compile_path(full_path),
            target=target,
            middleware=tuple(middleware),
        )

        by_path = self._routes.setdefault(verb, {})
        previous = by_path.get(full_path)
        if previous is not None:
            logger.warning(
                "Route %s %s now handled by %s (replaces %s)",
                verb,
                full_path,
                target,
                previous.target,
            )
        by_path[full_path] = route
        return route

    def compile(self) -> None:
        """Freeze the table. No more routes can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route for *method* whose template matches *path*."""
        try:
            verb = HTTPMethod(method.upper())
        except ValueError:
            return None

        for route in self._routes.get(verb, {}).values():
            matched, params = route.matcher.match(path)
            if matched:
                return RouteMatch(route=route, params=params)
        return None

    def for_method(self, method: HTTPMethod | str) -> tuple[Route, ...]:
        """Routes bound to *method*, in matching order."""
        return tuple(self._routes.get(parse_method(method), {}).values())

    @property
    def routes(self) -> list[Route]:
        """Every registered route, grouped by method in registration order."""
        return [route for by_path in self._routes.values() for route in by_path.values()]

    def __len__(self) -> int:
        return sum(len(by_path) for by_path in self._routes.values())
