"""Declarative controller and route descriptors.

Plain data: a controller descriptor names a controller class, an
optional group prefix and class-level middleware, plus one route
descriptor per action. Nothing is read from the class itself; the
``RouteRegistrar`` is the only consumer.

Usage::

    users = controller(
        UserController,
        get("/{id}", "show"),
        post("/", "create", middleware=[RequireJSON]),
        prefix="/users",
        middleware=[Authenticate],
    )
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from waypost._internal.types import TypeIdentifier
from waypost.routing.route import HTTPMethod


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """One action bound to an HTTP verb and a path template."""

    method: HTTPMethod | str
    path: str
    action: str
    middleware: tuple[TypeIdentifier, ...] = ()


@dataclass(frozen=True, slots=True)
class ControllerDescriptor:
    """A controller class with its route group settings and actions."""

    controller: TypeIdentifier
    prefix: str = ""
    middleware: tuple[TypeIdentifier, ...] = ()
    routes: tuple[RouteDescriptor, ...] = field(default=())

    def __str__(self) -> str:
        return getattr(self.controller, "__qualname__", str(self.controller))


def route(
    method: HTTPMethod | str,
    path: str,
    action: str,
    *,
    middleware: Iterable[TypeIdentifier] = (),
) -> RouteDescriptor:
    """Describe a route for any verb."""
    return RouteDescriptor(method, path, action, tuple(middleware))


def _verb(method: HTTPMethod) -> Callable[..., RouteDescriptor]:
    def build(
        path: str, action: str, *, middleware: Iterable[TypeIdentifier] = ()
    ) -> RouteDescriptor:
        return RouteDescriptor(method, path, action, tuple(middleware))

    build.__name__ = method.lower()
    build.__qualname__ = method.lower()
    build.__doc__ = f"Describe a {method} route."
    return build


get = _verb(HTTPMethod.GET)
post = _verb(HTTPMethod.POST)
put = _verb(HTTPMethod.PUT)
delete = _verb(HTTPMethod.DELETE)
patch = _verb(HTTPMethod.PATCH)
options = _verb(HTTPMethod.OPTIONS)
head = _verb(HTTPMethod.HEAD)
trace = _verb(HTTPMethod.TRACE)
connect = _verb(HTTPMethod.CONNECT)
pri = _verb(HTTPMethod.PRI)


def controller(
    cls: TypeIdentifier,
    *routes: RouteDescriptor,
    prefix: str = "",
    middleware: Iterable[TypeIdentifier] = (),
) -> ControllerDescriptor:
    """Describe a controller: its actions, group prefix and class middleware."""
    return ControllerDescriptor(
        controller=cls,
        prefix=prefix,
        middleware=tuple(middleware),
        routes=tuple(routes),
    )
