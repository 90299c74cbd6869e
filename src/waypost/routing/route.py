"""Route, HandlerTarget and RouteMatch frozen dataclasses."""

from dataclasses import dataclass
from enum import StrEnum

from waypost._internal.types import TypeIdentifier
from waypost.errors import ConfigurationError
from waypost.routing.matcher import PathMatcher


class HTTPMethod(StrEnum):
    """HTTP verbs a route can be bound to."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    TRACE = "TRACE"
    CONNECT = "CONNECT"
    PRI = "PRI"


@dataclass(frozen=True, slots=True)
class HandlerTarget:
    """The controller type and the action called on its instance.

    The action is invoked as ``action(request, response, params)``.
    """

    controller: TypeIdentifier
    action: str

    def __str__(self) -> str:
        name = getattr(self.controller, "__qualname__", str(self.controller))
        return f"{name}.{self.action}"


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route. Immutable; owned by the RouteTable."""

    method: HTTPMethod
    path: str
    matcher: PathMatcher
    target: HandlerTarget
    middleware: tuple[TypeIdentifier, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: tuple[str, ...]


def parse_method(method: "HTTPMethod | str") -> HTTPMethod:
    """Coerce *method* to an ``HTTPMethod``.

    Raises ``ConfigurationError`` for verbs a route cannot be bound to.
    """
    try:
        return HTTPMethod(str(method).upper())
    except ValueError:
        msg = f"Unsupported HTTP method {method!r}"
        raise ConfigurationError(msg) from None
