"""Waypost exception hierarchy.

Shared across the container, routing, middleware and dispatcher so every
module raises and catches the same types.
"""

from dataclasses import dataclass
from http import HTTPStatus


class WaypostError(Exception):
    """Base for all waypost-specific errors."""


class ConfigurationError(WaypostError):
    """Raised when app configuration or a route template is invalid.

    Typically surfaces during setup, before the first request.
    """


class RegistrationError(WaypostError):
    """A controller descriptor could not be turned into routes.

    The registrar logs it and skips that controller; other controllers
    still register.
    """


# -- Dependency resolution --


class ResolutionError(WaypostError):
    """The container could not produce an instance."""


class UnresolvableTypeError(ResolutionError):
    """The identifier names nothing the container can construct."""


class UnresolvableParameterError(ResolutionError):
    """A constructor parameter has no resolvable type and no default."""

    def __init__(self, owner: str, parameter: str) -> None:
        self.owner = owner
        self.parameter = parameter
        super().__init__(f"Cannot resolve parameter {parameter!r} of {owner}")


class CircularDependencyError(ResolutionError):
    """A type depends on itself, directly or transitively."""

    def __init__(self, chain: tuple[str, ...]) -> None:
        self.chain = chain
        super().__init__("Circular dependency: " + " -> ".join(chain))


# -- Dispatch --


class HandlerExecutionError(WaypostError):
    """A middleware or terminal handler failed.

    The original exception is kept as ``__cause__``; the message is the
    original message so the 500 body stays meaningful.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WaypostError):
    """An error that maps directly to an HTTP status code.

    Raised by the dispatcher, middleware, or handlers. The dispatcher
    catches these and answers with ``{"error": ..., "message": ...}``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def title(self) -> str:
        """Reason phrase for the status (``"Not Found"`` for 404)."""
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Error"

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class RouteNotFoundError(HTTPError):
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "No route matches the provided URI") -> None:
        super().__init__(status=404, detail=detail)


class OriginNotAllowedError(HTTPError):
    """403 — the CORS policy rejects the (origin, method) pair."""

    def __init__(self, detail: str = "Origin or method not allowed") -> None:
        super().__init__(status=403, detail=detail)
