"""Middleware composition — the onion.

``compose([A, B], terminal, container)`` returns one handler that runs
``A.handle -> B.handle -> terminal`` on the way in and unwinds in
reverse on the way out.
"""

from collections.abc import Iterable

from waypost._internal.types import TypeIdentifier
from waypost.container import Container
from waypost.errors import HandlerExecutionError
from waypost.http.request import Request
from waypost.http.response import Response
from waypost.middleware.protocol import Handler


def compose(
    middleware: Iterable[TypeIdentifier],
    terminal: Handler,
    container: Container,
) -> Handler:
    """Wrap *terminal* in *middleware*, first identifier outermost.

    Instances are resolved through *container* when their layer runs,
    so an unresolvable middleware fails the request that reaches it.
    Duplicate identifiers produce one layer per occurrence.
    """
    handler = terminal
    for identifier in reversed(tuple(middleware)):
        handler = _layer(identifier, handler, container)
    return handler


def _layer(identifier: TypeIdentifier, inner: Handler, container: Container) -> Handler:
    def run(request: Request, response: Response) -> Response:
        instance = container.resolve(identifier)
        handle = getattr(instance, "handle", None)
        if not callable(handle):
            name = getattr(identifier, "__qualname__", identifier)
            msg = f"Middleware {name} has no handle(request, response, next) method"
            raise HandlerExecutionError(msg)
        return handle(request, response, inner)

    return run
