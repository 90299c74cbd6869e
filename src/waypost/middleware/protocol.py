"""Middleware protocol and the Handler / Next type aliases.

A middleware is any class whose instances have a ``handle`` method::

    class Timing:
        def handle(self, request: Request, response: Response, next: Next) -> Response:
            start = time.monotonic()
            response = next(request, response)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")

No base class required. Routes name middleware by type; the container
builds (and caches) the instance, so a middleware may declare its own
constructor dependencies.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from waypost.http.request import Request
from waypost.http.response import Response

# The next handler in the chain, and the composed chain itself
type Handler = Callable[[Request, Response], Response]
type Next = Handler


@runtime_checkable
class Middleware(Protocol):
    """Protocol for waypost middleware.

    Code before ``next(request, response)`` runs on the way in, code
    after it runs on the way out. Returning without calling ``next``
    short-circuits the rest of the chain, handler included.
    """

    def handle(self, request: Request, response: Response, next: Next) -> Response: ...
