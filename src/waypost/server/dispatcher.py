"""Dispatcher — one request in, one response out.

Strips the base path, applies the CORS policy, finds the first matching
route, runs its middleware chain around the controller action, and turns
every failure into a JSON error response. Nothing raised below
``dispatch()`` escapes it.
"""

import logging

from waypost.container import Container
from waypost.errors import (
    HandlerExecutionError,
    HTTPError,
    OriginNotAllowedError,
    ResolutionError,
    RouteNotFoundError,
)
from waypost.http.request import Request
from waypost.http.response import Response
from waypost.middleware.pipeline import compose
from waypost.middleware.protocol import Handler
from waypost.routing.route import RouteMatch
from waypost.routing.table import RouteTable
from waypost.server.cors import CORSPolicy
from waypost.server.errors import handle_http_error, handle_internal_error

logger = logging.getLogger("waypost.server")


class Dispatcher:
    """Routes requests through a frozen ``RouteTable``.

    Usage::

        dispatcher = Dispatcher(table, container, base_path="/api")
        response = dispatcher.dispatch(request, Response())
    """

    __slots__ = ("base_path", "container", "cors", "table")

    def __init__(
        self,
        table: RouteTable,
        container: Container,
        *,
        base_path: str = "",
        cors: CORSPolicy | None = None,
    ) -> None:
        self.table = table
        self.container = container
        self.base_path = base_path.rstrip("/")
        self.cors = cors

    def dispatch(self, request: Request, response: Response | None = None) -> Response:
        """Handle *request*, starting from *response* (a blank 200 by default)."""
        response = response if response is not None else Response()
        try:
            path = self.route_path(request.path)

            if self.cors is not None and self.cors.enabled:
                origin = request.origin
                if not self.cors.allows(origin, request.method):
                    raise OriginNotAllowedError
                response = response.with_headers(self.cors.headers_for(origin))

            match = self.table.match(request.method, path)
            if match is None:
                raise RouteNotFoundError
            return self._invoke(match, request, response)

        except HTTPError as exc:
            return handle_http_error(exc, request, response)
        except Exception as exc:
            return handle_internal_error(exc, request, response)

    def route_path(self, path: str) -> str:
        """The path to match: *path* with the base path removed."""
        path = path or "/"
        base = self.base_path
        if base and (path == base or path.startswith(base + "/")):
            path = path[len(base) :] or "/"
        return path

    # -- Internal --

    def _invoke(self, match: RouteMatch, request: Request, response: Response) -> Response:
        route = match.route
        handler = compose(route.middleware, self._terminal(match), self.container)

        try:
            result = handler(request, response)
        except (HTTPError, ResolutionError, HandlerExecutionError):
            raise
        except Exception as exc:
            raise HandlerExecutionError(str(exc)) from exc

        if not isinstance(result, Response):
            msg = f"{route.target} returned {type(result).__name__}, expected Response"
            raise HandlerExecutionError(msg)
        return result

    def _terminal(self, match: RouteMatch) -> Handler:
        target = match.route.target
        params = match.params
        container = self.container

        def terminal(request: Request, response: Response) -> Response:
            controller = container.resolve(target.controller)
            action = getattr(controller, target.action)
            return action(request, response, params)

        return terminal
