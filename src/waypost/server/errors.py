"""Error responses for the dispatch boundary.

Maps HTTPError exceptions and unexpected failures to JSON Response
objects. Bodies carry a message string only, never a traceback.
"""

import logging

from waypost.errors import HTTPError
from waypost.http.request import Request
from waypost.http.response import Response

logger = logging.getLogger("waypost.server")


def error_body(title: str, message: str) -> dict[str, str]:
    return {"error": title, "message": message}


def handle_http_error(exc: HTTPError, request: Request, response: Response) -> Response:
    """Answer an HTTPError with its status and a structured body."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.uri, exc.detail)
    resp = response.with_status(exc.status).with_json(error_body(exc.title, exc.detail))
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, request: Request, response: Response) -> Response:
    """Log an unexpected failure and answer 500 with its message."""
    logger.error("500 %s %s: %s", request.method, request.uri, exc, exc_info=exc)
    return response.with_status(500).with_json(error_body("Internal Server Error", str(exc)))
