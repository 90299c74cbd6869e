"""Immutable HTTP request.

Frozen metadata plus the fully-read body. Dispatch is synchronous, so
the ASGI layer reads the body before the request reaches routing.
"""

import json as json_module
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from waypost._internal.asgi import Scope
from waypost.http.headers import Headers


def split_target(target: str) -> tuple[str, str]:
    """Path ("/" when empty) and query string of a request target.

    Never raises: a target ``urlsplit`` rejects, such as ``//[x/a``, is
    cut at ``?`` and ``#`` instead.
    """
    try:
        parts = urlsplit(target)
    except ValueError:
        rest, _, query = target.partition("?")
        return rest.partition("#")[0] or "/", query.partition("#")[0]
    return parts.path or "/", parts.query


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``uri`` is the request target as received: a path with an optional
    query string, or an absolute URL. ``path`` is derived from it unless
    ``target_path`` carries the path the server already parsed.
    """

    method: str
    uri: str
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None
    target_path: str | None = None

    # -- Computed properties --

    @property
    def path(self) -> str:
        """The path component of ``uri`` ("/" when empty)."""
        if self.target_path is not None:
            return self.target_path or "/"
        return split_target(self.uri)[0]

    @property
    def query_string(self) -> str:
        if self.target_path is not None:
            return self.uri.partition("?")[2]
        return split_target(self.uri)[1]

    @property
    def origin(self) -> str:
        """The ``Origin`` header, or "" when the client sent none."""
        return self.headers.get("origin") or ""

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    # -- Body access --

    def text(self) -> str:
        """Decode the body as UTF-8."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body)

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, body: bytes = b"") -> "Request":
        """Create a Request from an ASGI HTTP scope and its collected body."""
        path = scope["path"]
        query = scope.get("query_string", b"")
        uri = f"{path}?{query.decode('latin-1')}" if query else path
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            uri=uri,
            headers=Headers.from_asgi(scope.get("headers", ())),
            body=body,
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            target_path=path,
        )
