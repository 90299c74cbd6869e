"""The value that flows through a middleware chain.

The dispatcher starts every request with a blank 200 ``Response``.
Middleware and actions never mutate it: each ``with_*()`` call returns a
copy, and whatever copy comes back out of the chain is sent.
"""

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True, slots=True)
class Response:
    """Status, content type, extra headers and body.

    ::

        return response.with_status(201).with_json({"id": "42"})
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Copies with one field changed --

    def with_status(self, status: int) -> "Response":
        """Copy with *status*."""
        return replace(self, status=status)

    def with_json(self, data: Any) -> "Response":
        """Copy whose body is *data* as compact JSON."""
        return replace(
            self,
            body=json_module.dumps(data, separators=(",", ":")),
            content_type=JSON_CONTENT_TYPE,
        )

    def with_body(self, body: str | bytes) -> "Response":
        """Copy with *body*."""
        return replace(self, body=body)

    def with_header(self, name: str, value: str) -> "Response":
        """Copy with one more header; existing values are kept."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        """Copy with every pair of *headers* appended."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str) -> "Response":
        """Copy with *content_type*."""
        return replace(self, content_type=content_type)

    # -- Read access --

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), if present."""
        name_lower = name.lower()
        for key, value in self.headers:
            if key.lower() == name_lower:
                return value
        return None

    @property
    def body_bytes(self) -> bytes:
        """The body as UTF-8 bytes."""
        body = self.body
        return body if isinstance(body, bytes) else body.encode("utf-8")

    @property
    def text(self) -> str:
        body = self.body
        return body.decode("utf-8") if isinstance(body, bytes) else body

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body_bytes)
