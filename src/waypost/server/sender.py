"""ASGI response sending — one waypost Response, two ASGI messages."""

from waypost._internal.asgi import Send
from waypost.http.response import Response

# 1xx, 204 and 304 never carry a message body
_BODYLESS_STATUSES = frozenset({204, 304})


def _may_have_body(status: int) -> bool:
    return status >= 200 and status not in _BODYLESS_STATUSES


def _raw_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    pairs = [("content-type", response.content_type), *response.headers]
    encoded = [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs]
    encoded.append((b"content-length", str(content_length).encode("latin-1")))
    return encoded


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send ``http.response.start`` followed by a single ``http.response.body``.

    For HEAD requests the headers (content-length included) describe the
    body GET would return, but the body itself is withheld.
    """
    body = response.body_bytes if _may_have_body(response.status) else b""

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": _raw_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": b"" if head else body})
