"""ASGI handler — translates ASGI scope/messages to waypost types.

The only component that touches raw ASGI HTTP messages. Reads the whole
request body, converts the scope to a Request, runs the (synchronous)
dispatcher on a worker thread, and sends the Response back.
"""

import logging

import anyio
import anyio.to_thread

from waypost._internal.asgi import Receive, Scope, Send
from waypost.http.request import Request
from waypost.http.response import Response
from waypost.server.dispatcher import Dispatcher
from waypost.server.sender import send_response

logger = logging.getLogger("waypost.server")


class ClientDisconnected(Exception):
    """The client went away before the request body was complete."""


async def read_body(receive: Receive) -> bytes:
    """Collect every ``http.request`` chunk into one bytes object."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            raise ClientDisconnected
        body = message.get("body", b"")
        if body:
            chunks.append(body)
        if not message.get("more_body", False):
            return b"".join(chunks)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
    limiter: anyio.CapacityLimiter | None = None,
) -> None:
    """Process a single HTTP request through the dispatcher."""
    if scope["type"] != "http":
        return

    try:
        body = await read_body(receive)
    except ClientDisconnected:
        logger.debug("Client disconnected before %s %s was read", scope["method"], scope["path"])
        return

    request = Request.from_asgi(scope, body)
    response = await anyio.to_thread.run_sync(
        dispatcher.dispatch, request, Response(), limiter=limiter
    )
    await send_response(response, send, head=request.method == "HEAD")
