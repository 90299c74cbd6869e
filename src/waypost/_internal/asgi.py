"""ASGI callable signatures used by the server layer.

Scopes and messages stay plain mappings; ``Request.from_asgi`` is the
only place that reads scope keys.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

type Message = MutableMapping[str, Any]
type Scope = MutableMapping[str, Any]
type Receive = Callable[[], Awaitable[Message]]
type Send = Callable[[Message], Awaitable[None]]
