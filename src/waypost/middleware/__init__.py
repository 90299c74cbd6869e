"""Middleware — Protocol-based, no inheritance required.

A middleware is any class whose instances match:
    def handle(self, request: Request, response: Response, next: Next) -> Response

Routes name middleware by type; the container builds each one once.

Built-in middleware:
    SecurityHeadersMiddleware -- X-Content-Type-Options, X-Frame-Options, Referrer-Policy
"""

from waypost.middleware.pipeline import compose
from waypost.middleware.protocol import Handler, Middleware, Next
from waypost.middleware.security_headers import (
    SecurityHeadersConfig,
    SecurityHeadersMiddleware,
)

__all__ = [
    "Handler",
    "Middleware",
    "Next",
    "SecurityHeadersConfig",
    "SecurityHeadersMiddleware",
    "compose",
]
