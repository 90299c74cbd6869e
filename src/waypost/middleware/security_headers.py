"""Security headers middleware — X-Content-Type-Options, X-Frame-Options, Referrer-Policy.

Meant for JSON APIs: headers go on every response the chain produces,
error responses from inner middleware included.
"""

from dataclasses import dataclass

from waypost.http.request import Request
from waypost.http.response import Response
from waypost.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class SecurityHeadersConfig:
    """Configuration for security headers.

    All values are applied as-is. Use standard header values.
    The container builds the default instance; ``app.set()`` a custom
    one to override.
    """

    x_content_type_options: str = "nosniff"
    x_frame_options: str = "DENY"
    referrer_policy: str = "no-referrer"
    strict_transport_security: str | None = None


class SecurityHeadersMiddleware:
    """Add security headers to responses.

    Usage::

        controller(ApiController, get("/", "index"), middleware=[SecurityHeadersMiddleware])

    Or with custom config::

        app.set(SecurityHeadersConfig, SecurityHeadersConfig(x_frame_options="SAMEORIGIN"))
    """

    __slots__ = ("config",)

    def __init__(self, config: SecurityHeadersConfig) -> None:
        self.config = config

    def handle(self, request: Request, response: Response, next: Next) -> Response:
        response = next(request, response)
        cfg = self.config
        secured = (
            response.with_header("X-Content-Type-Options", cfg.x_content_type_options)
            .with_header("X-Frame-Options", cfg.x_frame_options)
            .with_header("Referrer-Policy", cfg.referrer_policy)
        )
        if cfg.strict_transport_security:
            secured = secured.with_header(
                "Strict-Transport-Security", cfg.strict_transport_security
            )
        return secured
