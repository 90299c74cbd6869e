"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups. Nothing here reads files or the environment.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from waypost.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(
            base_path="/api",
            allowed_origins={"https://example.com": ["GET", "POST"], "*": ["GET"]},
        )
    """

    # Routing
    base_path: str = ""  # Stripped from request paths before matching

    # CORS: origin -> allowed methods; "*" matches any origin.
    # Empty mapping disables the CORS check entirely.
    allowed_origins: Mapping[str, Iterable[str]] = field(default_factory=dict)

    # Dispatch runs in worker threads; 0 keeps anyio's default limiter
    worker_threads: int = 0

    def __post_init__(self) -> None:
        if self.base_path and not self.base_path.startswith("/"):
            msg = f"base_path must start with '/', got {self.base_path!r}"
            raise ConfigurationError(msg)
        if self.worker_threads < 0:
            msg = f"worker_threads must be >= 0, got {self.worker_threads}"
            raise ConfigurationError(msg)

    @property
    def normalized_base_path(self) -> str:
        """``base_path`` without a trailing slash ("" when unset or "/")."""
        return self.base_path.rstrip("/")
