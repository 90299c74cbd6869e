"""CORS policy — which origins may use which methods.

The dispatcher consults the policy before routing. A request passes when
some entry matches its origin (``"*"`` matches any origin, including a
missing one) and lists its method.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from waypost.routing.route import HTTPMethod

WILDCARD = "*"

# Headers sent on every request that passes the policy
ALLOW_METHODS = ", ".join(HTTPMethod)
ALLOW_HEADERS = "Content-Type, Authorization"


@dataclass(frozen=True, slots=True)
class CORSPolicy:
    """Read-only origin -> allowed-methods mapping.

    Usage::

        policy = CORSPolicy.from_mapping({
            "https://example.com": ["GET", "POST"],
            "*": ["GET"],
        })
        policy.allows("https://other.example", "GET")   # True
        policy.allows("https://other.example", "POST")  # False
    """

    origins: Mapping[str, frozenset[str]]

    @classmethod
    def from_mapping(cls, allowed: Mapping[str, Iterable[str]]) -> "CORSPolicy":
        """Build a policy; method names are upper-cased."""
        return cls(
            origins=MappingProxyType(
                {origin: frozenset(m.upper() for m in methods) for origin, methods in allowed.items()}
            )
        )

    @property
    def enabled(self) -> bool:
        """An empty policy means no CORS check at all."""
        return bool(self.origins)

    def allows(self, origin: str, method: str) -> bool:
        """True if any entry covers (*origin*, *method*)."""
        method = method.upper()
        return any(
            (allowed_origin == WILDCARD or allowed_origin == origin) and method in methods
            for allowed_origin, methods in self.origins.items()
        )

    def headers_for(self, origin: str) -> dict[str, str]:
        """Response headers for a request from *origin* that passed the policy."""
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        }
