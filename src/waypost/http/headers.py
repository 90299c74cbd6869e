"""Request headers as a read-only, case-insensitive mapping.

Names are folded to lower case on the way in. Repeated headers keep
every value in arrival order; plain lookups see the first one.
"""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only ``Mapping[str, str]`` over HTTP header pairs.

    ``headers["Origin"]`` is the first ``origin`` value;
    ``headers.get_list("accept")`` returns all of them.
    """

    __slots__ = ("_index", "_pairs")

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        folded = tuple((name.lower(), value) for name, value in pairs)
        index: dict[str, list[str]] = {}
        for name, value in folded:
            index.setdefault(name, []).append(value)
        self._pairs = folded
        self._index = {name: tuple(values) for name, values in index.items()}

    @classmethod
    def from_asgi(cls, raw: Iterable[tuple[bytes, bytes]]) -> "Headers":
        """Decode ASGI byte pairs; header octets are latin-1."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)

    @classmethod
    def from_dict(cls, headers: Mapping[str, str] | None) -> "Headers":
        return cls((headers or {}).items())

    # -- Mapping --

    def __getitem__(self, name: str) -> str:
        values = self._index.get(name.lower())
        if not values:
            raise KeyError(name)
        return values[0]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"Headers({list(self._pairs)!r})"

    # -- Multi-value access --

    def get_list(self, name: str) -> list[str]:
        """Every value sent for *name*, in arrival order."""
        return list(self._index.get(name.lower(), ()))

    @property
    def pairs(self) -> tuple[tuple[str, str], ...]:
        """All (lower-cased name, value) pairs as received."""
        return self._pairs
