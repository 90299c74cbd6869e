"""Dependency container — singleton instances resolved by type.

Two ways in:

- ``provide(Key, factory, requires=(A, B))`` registers an explicit node
  of the dependency graph: *factory* is called with the resolved
  instances of *requires*, in order.
- Any other class is constructed from its ``__init__`` signature: each
  parameter annotated with a non-builtin class is resolved recursively,
  every other parameter falls back to its default value.

Every identifier is constructed at most once and cached for the life
of the container. ``set()`` pre-seeds the cache (test doubles, objects
built elsewhere).

Thread safety:
    Resolution holds a re-entrant lock for the whole recursive walk, so
    check-construct-cache is atomic: concurrent first requests for the
    same type still build exactly one instance. Cached lookups take a
    lock-free fast path.
"""

import importlib
import inspect
import logging
import threading
import typing
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from waypost._internal.types import TypeIdentifier
from waypost.errors import (
    CircularDependencyError,
    UnresolvableParameterError,
    UnresolvableTypeError,
)

logger = logging.getLogger("waypost.container")

_MISSING = object()


def import_type(identifier: TypeIdentifier) -> type:
    """Turn a type identifier into the class it names.

    Accepts a class, ``"package.module:Name"`` or ``"package.module.Name"``.
    Raises ``UnresolvableTypeError`` for anything else.
    """
    if isinstance(identifier, type):
        return identifier
    if not isinstance(identifier, str) or not identifier:
        msg = f"{identifier!r} is not a class or an import path"
        raise UnresolvableTypeError(msg)

    if ":" in identifier:
        module_path, _, attr_path = identifier.partition(":")
    else:
        module_path, _, attr_path = identifier.rpartition(".")
    if not module_path or not attr_path:
        msg = f"Class {identifier!r} does not exist"
        raise UnresolvableTypeError(msg)

    try:
        obj: Any = importlib.import_module(module_path)
        for part in attr_path.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as exc:
        msg = f"Class {identifier!r} does not exist"
        raise UnresolvableTypeError(msg) from exc

    if not isinstance(obj, type):
        msg = f"{identifier!r} resolved to {type(obj).__name__}, not a class"
        raise UnresolvableTypeError(msg)
    return obj


def _name(key: object) -> str:
    return getattr(key, "__qualname__", None) or repr(key)


@dataclass(frozen=True, slots=True)
class _Provider:
    """An explicit node in the dependency graph."""

    factory: Callable[..., Any]
    requires: tuple[object, ...]


class Container:
    """Constructs and caches one instance per type identifier.

    Usage::

        container = Container()
        container.provide(Database, lambda: Database("sqlite:///app.db"))
        container.provide(UserRepository, UserRepository, requires=(Database,))
        container.warm_up()

        repo = container.resolve(UserRepository)
        assert repo is container.resolve(UserRepository)
    """

    __slots__ = ("_instances", "_lock", "_providers")

    def __init__(self) -> None:
        self._instances: dict[object, Any] = {}
        self._providers: dict[object, _Provider] = {}
        self._lock = threading.RLock()

    # -- Registration --

    def set(self, identifier: TypeIdentifier, instance: Any) -> None:
        """Cache *instance* under *identifier*, overriding lazy construction."""
        key = self._key(identifier)
        with self._lock:
            self._instances[key] = instance

    def provide(
        self,
        identifier: TypeIdentifier,
        factory: Callable[..., Any],
        *,
        requires: Iterable[TypeIdentifier] = (),
    ) -> None:
        """Register *factory* as the way to build *identifier*.

        *factory* receives the resolved instances of *requires*,
        positionally and in order.
        """
        key = self._key(identifier)
        with self._lock:
            self._providers[key] = _Provider(
                factory=factory,
                requires=tuple(self._key(r) for r in requires),
            )

    # -- Lookup --

    def has(self, identifier: TypeIdentifier) -> bool:
        """True if an instance for *identifier* is already cached."""
        return self._key(identifier) in self._instances

    def resolve(self, identifier: TypeIdentifier) -> Any:
        """Return the singleton for *identifier*, constructing it if needed.

        Raises:
            UnresolvableTypeError: nothing constructible is named.
            UnresolvableParameterError: a constructor parameter can't be filled.
            CircularDependencyError: the type depends on itself.
        """
        key = self._key(identifier)
        instance = self._instances.get(key, _MISSING)
        if instance is not _MISSING:
            return instance
        with self._lock:
            return self._resolve(key, ())

    def warm_up(self, *identifiers: TypeIdentifier) -> None:
        """Build every provided type (plus *identifiers*) ahead of serving."""
        with self._lock:
            keys = [*self._providers, *(self._key(i) for i in identifiers)]
            for key in keys:
                self._resolve(key, ())
        logger.debug("Container warmed up with %d instance(s)", len(self._instances))

    # -- Internal --

    def _key(self, identifier: TypeIdentifier) -> object:
        if isinstance(identifier, str):
            return import_type(identifier)
        return identifier

    def _resolve(self, key: object, chain: tuple[object, ...]) -> Any:
        instance = self._instances.get(key, _MISSING)
        if instance is not _MISSING:
            return instance

        if key in chain:
            cycle = chain[chain.index(key) :]
            raise CircularDependencyError(tuple(_name(k) for k in (*cycle, key)))
        chain = (*chain, key)

        provider = self._providers.get(key)
        if provider is not None:
            args = [self._resolve(dep, chain) for dep in provider.requires]
            instance = provider.factory(*args)
        elif isinstance(key, type):
            instance = self._construct(key, chain)
        else:
            msg = f"Class {_name(key)!r} does not exist"
            raise UnresolvableTypeError(msg)

        self._instances[key] = instance
        logger.debug("Resolved %s", _name(key))
        return instance

    def _construct(self, cls: type, chain: tuple[object, ...]) -> Any:
        """Build *cls* by filling its constructor from the container."""
        if not _is_injectable(cls) or inspect.isabstract(cls):
            msg = f"{_name(cls)} cannot be constructed by the container"
            raise UnresolvableTypeError(msg)

        try:
            sig = inspect.signature(cls)
        except (TypeError, ValueError) as exc:
            msg = f"Cannot inspect the constructor of {_name(cls)}"
            raise UnresolvableTypeError(msg) from exc

        hints = _constructor_hints(cls)

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for name, param in sig.parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue

            annotation = hints.get(name, param.annotation)
            if _is_injectable(annotation) or annotation in self._providers:
                value = self._resolve(annotation, chain)
            elif param.default is not param.empty:
                value = param.default
            else:
                raise UnresolvableParameterError(_name(cls), name)

            if param.kind is param.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[name] = value

        return cls(*args, **kwargs)


def _constructor_hints(cls: type) -> dict[str, Any]:
    """Evaluated ``__init__`` annotations of *cls*.

    ``typing.get_type_hints`` fails as a whole when one annotation names
    something missing at runtime (a ``TYPE_CHECKING``-only import). The
    annotations are then evaluated one by one, and those that fail are
    left out so their parameters fall back to defaults.
    """
    init = cls.__init__
    try:
        return typing.get_type_hints(init)
    except (NameError, TypeError, AttributeError):
        pass

    namespace = getattr(init, "__globals__", {})
    try:
        raw = dict(getattr(init, "__annotations__", {}))
    except NameError:
        return {}

    hints: dict[str, Any] = {}
    for name, annotation in raw.items():
        if isinstance(annotation, str):
            try:
                annotation = eval(annotation, namespace)  # noqa: S307
            except (NameError, SyntaxError, TypeError, AttributeError):
                continue
        hints[name] = annotation
    return hints


def _is_injectable(annotation: object) -> bool:
    """True for user classes; False for builtins, typing forms and ``empty``."""
    return (
        isinstance(annotation, type)
        and annotation is not inspect.Parameter.empty
        and annotation.__module__ != "builtins"
    )
