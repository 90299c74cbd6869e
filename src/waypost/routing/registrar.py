"""Route registrar — controller descriptors into route table entries.

The only component that reads the descriptor format. A malformed
controller is logged and skipped; the rest still register.
"""

import logging
from collections.abc import Iterable

from waypost._internal.types import TypeIdentifier
from waypost.container import import_type
from waypost.errors import ConfigurationError, RegistrationError, UnresolvableTypeError
from waypost.routing.descriptors import ControllerDescriptor
from waypost.routing.matcher import compile_path
from waypost.routing.route import HandlerTarget, HTTPMethod, parse_method
from waypost.routing.table import RouteTable, normalize_path

logger = logging.getLogger("waypost.routing")


class RouteRegistrar:
    """Feeds ``ControllerDescriptor`` objects into a ``RouteTable``.

    While a controller registers, its group prefix is appended to the
    active prefix and restored afterwards. Only one registration is in
    flight at a time: a registrar is not safe to share between threads.
    """

    __slots__ = ("_prefix", "table")

    def __init__(self, table: RouteTable) -> None:
        self.table = table
        self._prefix = ""

    def register(self, descriptor: ControllerDescriptor) -> int:
        """Register every route of *descriptor*. Returns the number added.

        Raises ``RegistrationError`` if the descriptor is malformed; in
        that case no route of this controller is added.
        """
        cls = self._controller_class(descriptor.controller)

        previous = self._prefix
        self._prefix = previous + descriptor.prefix
        try:
            pending = [
                self._pending_route(cls, descriptor, rd.method, rd.path, rd.action, rd.middleware)
                for rd in descriptor.routes
            ]
        finally:
            self._prefix = previous

        for method, path, target, middleware in pending:
            self.table.add(method, path, target, middleware)
        return len(pending)

    def register_all(self, descriptors: Iterable[ControllerDescriptor]) -> int:
        """Register each descriptor, skipping (and logging) broken ones.

        Returns how many controllers registered successfully.
        """
        registered = 0
        for descriptor in descriptors:
            try:
                count = self.register(descriptor)
            except RegistrationError as exc:
                logger.error("Skipping controller %s: %s", descriptor, exc)
                continue
            logger.debug("Registered %d route(s) from %s", count, descriptor)
            registered += 1
        return registered

    # -- Internal --

    def _controller_class(self, identifier: TypeIdentifier) -> type:
        try:
            return import_type(identifier)
        except UnresolvableTypeError as exc:
            raise RegistrationError(str(exc)) from exc

    def _pending_route(
        self,
        cls: type,
        descriptor: ControllerDescriptor,
        method: HTTPMethod | str,
        path: str,
        action: str,
        middleware: tuple[TypeIdentifier, ...],
    ) -> tuple[HTTPMethod, str, HandlerTarget, tuple[TypeIdentifier, ...]]:
        full_path = self._prefix + path
        try:
            verb = parse_method(method)
            compile_path(normalize_path(full_path))
        except ConfigurationError as exc:
            raise RegistrationError(f"{descriptor}.{action}: {exc}") from exc

        if not callable(getattr(cls, action, None)):
            msg = f"{cls.__qualname__} has no callable action {action!r}"
            raise RegistrationError(msg)

        return (
            verb,
            full_path,
            HandlerTarget(controller=cls, action=action),
            (*descriptor.middleware, *middleware),
        )
