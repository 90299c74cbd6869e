"""The App — owns the route table, the container and the dispatcher.

Setup calls register controllers, providers and hooks. The first
``dispatch()`` or ASGI call compiles everything and locks setup out.
"""

import inspect
import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any

import anyio

from waypost._internal.asgi import Receive, Scope, Send
from waypost._internal.types import Hook, TypeIdentifier
from waypost.config import AppConfig
from waypost.container import Container, import_type
from waypost.http.request import Request
from waypost.http.response import Response
from waypost.routing.descriptors import ControllerDescriptor
from waypost.routing.registrar import RouteRegistrar
from waypost.routing.route import HandlerTarget, HTTPMethod, Route
from waypost.routing.table import RouteTable
from waypost.server.cors import CORSPolicy
from waypost.server.dispatcher import Dispatcher
from waypost.server.handler import handle_request

logger = logging.getLogger("waypost.server")


class App:
    """The waypost application.

    Mutable during setup (controllers, routes, providers, hooks).
    Frozen when ``dispatch()`` or ``__call__()`` first runs: the route
    table is compiled, the container is warmed up, and every setup
    method starts raising ``RuntimeError``.

    Usage::

        app = App(AppConfig(base_path="/api"))
        app.add_controller(controller(UserController, get("/{id}", "show"), prefix="/users"))

        response = app.dispatch(Request("GET", "/api/users/42"))

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread compiles the app even when
        several worker threads hit it on the first request.
    """

    __slots__ = (
        "_container",
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_limiter",
        "_registrar",
        "_shutdown_hooks",
        "_startup_hooks",
        "_table",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        container: Container | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._container: Container = container or Container()
        self._table = RouteTable()
        self._registrar = RouteRegistrar(self._table)
        self._startup_hooks: list[Hook] = []
        self._shutdown_hooks: list[Hook] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set by _freeze()
        self._dispatcher: Dispatcher | None = None
        self._limiter: anyio.CapacityLimiter | None = None

    # -- Route registration --

    def add_controller(self, descriptor: ControllerDescriptor) -> bool:
        """Register a controller's routes.

        A malformed descriptor is logged and skipped. Returns whether the
        controller registered.
        """
        return self.add_controllers([descriptor]) == 1

    def add_controllers(self, descriptors: Iterable[ControllerDescriptor]) -> int:
        """Register several controllers; returns how many registered."""
        self._check_not_frozen()
        return self._registrar.register_all(descriptors)

    def route(
        self,
        method: HTTPMethod | str,
        path: str,
        controller: TypeIdentifier,
        action: str,
        *,
        middleware: Iterable[TypeIdentifier] = (),
    ) -> Route:
        """Register one route directly, without a descriptor.

        Unlike ``add_controller``, errors raise immediately.
        """
        self._check_not_frozen()
        target = HandlerTarget(controller=import_type(controller), action=action)
        return self._table.add(method, path, target, middleware)

    # -- Service injection --

    def provide(
        self,
        identifier: TypeIdentifier,
        factory: Callable[..., Any],
        *,
        requires: Iterable[TypeIdentifier] = (),
    ) -> None:
        """Register an explicit factory for *identifier*.

        Provided types are built once, in dependency order, when the app
        freezes::

            app.provide(Database, lambda: Database("sqlite:///app.db"))
            app.provide(UserRepository, UserRepository, requires=[Database])
        """
        self._check_not_frozen()
        self._container.provide(identifier, factory, requires=requires)

    def set(self, identifier: TypeIdentifier, instance: Any) -> None:
        """Pre-seed the container with an existing instance."""
        self._check_not_frozen()
        self._container.set(identifier, instance)

    # -- Lifecycle hooks --

    def on_startup(self, func: Hook) -> Hook:
        """Decorator: run *func* (sync or async) at lifespan startup.

        Startup hooks run in registration order after the app freezes.
        A failing hook reports ``lifespan.startup.failed`` to the server.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Introspection --

    @property
    def container(self) -> Container:
        return self._container

    @property
    def routes(self) -> list[Route]:
        """Every registered route, in matching order per method."""
        return self._table.routes

    # -- Dispatch --

    def dispatch(self, request: Request, response: Response | None = None) -> Response:
        """Route *request* synchronously and return the response.

        Request failures come back as 4xx/5xx JSON responses. Setup
        errors (a failing provider) raise from the call that freezes the app.
        """
        self._ensure_frozen()
        assert self._dispatcher is not None
        return self._dispatcher.dispatch(request, response)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()
        assert self._dispatcher is not None

        if self._limiter is None and self.config.worker_threads:
            self._limiter = anyio.CapacityLimiter(self.config.worker_threads)

        await handle_request(
            scope,
            receive,
            send,
            dispatcher=self._dispatcher,
            limiter=self._limiter,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Answer lifespan startup and shutdown.

        Startup freezes the app, so registration and provider errors
        surface before the server accepts traffic.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    await self.run_startup_hooks()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    logger.error("Startup failed: %s", exc, exc_info=exc)
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return

            elif msg_type == "lifespan.shutdown":
                await self.run_shutdown_hooks()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def run_startup_hooks(self) -> None:
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def run_shutdown_hooks(self) -> None:
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Freeze the route table
        self._table.compile()

        # 2. Make the app's own objects injectable, then build every
        #    provided type so graph errors surface at startup
        if not self._container.has(AppConfig):
            self._container.set(AppConfig, self.config)
        if not self._container.has(Container):
            self._container.set(Container, self._container)
        self._container.warm_up()

        # 3. Dispatcher
        self._dispatcher = Dispatcher(
            self._table,
            self._container,
            base_path=self.config.normalized_base_path,
            cors=CORSPolicy.from_mapping(self.config.allowed_origins),
        )
        self._frozen = True
        logger.debug("App frozen with %d route(s)", len(self._table))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register controllers, routes, and providers before the first request."
            )
            raise RuntimeError(msg)
