"""Tests for waypost.routing.registrar — descriptors into the route table."""

import logging

import pytest

from waypost.errors import RegistrationError
from waypost.routing.descriptors import controller, delete, get, post, route
from waypost.routing.registrar import RouteRegistrar
from waypost.routing.route import HandlerTarget, HTTPMethod
from waypost.routing.table import RouteTable


class Auth:
    def handle(self, request, response, next):
        return next(request, response)


class Audit:
    def handle(self, request, response, next):
        return next(request, response)


class UserController:
    def index(self, request, response, params):
        return response

    def show(self, request, response, params):
        return response

    def create(self, request, response, params):
        return response

    def remove(self, request, response, params):
        return response

    not_callable = "nope"


class HealthController:
    def ping(self, request, response, params):
        return response


def _registrar() -> tuple[RouteRegistrar, RouteTable]:
    table = RouteTable()
    return RouteRegistrar(table), table


class TestRegister:
    def test_prefix_and_paths(self) -> None:
        registrar, table = _registrar()
        count = registrar.register(
            controller(
                UserController,
                get("/", "index"),
                get("/{id}", "show"),
                post("/", "create"),
                prefix="/users",
            )
        )
        assert count == 3
        assert [(r.method, r.path) for r in table.routes] == [
            (HTTPMethod.GET, "/users"),
            (HTTPMethod.GET, "/users/{id}"),
            (HTTPMethod.POST, "/users"),
        ]

    def test_no_prefix(self) -> None:
        registrar, table = _registrar()
        registrar.register(controller(HealthController, get("/health", "ping")))
        assert table.routes[0].path == "/health"

    def test_target_names_class_and_action(self) -> None:
        registrar, table = _registrar()
        registrar.register(controller(UserController, get("/{id}", "show"), prefix="/users"))
        assert table.routes[0].target == HandlerTarget(UserController, "show")
        assert str(table.routes[0].target) == "UserController.show"

    def test_class_middleware_precedes_route_middleware(self) -> None:
        registrar, table = _registrar()
        registrar.register(
            controller(
                UserController,
                delete("/{id}", "remove", middleware=[Audit]),
                get("/", "index"),
                prefix="/users",
                middleware=[Auth],
            )
        )
        remove, index = table.for_method("DELETE")[0], table.for_method("GET")[0]
        assert remove.middleware == (Auth, Audit)
        assert index.middleware == (Auth,)

    def test_generic_route_helper(self) -> None:
        registrar, table = _registrar()
        registrar.register(controller(UserController, route("patch", "/{id}", "show")))
        assert table.routes[0].method is HTTPMethod.PATCH

    def test_controller_by_import_string(self) -> None:
        registrar, table = _registrar()
        registrar.register(
            controller(f"{__name__}:HealthController", get("/health", "ping"))
        )
        assert table.routes[0].target.controller is HealthController

    def test_prefix_restored_after_register(self) -> None:
        registrar, table = _registrar()
        registrar.register(controller(UserController, get("/", "index"), prefix="/users"))
        registrar.register(controller(HealthController, get("/health", "ping")))
        assert [r.path for r in table.routes] == ["/users", "/health"]

    def test_prefix_restored_after_failure(self) -> None:
        registrar, table = _registrar()
        with pytest.raises(RegistrationError):
            registrar.register(
                controller(UserController, get("/", "missing"), prefix="/users")
            )
        registrar.register(controller(HealthController, get("/health", "ping")))
        assert [r.path for r in table.routes] == ["/health"]


class TestMalformed:
    def test_unknown_class(self) -> None:
        registrar, _ = _registrar()
        with pytest.raises(RegistrationError, match="does not exist"):
            registrar.register(controller("no_such_module:Nothing", get("/", "index")))

    def test_unknown_verb(self) -> None:
        registrar, _ = _registrar()
        with pytest.raises(RegistrationError):
            registrar.register(controller(UserController, route("FETCH", "/", "index")))

    def test_missing_action(self) -> None:
        registrar, _ = _registrar()
        with pytest.raises(RegistrationError, match="missing"):
            registrar.register(controller(UserController, get("/", "missing")))

    def test_non_callable_action(self) -> None:
        registrar, _ = _registrar()
        with pytest.raises(RegistrationError, match="not_callable"):
            registrar.register(controller(UserController, get("/", "not_callable")))

    def test_duplicate_param_names(self) -> None:
        registrar, _ = _registrar()
        with pytest.raises(RegistrationError):
            registrar.register(controller(UserController, get("/{id}/{id}", "show")))

    def test_no_partial_registration(self) -> None:
        registrar, table = _registrar()
        with pytest.raises(RegistrationError):
            registrar.register(
                controller(UserController, get("/", "index"), get("/x", "missing"))
            )
        assert len(table) == 0


class TestRegisterAll:
    def test_skips_broken_controller(self, caplog: pytest.LogCaptureFixture) -> None:
        registrar, table = _registrar()
        with caplog.at_level(logging.ERROR, logger="waypost.routing"):
            count = registrar.register_all(
                [
                    controller(UserController, get("/", "missing"), prefix="/users"),
                    controller(HealthController, get("/health", "ping")),
                ]
            )
        assert count == 1
        assert [r.path for r in table.routes] == ["/health"]
        assert "Skipping controller UserController" in caplog.text

    def test_empty(self) -> None:
        registrar, table = _registrar()
        assert registrar.register_all([]) == 0
        assert len(table) == 0
