"""Tests for waypost.app — setup, freeze, dispatch and the ASGI surface."""

import logging

import pytest

from waypost import App, AppConfig, Container, Request, controller, get, post
from waypost.http.headers import Headers
from waypost.routing.route import HTTPMethod
from waypost.testing import TestClient


class Greeter:
    def __init__(self, greeting: str = "hello") -> None:
        self.greeting = greeting


class UserController:
    def __init__(self, greeter: Greeter) -> None:
        self.greeter = greeter

    def show(self, request, response, params):
        (user_id,) = params
        return response.with_json({"id": user_id, "greeting": self.greeter.greeting})

    def create(self, request, response, params):
        return response.with_status(201).with_json(request.json())

    def meta(self, request, response, params):
        return response.with_header("X-Meta", "yes").with_body("abcdef")


class HealthController:
    def ping(self, request, response, params):
        return response.with_body("pong")


class NeedsConfig:
    def __init__(self, config: AppConfig, container: Container) -> None:
        self.config = config
        self.container = container

    def show(self, request, response, params):
        return response.with_json({"base": self.config.base_path})


USERS = controller(
    UserController,
    get("/{id}", "show"),
    post("/", "create"),
    prefix="/users",
)


def _make_app(config: AppConfig | None = None) -> App:
    app = App(config)
    app.add_controller(USERS)
    app.add_controller(controller(HealthController, get("/health", "ping")))
    return app


class TestSetup:
    def test_add_controller_reports_success(self) -> None:
        app = App()
        assert app.add_controller(USERS) is True
        assert len(app.routes) == 2

    def test_add_controller_skips_broken(self, caplog: pytest.LogCaptureFixture) -> None:
        app = App()
        with caplog.at_level(logging.ERROR, logger="waypost.routing"):
            ok = app.add_controller(controller(UserController, get("/", "missing")))
        assert ok is False
        assert app.routes == []
        assert "missing" in caplog.text

    def test_add_controllers_counts(self) -> None:
        app = App()
        count = app.add_controllers(
            [
                USERS,
                controller("nowhere:Nothing", get("/", "x")),
                controller(HealthController, get("/health", "ping")),
            ]
        )
        assert count == 2

    def test_route_direct(self) -> None:
        app = App()
        route = app.route("get", "/ping", HealthController, "ping")
        assert route.method is HTTPMethod.GET
        assert app.dispatch(Request("GET", "/ping")).text == "pong"

    def test_set_overrides_dependency(self) -> None:
        app = _make_app()
        app.set(Greeter, Greeter("hi"))
        assert app.dispatch(Request("GET", "/users/1")).json() == {"id": "1", "greeting": "hi"}

    def test_provide_factory(self) -> None:
        app = _make_app()
        app.provide(Greeter, lambda: Greeter("provided"))
        assert app.dispatch(Request("GET", "/users/1")).json()["greeting"] == "provided"

    def test_app_objects_are_injectable(self) -> None:
        app = App(AppConfig(base_path="/api"))
        app.add_controller(controller(NeedsConfig, get("/", "show")))
        assert app.dispatch(Request("GET", "/api")).json() == {"base": "/api"}
        assert app.container.resolve(NeedsConfig).container is app.container

    def test_shared_container(self) -> None:
        container = Container()
        container.set(Greeter, Greeter("shared"))
        app = App(container=container)
        app.add_controller(USERS)
        assert app.dispatch(Request("GET", "/users/9")).json()["greeting"] == "shared"


class TestFreeze:
    def test_dispatch_freezes(self) -> None:
        app = _make_app()
        app.dispatch(Request("GET", "/health"))
        with pytest.raises(RuntimeError, match="Cannot modify"):
            app.add_controller(USERS)

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda app: app.route("GET", "/x", HealthController, "ping"),
            lambda app: app.provide(Greeter, Greeter),
            lambda app: app.set(Greeter, Greeter()),
            lambda app: app.on_startup(lambda: None),
            lambda app: app.on_shutdown(lambda: None),
        ],
    )
    def test_setup_methods_raise_after_freeze(self, mutate) -> None:
        app = _make_app()
        app.dispatch(Request("GET", "/health"))
        with pytest.raises(RuntimeError):
            mutate(app)

    def test_warm_up_surfaces_provider_errors(self) -> None:
        app = _make_app()

        def fail() -> Greeter:
            raise ValueError("no greeter today")

        app.provide(Greeter, fail)
        with pytest.raises(ValueError, match="no greeter today"):
            app.dispatch(Request("GET", "/health"))


class TestDispatch:
    def test_end_to_end(self) -> None:
        app = _make_app()
        response = app.dispatch(Request("GET", "/users/42"))
        assert response.status == 200
        assert response.json() == {"id": "42", "greeting": "hello"}

    def test_not_found(self) -> None:
        response = _make_app().dispatch(Request("GET", "/unknown"))
        assert response.status == 404
        assert response.json()["message"] == "No route matches the provided URI"

    def test_base_path(self) -> None:
        app = _make_app(AppConfig(base_path="/api"))
        assert app.dispatch(Request("GET", "/api/users/42")).json()["id"] == "42"
        assert app.dispatch(Request("GET", "/users/42")).status == 404

    def test_cors_from_config(self) -> None:
        app = _make_app(AppConfig(allowed_origins={"https://example.com": ["GET"]}))
        evil = Request("GET", "/health", headers=Headers([("Origin", "https://evil.example")]))
        good = Request("GET", "/health", headers=Headers([("Origin", "https://example.com")]))
        assert app.dispatch(evil).status == 403
        assert app.dispatch(good).header("Access-Control-Allow-Origin") == "https://example.com"


class TestASGI:
    async def test_get(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/users/42")
        assert response.status == 200
        assert response.json() == {"id": "42", "greeting": "hello"}
        assert response.content_type == "application/json"

    async def test_post_json(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.post("/users", json={"name": "ada"})
        assert response.status == 201
        assert response.json() == {"name": "ada"}

    async def test_query_string(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/users/7?verbose=1")
        assert response.json()["id"] == "7"

    async def test_not_found(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("/missing")
        assert response.status == 404
        assert response.json() == {
            "error": "Not Found",
            "message": "No route matches the provided URI",
        }

    async def test_unparseable_path(self) -> None:
        async with TestClient(_make_app()) as client:
            response = await client.get("//[x/users/1")
        assert response.status == 404
        assert response.json()["message"] == "No route matches the provided URI"

    async def test_double_slash_path_is_not_a_host(self) -> None:
        app = App()
        app.route("GET", "/{id}", UserController, "show")
        async with TestClient(app) as client:
            assert (await client.get("/42")).json()["id"] == "42"
            assert (await client.get("//users/42")).status == 404

    async def test_head_has_no_body(self) -> None:
        app = App()
        app.route("HEAD", "/meta", UserController, "meta")
        async with TestClient(app) as client:
            response = await client.request("HEAD", "/meta")
        assert response.status == 200
        assert response.body == b""
        assert response.header("x-meta") == "yes"

    async def test_limited_worker_threads(self) -> None:
        async with TestClient(_make_app(AppConfig(worker_threads=2))) as client:
            responses = [await client.get(f"/users/{i}") for i in range(3)]
        assert [r.json()["id"] for r in responses] == ["0", "1", "2"]

    async def test_hooks_run_in_order(self) -> None:
        app = _make_app()
        events: list[str] = []

        @app.on_startup
        def sync_start() -> None:
            events.append("start-sync")

        @app.on_startup
        async def async_start() -> None:
            events.append("start-async")

        @app.on_shutdown
        async def stop() -> None:
            events.append("stop")

        async with TestClient(app) as client:
            await client.get("/health")
            events.append("request")

        assert events == ["start-sync", "start-async", "request", "stop"]


class TestLifespan:
    async def _run(self, app: App) -> list[dict]:
        incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent: list[dict] = []

        async def receive() -> dict:
            return incoming.pop(0)

        async def send(message: dict) -> None:
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)
        return sent

    async def test_startup_and_shutdown(self) -> None:
        app = _make_app()
        sent = await self._run(app)
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]
        with pytest.raises(RuntimeError):
            app.add_controller(USERS)

    async def test_startup_failure(self) -> None:
        app = _make_app()

        @app.on_startup
        def explode() -> None:
            raise RuntimeError("db offline")

        sent = await self._run(app)
        assert sent == [{"type": "lifespan.startup.failed", "message": "db offline"}]
