"""Waypost — request routing, middleware pipelines and dependency injection.

Maps an HTTP method + path to a controller action, runs the route's
middleware around it, and builds controllers through a constructor-
injection container.

Basic usage::

    from waypost import App, Request, controller, get

    class UserController:
        def show(self, request, response, params):
            (user_id,) = params
            return response.with_json({"id": user_id})

    app = App()
    app.add_controller(controller(UserController, get("/{id}", "show"), prefix="/users"))

    app.dispatch(Request("GET", "/users/42")).json()  # {"id": "42"}

``App`` is also an ASGI 3 application; serve it with any ASGI server.
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Container",
    "ControllerDescriptor",
    "HTTPError",
    "HTTPMethod",
    "Middleware",
    "Next",
    "RegistrationError",
    "Request",
    "Response",
    "RouteDescriptor",
    "WaypostError",
    "controller",
    "delete",
    "get",
    "patch",
    "post",
    "put",
    "route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypost`` fast while providing a clean top-level API.
    """
    if name == "App":
        from waypost.app import App

        return App

    if name == "AppConfig":
        from waypost.config import AppConfig

        return AppConfig

    if name == "Container":
        from waypost.container import Container

        return Container

    if name == "Request":
        from waypost.http.request import Request

        return Request

    if name == "Response":
        from waypost.http.response import Response

        return Response

    if name in ("Middleware", "Next"):
        from waypost.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in (
        "ControllerDescriptor",
        "RouteDescriptor",
        "controller",
        "delete",
        "get",
        "patch",
        "post",
        "put",
        "route",
    ):
        from waypost.routing import descriptors as _desc

        return getattr(_desc, name)

    if name == "HTTPMethod":
        from waypost.routing.route import HTTPMethod

        return HTTPMethod

    if name in ("ConfigurationError", "HTTPError", "RegistrationError", "WaypostError"):
        from waypost import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
