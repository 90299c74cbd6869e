"""Routing — path templates, the route table, and controller registration.

Routes are registered during setup and the table is frozen before the
first request is dispatched.
"""

from waypost.routing.descriptors import (
    ControllerDescriptor,
    RouteDescriptor,
    connect,
    controller,
    delete,
    get,
    head,
    options,
    patch,
    post,
    pri,
    put,
    route,
    trace,
)
from waypost.routing.matcher import PathMatcher, compile_path
from waypost.routing.registrar import RouteRegistrar
from waypost.routing.route import HandlerTarget, HTTPMethod, Route, RouteMatch
from waypost.routing.table import RouteTable, normalize_path

__all__ = [
    "ControllerDescriptor",
    "HTTPMethod",
    "HandlerTarget",
    "PathMatcher",
    "Route",
    "RouteDescriptor",
    "RouteMatch",
    "RouteRegistrar",
    "RouteTable",
    "compile_path",
    "connect",
    "controller",
    "delete",
    "get",
    "head",
    "normalize_path",
    "options",
    "patch",
    "post",
    "pri",
    "put",
    "route",
    "trace",
]
