"""``waypost routes`` — list registered routes.

Prints METHOD, PATH, HANDLER and MIDDLEWARE for every route, in the
order the dispatcher tries them.
"""

import argparse
import sys

from waypost.cli._resolve import resolve_app
from waypost.errors import ConfigurationError
from waypost.routing.route import Route, parse_method


def _middleware_names(route: Route) -> str:
    return ", ".join(getattr(mw, "__qualname__", str(mw)) for mw in route.middleware) or "-"


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for a waypost app."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = app.routes
    if args.method:
        try:
            verb = parse_method(args.method)
        except ConfigurationError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            raise SystemExit(1) from exc
        routes = [r for r in routes if r.method is verb]

    if not routes:
        print("No routes registered.")
        return

    rows = [(str(r.method), r.path, str(r.target), _middleware_names(r)) for r in routes]

    # Column widths (at least as wide as the headers)
    w_method = max(6, *(len(r[0]) for r in rows))
    w_path = max(4, *(len(r[1]) for r in rows))
    w_handler = max(7, *(len(r[2]) for r in rows))

    fmt = f"{{:<{w_method}}}  {{:<{w_path}}}  {{:<{w_handler}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER", "MIDDLEWARE"))
    print("-" * min(w_method + w_path + w_handler + 16, 80))
    for row in rows:
        print(fmt.format(*row).rstrip())
