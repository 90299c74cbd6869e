"""Locate the App a CLI command operates on."""

import importlib

from waypost.app import App


def resolve_app(import_string: str) -> App:
    """Import ``"package.module:name"`` and return the App it names.

    *name* defaults to ``app``. A zero-argument factory is called and
    must return an App.

    Raises:
        ModuleNotFoundError: the module part does not import.
        AttributeError: the module has no such attribute.
        TypeError: the target is neither an App nor a factory for one.
    """
    module_name, _, attribute = import_string.partition(":")
    target = getattr(importlib.import_module(module_name), attribute or "app")

    if isinstance(target, App):
        return target

    if callable(target):
        try:
            target = target()
        except Exception as exc:
            msg = f"App factory {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc

    if isinstance(target, App):
        return target
    msg = f"{import_string!r} resolved to {type(target).__name__}, not a waypost.App instance"
    raise TypeError(msg)
