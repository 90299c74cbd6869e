"""Shared type aliases used across waypost modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# A type identifier understood by the container: a class, or a
# "package.module:Name" import string
TypeIdentifier: TypeAlias = type | str

# Lifecycle hook: sync or async, no arguments
Hook: TypeAlias = Callable[[], Any]
