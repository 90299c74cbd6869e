"""Path template compilation.

A template such as ``/users/{id}/posts/{post_id}`` compiles to an
anchored regular expression. Each ``{name}`` placeholder captures one
run of ``[a-zA-Z0-9_]`` characters, so a value never spans a ``/`` and
is never empty. Static text matches literally and case-sensitively.
"""

import re
from dataclasses import dataclass

from waypost.errors import ConfigurationError

# The characters a parameter value may contain
PARAM_PATTERN = r"[a-zA-Z0-9_]+"

_PLACEHOLDER = re.compile(r"\{([a-zA-Z0-9_]+)\}")


@dataclass(frozen=True, slots=True)
class PathMatcher:
    """A compiled path template.

    Usage::

        matcher = compile_path("/users/{id}")
        matcher.match("/users/42")   # (True, ("42",))
        matcher.match("/users/4/2")  # (False, ())
    """

    template: str
    regex: re.Pattern[str]
    param_names: tuple[str, ...]

    def match(self, path: str) -> tuple[bool, tuple[str, ...]]:
        """Full-match *path*; return the captured values in template order."""
        m = self.regex.fullmatch(path)
        if m is None:
            return False, ()
        return True, m.groups()

    @property
    def is_static(self) -> bool:
        return not self.param_names


def compile_path(template: str) -> PathMatcher:
    """Compile *template* into a ``PathMatcher``.

    Raises ``ConfigurationError`` if a parameter name appears twice.
    """
    parts: list[str] = []
    names: list[str] = []
    last = 0
    for m in _PLACEHOLDER.finditer(template):
        name = m.group(1)
        if name in names:
            msg = f"Duplicate path parameter {{{name}}} in route template {template!r}"
            raise ConfigurationError(msg)
        names.append(name)
        parts.append(re.escape(template[last : m.start()]))
        parts.append(f"({PARAM_PATTERN})")
        last = m.end()
    parts.append(re.escape(template[last:]))

    return PathMatcher(
        template=template,
        regex=re.compile("".join(parts)),
        param_names=tuple(names),
    )
