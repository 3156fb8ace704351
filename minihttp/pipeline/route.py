"""Path templates and single-route matching.

A template is a ``/``-delimited path where ``:name`` marks a parameter.
Each parameter matches one or more characters other than ``/``; everything
else in the template, ``*`` included, matches literally. Nested or optional
parameters are not supported.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from minihttp.domain.http_types import Handler, HttpMethod, HttpRequest

PARAMETER_TOKEN = re.compile(r":([^/]+)")
SEGMENT_CAPTURE = "([^/]+)"


class InvalidRouteTemplate(ValueError):
    """Raised at registration time for templates that cannot be compiled."""


@dataclass(frozen=True)
class CompiledTemplate:
    """Anchored pattern plus parameter names in capture-group order."""

    pattern: re.Pattern[str]
    param_names: tuple[str, ...]

    def match(self, path: str) -> Optional[dict[str, str]]:
        """Return parameter bindings for ``path``, or None when it does not match."""
        found = self.pattern.fullmatch(path)
        if found is None:
            return None
        return dict(zip(self.param_names, found.groups()))


def compile_template(template: str) -> CompiledTemplate:
    """Compile a route template, failing fast on templates we cannot honor."""
    if not template.startswith("/"):
        raise InvalidRouteTemplate(f"Route template must start with '/': {template!r}")

    parts = []
    names: list[str] = []
    position = 0
    for token in PARAMETER_TOKEN.finditer(template):
        name = token.group(1)
        if name in names:
            raise InvalidRouteTemplate(
                f"Duplicate parameter {name!r} in route template {template!r}"
            )
        names.append(name)
        parts.append(re.escape(template[position : token.start()]))
        parts.append(SEGMENT_CAPTURE)
        position = token.end()
    parts.append(re.escape(template[position:]))

    return CompiledTemplate(re.compile("".join(parts)), tuple(names))


@dataclass(frozen=True)
class Route:
    """Immutable (template, method, handler) triple."""

    template: str
    method: HttpMethod
    handler: Handler
    compiled: CompiledTemplate = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod(self.method))
        object.__setattr__(self, "compiled", compile_template(self.template))

    @property
    def param_names(self) -> tuple[str, ...]:
        return self.compiled.param_names

    def match(self, request: HttpRequest) -> Optional[dict[str, str]]:
        """Return bindings when method and path both match, otherwise None."""
        if request.method != self.method:
            return None
        return self.compiled.match(request.path)

    def matches(self, request: HttpRequest) -> bool:
        return self.match(request) is not None
