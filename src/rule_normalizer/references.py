"""References used as rule parameters.

A reference is a parameter whose text is only known once the rule is placed:
- FieldReference names another field and is qualified with the current path
- RouteParameterReference reads a value from the current request's route
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from .errors import UnresolvableReference
from .paths import ValidationPath


_MISSING = object()


@dataclass(frozen=True)
class FieldReference:
    """Reference to another field of the validated data.

    With `from_root` the name is taken as already absolute.
    """
    name: str
    from_root: bool = False

    def get_value(self, path: ValidationPath) -> str:
        if self.from_root or path.is_root():
            return self.name
        return path.property(self.name).get()


def _lookup(target: Any, key: str) -> Any:
    if isinstance(target, Mapping):
        return target.get(key, _MISSING)
    return getattr(target, key, _MISSING)


@dataclass(frozen=True)
class RouteParameterReference:
    """Reference to a route parameter, optionally drilling into it.

    `property` is a dotted path into the parameter value, e.g. a bound model:
        RouteParameterReference("post", "id")

    `route` holds the parameters of the request being validated; bind it
    with `with_route()` once the request is known.
    """
    route_parameter: str
    property: Optional[str] = None
    nullable: bool = False
    route: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def with_route(self, route: Mapping[str, Any]) -> "RouteParameterReference":
        return replace(self, route=route)

    def get_value(self) -> Any:
        value = self.route.get(self.route_parameter, _MISSING)

        if value is not _MISSING and value is not None and self.property:
            for key in self.property.split("."):
                value = _lookup(value, key)
                if value is _MISSING or value is None:
                    break

        if value is _MISSING or value is None:
            if self.nullable:
                return None
            raise UnresolvableReference(self._describe())

        return value

    def _describe(self) -> str:
        target = self.route_parameter
        if self.property:
            target = f"{target}.{self.property}"
        return f"route parameter {target!r} could not be resolved"
