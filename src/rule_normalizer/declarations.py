"""Rule declarations loaded from JSON.

A document maps field names to rule descriptions:

    {
      "price": "required|numeric|gt:cost",
      "currency": ["required", {"rule": "in", "args": [["EUR", "USD"]]}],
      "ends_at": [{"rule": "after", "args": [{"field": "starts_at"}]}],
      "slug": [{"rule": "unique", "args": ["posts", "slug", {"route": "post", "property": "id"}]}]
    }

Rule objects become StringRule attributes. Inside "args"/"kwargs",
{"field": ...} becomes a FieldReference and {"route": ...} a
RouteParameterReference bound to the supplied route parameters.
"""

from __future__ import annotations
from typing import Any, Mapping

from .attributes import StringRule
from .errors import DeclarationError
from .references import FieldReference, RouteParameterReference


_RULE_KEYS = frozenset({"rule", "args", "kwargs"})
_FIELD_KEYS = frozenset({"field", "from_root"})
_ROUTE_KEYS = frozenset({"route", "property", "nullable"})


def _flag(value: dict, key: str, where: str) -> bool:
    flag = value.get(key, False)
    if not isinstance(flag, bool):
        raise DeclarationError(f"{where}/{key}: expected true or false")
    return flag


def load_declarations(data: Any, route: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Turn a parsed JSON document into ``{field: rule description}``.

    Raises:
        DeclarationError: if the document is malformed.
    """
    if not isinstance(data, dict):
        raise DeclarationError(f"expected an object of field -> rules, got {type(data).__name__}")
    route = route or {}
    return {name: load_rule(rules, f"/{name}", route) for name, rules in data.items()}


def load_rule(value: Any, where: str, route: Mapping[str, Any]) -> Any:
    if isinstance(value, str):
        return value

    if isinstance(value, list):
        return [load_rule(item, f"{where}/{i}", route) for i, item in enumerate(value)]

    if isinstance(value, dict):
        unknown = set(value) - _RULE_KEYS
        if unknown:
            raise DeclarationError(f"{where}: unknown keys {sorted(unknown)}")
        keyword = value.get("rule")
        if not isinstance(keyword, str) or not keyword:
            raise DeclarationError(f"{where}: 'rule' must be a non-empty string")
        args = value.get("args", [])
        kwargs = value.get("kwargs", {})
        if not isinstance(args, list):
            raise DeclarationError(f"{where}/args: expected a list")
        if not isinstance(kwargs, dict):
            raise DeclarationError(f"{where}/kwargs: expected an object")
        return StringRule(
            keyword,
            *[load_parameter(arg, f"{where}/args/{i}", route) for i, arg in enumerate(args)],
            **{key: load_parameter(arg, f"{where}/kwargs/{key}", route) for key, arg in kwargs.items()},
        )

    raise DeclarationError(f"{where}: unsupported rule of type {type(value).__name__}")


def load_parameter(value: Any, where: str, route: Mapping[str, Any]) -> Any:
    if isinstance(value, list):
        return [load_parameter(item, f"{where}/{i}", route) for i, item in enumerate(value)]

    if not isinstance(value, dict):
        return value

    if "field" in value:
        if set(value) - _FIELD_KEYS:
            raise DeclarationError(f"{where}: unknown keys {sorted(set(value) - _FIELD_KEYS)}")
        if not isinstance(value["field"], str):
            raise DeclarationError(f"{where}/field: expected a string")
        return FieldReference(value["field"], from_root=_flag(value, "from_root", where))

    if "route" in value:
        if set(value) - _ROUTE_KEYS:
            raise DeclarationError(f"{where}: unknown keys {sorted(set(value) - _ROUTE_KEYS)}")
        if not isinstance(value["route"], str):
            raise DeclarationError(f"{where}/route: expected a string")
        return RouteParameterReference(
            value["route"],
            property=value.get("property"),
            nullable=_flag(value, "nullable", where),
            route=route,
        )

    raise DeclarationError(f"{where}: expected a 'field' or 'route' reference")
