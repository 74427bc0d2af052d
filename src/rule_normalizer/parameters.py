"""Serialization of typed rule parameters into rule-string text.

`normalize_parameter` returns ``None`` for parameters that contribute
nothing to the rule (``None`` itself, empty lists); callers drop them.
"""

from __future__ import annotations
import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from .paths import ValidationPath
from .references import FieldReference, RouteParameterReference


def format_atom(value: dt.date) -> str:
    """Format a date/datetime as ``YYYY-MM-DDTHH:MM:SS+HH:MM``.

    Naive datetimes are taken as UTC; plain dates as midnight UTC.
    """
    if not isinstance(value, dt.datetime):
        value = dt.datetime.combine(value, dt.time())
    if value.tzinfo is None or value.utcoffset() is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.isoformat(timespec="seconds")


def normalize_parameter(value: Any, path: ValidationPath) -> str | None:
    if value is None:
        return None

    # bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"

    # checked before str/int so StrEnum and IntEnum use their backing value
    if isinstance(value, Enum):
        return normalize_parameter(value.value, path)

    # whole floats render like integers: 1.0 -> "1"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))

    if isinstance(value, (str, int, float, Decimal)):
        return str(value)

    if isinstance(value, (list, tuple, Mapping, set, frozenset)):
        items = value.values() if isinstance(value, Mapping) else value
        parts = [normalize_parameter(item, path) for item in items]
        parts = [part for part in parts if part is not None]
        if not parts:
            return None
        # sets have no order of their own
        if isinstance(value, (set, frozenset)):
            parts.sort()
        return ",".join(parts)

    if isinstance(value, dt.date):
        return format_atom(value)

    if isinstance(value, FieldReference):
        return value.get_value(path)

    if isinstance(value, RouteParameterReference):
        return normalize_parameter(value.get_value(), path)

    return str(value)


def normalize_parameters(parameters: Mapping[int | str, Any], path: ValidationPath) -> list[str]:
    """Serialize an attribute's parameters, dropping absent ones.

    Integer keys are positional and render as the bare value; string keys
    render as ``key=value``.
    """
    out: list[str] = []
    for key, value in parameters.items():
        text = normalize_parameter(value, path)
        if text is None:
            continue
        out.append(f"{key}={text}" if isinstance(key, str) else text)
    return out
