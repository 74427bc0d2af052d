"""Rule declarations beyond plain strings.

Four contracts, each with a single method:
- StringValidationAttribute: keyword + parameters, serialized by the normalizer
- ObjectValidationAttribute: renders its own rule for a given path
- RuleContainer: wraps other rule descriptions
- ValidationRule / InvokableRule: pre-built executor rules, passed through

The concrete attributes below cover the common rules; anything else can be
declared with StringRule("keyword", *args, **kwargs).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, Protocol, runtime_checkable

from .parameters import normalize_parameter
from .paths import ValidationPath
from .references import FieldReference


class StringValidationAttribute(ABC):
    @abstractmethod
    def keyword(self) -> str:
        ...

    @abstractmethod
    def parameters(self) -> dict[int | str, Any]:
        """Parameters in declaration order; int keys positional, str keys named."""


class ObjectValidationAttribute(ABC):
    @abstractmethod
    def get_rule(self, path: ValidationPath) -> Any:
        ...


class RuleContainer(ABC):
    @abstractmethod
    def get(self) -> Any:
        ...


@runtime_checkable
class ValidationRule(Protocol):
    def validate(self, attribute: str, value: Any, fail: Callable[[str], None]) -> None:
        ...


@runtime_checkable
class InvokableRule(Protocol):
    def __call__(self, attribute: str, value: Any, fail: Callable[[str], None]) -> None:
        ...


class Rule(RuleContainer):
    """Groups any rule descriptions into one declaration."""

    def __init__(self, *rules: Any):
        self._rules = list(rules)

    def get(self) -> list[Any]:
        return self._rules

    def __repr__(self) -> str:
        return f"Rule({', '.join(map(repr, self._rules))})"


class StringRule(StringValidationAttribute):
    def __init__(self, keyword: str, *args: Any, **kwargs: Any):
        self._keyword = keyword
        self._args = args
        self._kwargs = kwargs

    def keyword(self) -> str:
        return self._keyword

    def parameters(self) -> dict[int | str, Any]:
        params: dict[int | str, Any] = dict(enumerate(self._args))
        params.update(self._kwargs)
        return params

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StringRule):
            return NotImplemented
        return (self.keyword(), self.parameters()) == (other.keyword(), other.parameters())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._keyword!r}, {self.parameters()!r})"


def _field(name: str | FieldReference) -> FieldReference:
    if isinstance(name, FieldReference):
        return name
    return FieldReference(name)


class Required(StringRule):
    def __init__(self):
        super().__init__("required")


class Max(StringRule):
    def __init__(self, value: int | float):
        super().__init__("max", value)


class Min(StringRule):
    def __init__(self, value: int | float):
        super().__init__("min", value)


class Size(StringRule):
    def __init__(self, value: int):
        super().__init__("size", value)


class Between(StringRule):
    def __init__(self, low: int | float, high: int | float):
        super().__init__("between", low, high)


class In(StringRule):
    def __init__(self, *values: Any):
        super().__init__("in", list(values))


class NotIn(StringRule):
    def __init__(self, *values: Any):
        super().__init__("not_in", list(values))


class After(StringRule):
    """`date` may be a date/datetime, a relative string or a FieldReference."""

    def __init__(self, date: Any):
        super().__init__("after", date)


class Before(StringRule):
    def __init__(self, date: Any):
        super().__init__("before", date)


class DateFormat(StringRule):
    def __init__(self, fmt: str):
        super().__init__("date_format", fmt)


class Regex(StringRule):
    def __init__(self, pattern: str):
        super().__init__("regex", pattern)


class GreaterThan(StringRule):
    def __init__(self, field: str | FieldReference):
        super().__init__("gt", _field(field))


class LessThan(StringRule):
    def __init__(self, field: str | FieldReference):
        super().__init__("lt", _field(field))


class Same(StringRule):
    def __init__(self, field: str | FieldReference):
        super().__init__("same", _field(field))


class Different(StringRule):
    def __init__(self, field: str | FieldReference):
        super().__init__("different", _field(field))


class RequiredIf(StringRule):
    def __init__(self, field: str | FieldReference, *values: Any):
        super().__init__("required_if", _field(field), list(values))


class RequiredWith(StringRule):
    def __init__(self, *fields: str | FieldReference):
        super().__init__("required_with", [_field(f) for f in fields])


class Exists(ObjectValidationAttribute):
    """``exists:<table>[,<column>]``; the column defaults to the field name."""

    def __init__(self, table: str, column: str | None = None):
        self.table = table
        self.column = column

    def get_rule(self, path: ValidationPath) -> str:
        parts = [self.table]
        if self.column:
            parts.append(self.column)
        return "exists:" + ",".join(parts)


class Unique(ObjectValidationAttribute):
    """``unique:<table>[,<column>[,<ignore>[,<ignore_column>]]]``.

    `ignore` is usually a RouteParameterReference to the record being
    updated; a reference that resolves to nothing leaves the rule unscoped.
    """

    def __init__(self, table: str, column: str | None = None, ignore: Any = None,
                 ignore_column: str | None = None):
        self.table = table
        self.column = column
        self.ignore = ignore
        self.ignore_column = ignore_column

    def get_rule(self, path: ValidationPath) -> str:
        parts = [self.table]
        ignore = normalize_parameter(self.ignore, path)
        if self.column or ignore is not None:
            parts.append(self.column or "NULL")
        if ignore is not None:
            parts.append(ignore)
            if self.ignore_column:
                parts.append(self.ignore_column)
        return "unique:" + ",".join(parts)
