"""Rule normalization.

Turns a rule description of any shape into a flat list of canonical rules:
- strings are split into tokens and their field references qualified
- lists (nested to any depth) are flattened in order
- string attributes are serialized to ``keyword[:params]``
- object attributes render themselves
- rule containers are unwrapped
- executor rule objects and unknown shapes are passed through untouched

The normalizer is pure and never raises for unusual shapes; input size
limits are enforced separately, by `check_limits`, before normalizing.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attributes import (
    InvokableRule,
    ObjectValidationAttribute,
    RuleContainer,
    StringValidationAttribute,
    ValidationRule,
)
from .errors import InputTooDeep, InputTooLarge
from .parameters import normalize_parameters
from .paths import ValidationPath
from .rules import is_regex_rule, normalize_rule_string

logger = logging.getLogger(__name__)


class RuleNormalizer:
    """Flattens rule descriptions into canonical rules (strings or rule objects)."""

    def execute(self, rule: Any, path: ValidationPath) -> list[Any]:
        if isinstance(rule, str):
            if is_regex_rule(rule):
                logger.debug("keeping regex rule unsplit at %r: %r", path.get(), rule)
                return [rule]
            return normalize_rule_string(rule, path)

        if isinstance(rule, (list, tuple)):
            out: list[Any] = []
            for item in rule:
                out.extend(self.execute(item, path))
            return out

        if isinstance(rule, StringValidationAttribute):
            return self.normalize_string_attribute(rule, path)

        if isinstance(rule, ObjectValidationAttribute):
            return [rule.get_rule(path)]

        if isinstance(rule, RuleContainer):
            return self.execute(rule.get(), path)

        if isinstance(rule, (ValidationRule, InvokableRule)):
            return [rule]

        logger.debug("passing through unrecognised rule of type %s", type(rule).__name__)
        return [rule]

    def normalize_string_attribute(
        self, rule: StringValidationAttribute, path: ValidationPath
    ) -> list[str]:
        parameters = normalize_parameters(rule.parameters(), path)
        if not parameters:
            return [rule.keyword()]
        return [f"{rule.keyword()}:{','.join(parameters)}"]


def _as_path(path: ValidationPath | str | None) -> ValidationPath:
    if isinstance(path, ValidationPath):
        return path
    return ValidationPath.create(path)


def normalize_rule(rule: Any, path: ValidationPath | str | None = None) -> list[Any]:
    """Normalize one rule description; `path` defaults to the root."""
    return RuleNormalizer().execute(rule, _as_path(path))


@dataclass(frozen=True)
class Limits:
    """Bounds on untrusted rule descriptions; ``None`` disables a bound."""
    max_depth: Optional[int] = None
    max_rules: Optional[int] = None


def check_limits(rule: Any, limits: Limits) -> None:
    """Walk a rule description without recursion and enforce `limits`.

    Depth counts enclosing lists and rule containers; the rule count is the
    number of rules the description would normalize to (pipe-separated
    tokens count individually).

    Raises:
        InputTooDeep, InputTooLarge
    """
    count = 0
    stack: list[tuple[Any, int]] = [(rule, 0)]
    while stack:
        item, depth = stack.pop()

        if isinstance(item, (list, tuple, RuleContainer)):
            if limits.max_depth is not None and depth + 1 > limits.max_depth:
                logger.warning("rule description nested deeper than %d", limits.max_depth)
                raise InputTooDeep(depth + 1, limits.max_depth)
            children = item.get() if isinstance(item, RuleContainer) else item
            if isinstance(children, (list, tuple)):
                stack.extend((child, depth + 1) for child in children)
            else:
                stack.append((children, depth + 1))
            continue

        if isinstance(item, str) and not is_regex_rule(item):
            count += item.count("|") + 1
        else:
            count += 1

        if limits.max_rules is not None and count > limits.max_rules:
            logger.warning("rule description holds more than %d rules", limits.max_rules)
            raise InputTooLarge(count, limits.max_rules)


def normalize_declarations(
    declarations: Mapping[str, Any],
    path: ValidationPath | str | None = None,
    limits: Limits | None = None,
) -> dict[str, list[Any]]:
    """Normalize the rules of every field in a container.

    Field rules are normalized at `path` (the container), so references to
    sibling fields resolve next to the field. Result keys are the fields'
    qualified paths.

    Raises:
        InputTooDeep, InputTooLarge
    """
    path = _as_path(path)
    normalizer = RuleNormalizer()
    out: dict[str, list[Any]] = {}
    for name, rule in declarations.items():
        if limits is not None:
            check_limits(rule, limits)
        out[path.property(name).get()] = normalizer.execute(rule, path)
    return out
