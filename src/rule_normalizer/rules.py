"""Rule-string micro-language.

A rule string is a pipe-delimited list of tokens:
    <name>[:<argument>[:<more>...]]

Example:
    required|gt:min_price|required_with:currency,amount

Some rule names take other field names as their argument. Those fields are
relative to the container being validated and have to be qualified with the
current path before the rule reaches the executor.
"""

from __future__ import annotations
from dataclasses import dataclass, replace

from .paths import ValidationPath


REGEX_MARKER = "regex:"

# argument is one field name
SINGLE_FIELD_RULES = frozenset({
    "different", "exclude_with", "exclude_without", "gt", "gte", "lt", "lte", "same",
})

# argument is "<field>,<value>[,<value>...]"; the whole argument is prefixed,
# which only touches the leading field name
CONDITIONAL_FIELD_RULES = frozenset({
    "accepted_if", "declined_if", "exclude_if", "exclude_unless", "missing_if",
    "missing_unless", "prohibited_if", "prohibited_unless", "required_if", "required_unless",
})

# argument is a comma-separated list of field names
MULTI_FIELD_RULES = frozenset({
    "missing_with", "missing_with_all", "prohibits", "required_with",
    "required_with_all", "required_without", "required_without_all",
})


@dataclass(frozen=True)
class RuleToken:
    """One ``name[:argument...]`` unit of a rule string.

    `arguments` keeps every colon-separated segment after the name, so rules
    whose argument itself contains colons (``date_format:H:i``) render back
    unchanged. Only the first segment is ever rewritten.
    """
    name: str
    arguments: tuple[str, ...] = ()

    @property
    def argument(self) -> str | None:
        return self.arguments[0] if self.arguments else None

    def with_argument(self, argument: str) -> "RuleToken":
        return replace(self, arguments=(argument,) + self.arguments[1:])

    def render(self) -> str:
        return ":".join((self.name,) + self.arguments)


def is_regex_rule(text: str) -> bool:
    """Regex patterns may contain ``|`` and ``:``; such strings are never split."""
    return REGEX_MARKER in text


def parse_token(text: str) -> RuleToken:
    name, *arguments = text.split(":")
    return RuleToken(name=name, arguments=tuple(arguments))


def parse_rule_string(text: str) -> list[RuleToken]:
    """Split a composite rule string into tokens, in order."""
    return [parse_token(item) for item in text.split("|")]


def qualify(path: ValidationPath, name: str) -> str:
    """Prefix a field name with the current path (no-op at the root)."""
    prefix = path.get()
    if not prefix:
        return name
    return f"{prefix}.{name}"


def qualify_token(token: RuleToken, path: ValidationPath) -> RuleToken:
    """Rewrite the field references carried by a token's argument."""
    argument = token.argument
    if argument is None:
        return token

    if token.name in SINGLE_FIELD_RULES or token.name in CONDITIONAL_FIELD_RULES:
        return token.with_argument(qualify(path, argument))

    if token.name in MULTI_FIELD_RULES:
        fields = [qualify(path, field) for field in argument.split(",")]
        return token.with_argument(",".join(fields))

    return token


def normalize_rule_string(text: str, path: ValidationPath) -> list[str]:
    """Split a rule string into separate, path-qualified rules."""
    if is_regex_rule(text):
        return [text]
    return [qualify_token(token, path).render() for token in parse_rule_string(text)]
