"""Errors raised around the normalization core.

The normalizer itself never raises: every rule shape has a defined output.
These are raised at the edges (input guards, declaration loading, reference
resolution).
"""


class RuleNormalizerError(Exception):
    """Base error for this package."""


class InputTooDeep(RuleNormalizerError):
    """Raised when a rule description nests deeper than the allowed limit."""

    def __init__(self, depth: int, limit: int):
        self.depth = depth
        self.limit = limit
        super().__init__(f"rule nesting depth {depth} exceeds limit {limit}")


class InputTooLarge(RuleNormalizerError):
    """Raised when a rule description holds more rules than the allowed limit."""

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"rule count {count} exceeds limit {limit}")


class DeclarationError(RuleNormalizerError):
    """Raised when a rule declaration document cannot be loaded."""


class UnresolvableReference(RuleNormalizerError):
    """Raised when a route parameter reference has no value to resolve to."""
