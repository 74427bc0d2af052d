"""Validation paths.

A path locates the field currently being normalized inside nested data:

    user.address.city

The root path has no segments and renders as ``None`` from ``get()``.
Paths are immutable; ``property()`` always builds a new one.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationPath:
    segments: tuple[str, ...] = ()

    @classmethod
    def create(cls, path: str | None = None) -> "ValidationPath":
        """Build a path from its dotted form; ``None`` or ``""`` is the root."""
        if not path:
            return cls()
        return cls(tuple(path.split(".")))

    def property(self, name: str) -> "ValidationPath":
        return ValidationPath(self.segments + (name,))

    def is_root(self) -> bool:
        return not self.segments

    def get(self) -> str | None:
        if self.is_root():
            return None
        return ".".join(self.segments)

    def equals(self, other: "ValidationPath | str | None") -> bool:
        if not isinstance(other, ValidationPath):
            other = ValidationPath.create(other)
        return self.segments == other.segments

    def __str__(self) -> str:
        return self.get() or ""
