"""Exception taxonomy for the diffai boundary.

Every failure raised by the boundary derives from ``DiffaiError`` so callers
can catch the whole family at once, while the secondary builtin bases
(``ValueError`` / ``RuntimeError``) keep ordinary ``except ValueError``
handlers working.
"""

from __future__ import annotations


class DiffaiError(Exception):
    """Base class for all boundary errors."""


class InvalidConfiguration(DiffaiError, ValueError):
    """Host configuration could not be translated into engine options.

    Raised before the engine is invoked: malformed regex, unknown output
    format, wrongly-typed option field, or a host value outside the
    generic value domain.
    """


class ComputationFailure(DiffaiError, RuntimeError):
    """The engine reported a failure while diffing or formatting."""


class NumericOverflow(ComputationFailure):
    """A wide engine integer does not fit the boundary's fixed-width type."""

    def __init__(self, value: int, bits: int = 32) -> None:
        self.value = value
        self.bits = bits
        super().__init__(f"Value {value} does not fit in an unsigned {bits}-bit integer")


class ValidationFailure(DiffaiError, ValueError):
    """A wire record lacks a field that its ``diff_type`` requires."""

    def __init__(self, tag: str, field: str, message: str | None = None) -> None:
        self.tag = tag
        self.field = field
        super().__init__(message or f"{tag} result must have {field}")


class UnsupportedVariant(DiffaiError, ValueError):
    """A wire record's ``diff_type`` cannot be decoded."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"Invalid diff result type: {tag}")
