"""Validation results for context registries and source messages.

Validation failures are plain values combined by the caller, never
exceptions. A run is halted by its driver when a ValidationResult is not
valid.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from transync.enums import ContextErrorCode

__all__ = [
    "ContextError",
    "ValidationResult",
]


@dataclass(frozen=True, slots=True)
class ContextError:
    """Single consistency error.

    Attributes:
        code: Kind of error
        message: Human-readable error message
        message_id: Message id the error is about (empty for file-level errors)
        file_paths: Files involved, in the order they were found
    """

    code: ContextErrorCode
    message: str
    message_id: str = ""
    file_paths: tuple[str, ...] = ()

    def format(self) -> str:
        """Format error for a report line."""
        return self.message

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Aggregate of all consistency errors found in one pass.

    Example:
        >>> result = ValidationResult.valid()
        >>> result.is_valid
        True
        >>> result.merge(ValidationResult.from_errors([error])).error_count
        1
    """

    errors: tuple[ContextError, ...] = ()

    @staticmethod
    def valid() -> ValidationResult:
        """Create a result without errors."""
        return ValidationResult()

    @staticmethod
    def from_errors(errors: Iterable[ContextError]) -> ValidationResult:
        """Create a result from collected errors."""
        return ValidationResult(errors=tuple(errors))

    @property
    def is_valid(self) -> bool:
        """True when no errors were found."""
        return not self.errors

    @property
    def error_count(self) -> int:
        """Number of errors."""
        return len(self.errors)

    def by_code(self, code: ContextErrorCode) -> tuple[ContextError, ...]:
        """Get all errors of one kind."""
        return tuple(error for error in self.errors if error.code == code)

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Combine two results, keeping error order."""
        return ValidationResult(errors=self.errors + other.errors)

    def format_lines(self) -> tuple[str, ...]:
        """Format every error, one per line."""
        return tuple(error.format() for error in self.errors)
