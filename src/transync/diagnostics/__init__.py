"""Diagnostic system for transync.

Exceptions for failures that stop a run and value types for consistency
errors that are collected and reported in aggregate.

Python 3.13+.
"""

from .errors import (
    ConfigurationError,
    DocumentError,
    TransportError,
    TransyncError,
    UnknownLanguageError,
)
from .validation import ContextError, ValidationResult

__all__ = [
    "ConfigurationError",
    "ContextError",
    "DocumentError",
    "TransportError",
    "TransyncError",
    "UnknownLanguageError",
    "ValidationResult",
]
