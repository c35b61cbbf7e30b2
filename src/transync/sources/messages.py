"""Source messages and their collection from source files.

Message extraction itself is an external capability: callers plug in a
MessageExtractor that understands their source language. This module only
reads the files, attributes every message to the package it belongs to and
collects extractor errors as values.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Protocol

from transync.diagnostics import ContextError, DocumentError, ValidationResult
from transync.documents.storage import DocumentStorage
from transync.enums import ContextErrorCode
from transync.languages.types import MessageId, PackagePath

__all__ = [
    "ExtractedMessage",
    "MessageExtractor",
    "SourceMessage",
    "collect_source_messages",
    "find_package_path",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractedMessage:
    """Message as reported by an extractor, before package attribution.

    Attributes:
        id: Message id
        text: Source (base language) text
        plural_text: Plural source text, None for singular-only messages
    """

    id: MessageId
    text: str
    plural_text: str | None = None


@dataclass(frozen=True, slots=True)
class SourceMessage:
    """Translatable message found in a source file.

    Attributes:
        id: Message id; unique per context namespace, may repeat across packages
        package_path: Package the source file belongs to (None when the file
            is outside every configured package)
        file_path: Source file the message was found in
        text: Source (base language) text
        plural_text: Plural source text, None for singular-only messages
    """

    id: MessageId
    package_path: PackagePath | None
    file_path: str
    text: str
    plural_text: str | None = None

    @property
    def has_plural_forms(self) -> bool:
        """True when the message offers plural forms."""
        return self.plural_text is not None


class MessageExtractor(Protocol):
    """Protocol for finding translatable messages in a source file.

    Example:
        >>> def extract(content, file_path, on_error):
        ...     for match in PATTERN.finditer(content):
        ...         yield ExtractedMessage(id=match["id"], text=match["text"])
    """

    def __call__(
        self,
        content: str,
        file_path: str,
        on_error: Callable[[str], None],
    ) -> Iterable[ExtractedMessage]:
        """Extract messages from file content.

        Args:
            content: Source file content
            file_path: Path of the source file
            on_error: Called with a message for every problem found; the
                extractor continues with the rest of the file
        """


def find_package_path(
    file_path: str,
    package_paths: Sequence[PackagePath],
) -> PackagePath | None:
    """Find the package a file belongs to.

    A file belongs to the first package whose path components appear,
    in order and contiguously, in the file's path. This matches both
    ``packages/foo/src/a.js`` and ``/abs/repo/packages/foo/src/a.js``
    against ``packages/foo``, but not ``packages/foobar/src/a.js``.
    """
    file_parts = PurePosixPath(file_path).parts
    for package_path in package_paths:
        package_parts = PurePosixPath(package_path).parts
        if not package_parts:
            continue
        width = len(package_parts)
        for start in range(len(file_parts) - width + 1):
            if file_parts[start : start + width] == package_parts:
                return package_path
    return None


def collect_source_messages(
    source_files: Iterable[str],
    package_paths: Sequence[PackagePath],
    *,
    extractor: MessageExtractor,
    storage: DocumentStorage,
) -> tuple[tuple[SourceMessage, ...], ValidationResult]:
    """Extract messages from every source file.

    Args:
        source_files: Source files to scan
        package_paths: Package roots used to attribute files to packages
        extractor: Message extractor for the source language
        storage: Where the source files are read from

    Returns:
        Tuple of (messages in file order, extractor errors as SOURCE_ERROR)

    Raises:
        DocumentError: If a source file cannot be read
    """
    messages: list[SourceMessage] = []
    errors: list[ContextError] = []

    for file_path in source_files:
        try:
            content = storage.read(file_path)
        except OSError as e:
            msg = f"Cannot read source file: {e}"
            raise DocumentError(msg, path=file_path) from e

        package_path = find_package_path(file_path, package_paths)

        def on_error(message: str, file_path: str = file_path) -> None:
            errors.append(
                ContextError(
                    code=ContextErrorCode.SOURCE_ERROR,
                    message=message,
                    file_paths=(file_path,),
                )
            )

        for extracted in extractor(content, file_path, on_error):
            messages.append(
                SourceMessage(
                    id=extracted.id,
                    package_path=package_path,
                    file_path=file_path,
                    text=extracted.text,
                    plural_text=extracted.plural_text,
                )
            )

    logger.debug("Collected %d messages from source files", len(messages))
    return tuple(messages), ValidationResult.from_errors(errors)
