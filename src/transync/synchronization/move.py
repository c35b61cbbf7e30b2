"""Moving messages between packages.

A move transfers a message's context entry and its translation in every
language document of the source package to the destination package. The
whole request is validated first; nothing is moved when any entry is
invalid.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import PurePosixPath

from transync.constants import TRANSLATION_FILE_EXTENSION
from transync.diagnostics import ContextError, DocumentError, ValidationResult
from transync.documents import DocumentStorage, TranslationCodec, TranslationDocument
from transync.enums import ContextErrorCode
from transync.languages.types import MessageId, PackagePath
from transync.sources import ContextRegistry, load_context_registry, serialize_context_entries
from transync.synchronization.templates import translations_directory

__all__ = [
    "MoveEntry",
    "move_translations",
    "validate_move_entries",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MoveEntry:
    """Request to move one message between packages.

    Attributes:
        source: Package the message is currently declared in
        destination: Package the message moves to
        message_id: Id of the message to move
    """

    source: PackagePath
    destination: PackagePath
    message_id: MessageId


def validate_move_entries(
    entries: Sequence[MoveEntry],
    registries: Sequence[ContextRegistry],
    *,
    storage: DocumentStorage,
) -> ValidationResult:
    """Check that a move request can be carried out.

    Reports message ids requested more than once, packages that do not
    exist and messages missing from their source package's contexts.
    """
    errors: list[ContextError] = []

    counts = Counter(entry.message_id for entry in entries)
    for message_id, count in counts.items():
        if count > 1:
            errors.append(
                ContextError(
                    code=ContextErrorCode.DUPLICATED_ENTRY,
                    message=(
                        f'Duplicated entry: the "{message_id}" message is configured '
                        "to be moved multiple times."
                    ),
                    message_id=message_id,
                )
            )

    missing_packages: set[PackagePath] = set()
    for entry in entries:
        for package_path in (entry.source, entry.destination):
            if package_path in missing_packages or storage.is_directory(package_path):
                continue
            missing_packages.add(package_path)
            errors.append(
                ContextError(
                    code=ContextErrorCode.MISSING_PACKAGE,
                    message=f'Missing package: the "{package_path}" package does not exist.',
                    file_paths=(package_path,),
                )
            )

    by_package = {registry.package_path: registry for registry in registries}
    for entry in entries:
        if entry.source in missing_packages:
            continue
        registry = by_package.get(entry.source)
        if registry is not None and entry.message_id in registry:
            continue
        errors.append(
            ContextError(
                code=ContextErrorCode.MISSING_CONTEXT,
                message=(
                    f'Missing context: the "{entry.message_id}" message does not exist '
                    f'in "{entry.source}" package.'
                ),
                message_id=entry.message_id,
                file_paths=(entry.source,),
            )
        )

    return ValidationResult.from_errors(errors)


def _read_document(path: str, *, storage: DocumentStorage, codec: TranslationCodec) -> TranslationDocument:
    try:
        text = storage.read(path)
    except OSError as e:
        msg = f"Cannot read translation document: {e}"
        raise DocumentError(msg, path=path) from e
    return codec.parse(text, path)


def _move_entry(
    entry: MoveEntry,
    contexts: dict[PackagePath, dict[MessageId, str]],
    *,
    storage: DocumentStorage,
    codec: TranslationCodec,
) -> None:
    source_contexts = contexts[entry.source]
    contexts[entry.destination][entry.message_id] = source_contexts.pop(entry.message_id)

    # The source package decides which language documents take part.
    source_directory = translations_directory(entry.source)
    destination_directory = translations_directory(entry.destination)
    for source_path in storage.list_files(source_directory, f"*{TRANSLATION_FILE_EXTENSION}"):
        file_name = PurePosixPath(source_path).name
        destination_path = str(PurePosixPath(destination_directory) / file_name)

        source_document = _read_document(source_path, storage=storage, codec=codec)
        if storage.exists(destination_path):
            destination_document = _read_document(destination_path, storage=storage, codec=codec)
        else:
            destination_document = TranslationDocument(
                headers=dict(source_document.headers),
                entries=[],
                header_comment=source_document.header_comment,
            )

        moved = source_document.remove(entry.message_id)
        destination_document.remove(entry.message_id)
        if moved is not None:
            destination_document.entries.append(moved)

        storage.write(source_path, codec.serialize(source_document))
        storage.write(destination_path, codec.serialize(destination_document))
        logger.debug("Moved %s from %s to %s", entry.message_id, source_path, destination_path)


def move_translations(
    entries: Sequence[MoveEntry],
    *,
    storage: DocumentStorage,
    codec: TranslationCodec,
) -> ValidationResult:
    """Move messages (context and translations) between packages.

    Entries whose source and destination are the same package are skipped.
    A message that already exists in the destination is overwritten.

    Args:
        entries: Messages to move
        storage: Where contexts and documents are read from and written to
        codec: Document text format

    Returns:
        Validation errors; empty when the move was carried out

    Raises:
        DocumentError: If a context file or document cannot be read
    """
    package_paths = list(
        dict.fromkeys(p for entry in entries for p in (entry.source, entry.destination))
    )
    registries = [
        load_context_registry(package_path, storage=storage)
        for package_path in package_paths
        if storage.is_directory(package_path)
    ]

    result = validate_move_entries(entries, registries, storage=storage)
    if not result.is_valid:
        return result

    contexts = {registry.package_path: dict(registry.entries) for registry in registries}
    touched: list[PackagePath] = []
    for entry in entries:
        if entry.source == entry.destination:
            continue
        _move_entry(entry, contexts, storage=storage, codec=codec)
        touched.extend((entry.source, entry.destination))

    by_package = {registry.package_path: registry for registry in registries}
    for package_path in dict.fromkeys(touched):
        storage.write(
            by_package[package_path].context_file_path,
            serialize_context_entries(contexts[package_path]),
        )

    logger.info("Moved %d message(s)", len(entries))
    return result
