"""Entry points of transync.

synchronize_translations() loads contexts and source messages, validates
them and, when everything is consistent, synchronizes every package's
translation documents. transfer_translations() moves documents between the
repository and the translation service. Both log their progress through
the standard logging module and leave handler configuration to the caller.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from transync.config import SynchronizeOptions, TransportOptions
from transync.diagnostics import ValidationResult
from transync.documents import FileSystemStorage, PoCodec, TranslationCodec
from transync.enums import TransferDirection
from transync.sources import collect_source_messages, load_package_contexts
from transync.synchronization import (
    MoveEntry,
    SynchronizationResult,
    synchronize,
    validate_contexts,
)
from transync.synchronization import move_translations as _move_translations
from transync.transport import (
    TransferSummary,
    TransifexClient,
    TransportClient,
    download_translations,
    upload_translations,
)

__all__ = [
    "SynchronizationReport",
    "move_translations",
    "synchronize_translations",
    "transfer_translations",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SynchronizationReport:
    """Outcome of synchronize_translations().

    Attributes:
        validation: Consistency errors; documents are only touched when empty
        synchronization: Files touched, None when validation failed
    """

    validation: ValidationResult
    synchronization: SynchronizationResult | None = None

    @property
    def is_successful(self) -> bool:
        """True when validation passed (and synchronization ran)."""
        return self.validation.is_valid


def synchronize_translations(
    options: SynchronizeOptions,
    *,
    codec: TranslationCodec | None = None,
) -> SynchronizationReport:
    """Validate contexts against source messages, then synchronize documents.

    Nothing is written when validation finds an error, or when
    options.validate_only is set.

    Args:
        options: Run options
        codec: Document text format (default: PoCodec)

    Returns:
        Validation errors and, when there were none, the touched files

    Raises:
        DocumentError: If a context file, source file or document is corrupt
        UnknownLanguageError: If a document declares a locale outside the catalogue
    """
    storage = FileSystemStorage(options.root_dir)
    codec = codec if codec is not None else PoCodec()

    logger.info("Loading translation contexts...")
    registries = load_package_contexts(
        options.package_paths, options.core_package_path, storage=storage
    )

    logger.info("Loading messages from source files...")
    if options.extractor is not None:
        source_messages, validation = collect_source_messages(
            options.source_files,
            [registry.package_path for registry in registries],
            extractor=options.extractor,
            storage=storage,
        )
    else:
        source_messages = tuple(options.source_messages or ())
        validation = ValidationResult.valid()

    logger.info("Validating translation contexts against the source messages...")
    validation = validation.merge(
        validate_contexts(
            registries,
            source_messages,
            core_package_path=options.core_package_path,
            ignore_unused_core_package_contexts=options.ignore_unused_core_package_contexts,
        )
    )
    if not validation.is_valid:
        logger.error("The following errors have been found:")
        for line in validation.format_lines():
            logger.error("   - %s", line)
        return SynchronizationReport(validation=validation)

    logger.info("Synchronizing translation files...")
    result = synchronize(
        registries,
        source_messages,
        storage=storage,
        codec=codec,
        skip_license_header=options.skip_license_header,
        dry_run=options.validate_only,
    )
    logger.info(
        "Done: %d file(s) %s, %d created.",
        len(result.written),
        "would be written" if result.dry_run else "written",
        len(result.created),
    )
    return SynchronizationReport(validation=validation, synchronization=result)


async def _transfer(
    direction: TransferDirection,
    options: TransportOptions,
    client: TransportClient,
) -> TransferSummary:
    storage = FileSystemStorage(options.cwd)
    if direction is TransferDirection.UPLOAD:
        return await upload_translations(options, client=client, storage=storage)
    return await download_translations(options, client=client, storage=storage, codec=PoCodec())


async def _transfer_with_transifex(
    direction: TransferDirection, options: TransportOptions
) -> TransferSummary:
    async with TransifexClient(
        options.organization_name, options.project_name, options.auth_token
    ) as client:
        return await _transfer(direction, options, client)


def transfer_translations(
    direction: TransferDirection,
    options: TransportOptions,
    *,
    client: TransportClient | None = None,
) -> TransferSummary:
    """Upload source documents to, or download translations from, the service.

    Failed jobs never abort the run: they are reported in the summary and
    recorded for the next run.

    Args:
        direction: Upload or download
        options: Run options
        client: Service client (default: TransifexClient built from options)

    Returns:
        Successes and failures per resource

    Raises:
        DocumentError: If a document or failure record is corrupt
        UnknownLanguageError: If the project has a language outside the catalogue
    """
    logger.info("Starting %s of translations...", direction)
    if client is None:
        return asyncio.run(_transfer_with_transifex(direction, options))
    return asyncio.run(_transfer(direction, options, client))


def move_translations(
    entries: list[MoveEntry] | tuple[MoveEntry, ...],
    *,
    root_dir: str | None = None,
    codec: TranslationCodec | None = None,
) -> ValidationResult:
    """Move messages (context and translations) between packages.

    Args:
        entries: Messages to move
        root_dir: Directory package paths are relative to (default: cwd)
        codec: Document text format (default: PoCodec)

    Returns:
        Validation errors; nothing is moved unless empty
    """
    logger.info("Moving translations between packages...")
    result = _move_translations(
        entries,
        storage=FileSystemStorage(root_dir),
        codec=codec if codec is not None else PoCodec(),
    )
    if not result.is_valid:
        logger.error("The following errors have been found:")
        for line in result.format_lines():
            logger.error("   - %s", line)
    return result
