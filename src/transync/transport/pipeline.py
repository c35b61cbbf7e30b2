"""Upload and download pipelines between the repository and the service.

Download: fetch the project's resources and languages, download every
language of every configured resource, and store each document holding at
least one translation under ``<package>/lang/translations``.

Upload: publish the base-language document of every configured package.

Both pipelines keep a failure record in the working directory; when it is
present, a run processes only the failures it lists.

Python 3.13+.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from transync.config import TransportOptions
from transync.constants import (
    FAILED_DOWNLOADS_FILE_NAME,
    FAILED_UPLOADS_FILE_NAME,
    TRANSLATION_FILE_EXTENSION,
)
from transync.diagnostics import DocumentError
from transync.documents import (
    DocumentStorage,
    TranslationCodec,
    TranslationDocument,
    clean_downloaded_document,
)
from transync.enums import FailureReason, TransferDirection
from transync.languages import get_base_language, get_language
from transync.languages.types import LanguageCode, ResourceName
from transync.synchronization.templates import translation_file_path, translations_directory
from transync.transport.client import TransportClient
from transync.transport.jobs import (
    FailureDescriptor,
    TransferResult,
    TransferSummary,
    UploadDetails,
)
from transync.transport.orchestrator import TransportOrchestrator, UploadSource
from transync.transport.records import (
    read_failed_downloads,
    read_failed_uploads,
    write_failed_downloads,
    write_failed_uploads,
)

__all__ = [
    "download_translations",
    "format_upload_summary",
    "save_translations",
    "upload_translations",
]

logger = logging.getLogger(__name__)


def save_translations(
    result: TransferResult[str],
    resource_name: ResourceName,
    *,
    options: TransportOptions,
    storage: DocumentStorage,
    codec: TranslationCodec,
    replace_existing: bool = False,
) -> tuple[TransferResult[str], list[str]]:
    """Store downloaded documents of one resource.

    Every document is parsed before anything is written: a document that
    cannot be parsed becomes a failure of its language instead of aborting
    the run. Documents without a single non-empty translation are skipped.
    Service language codes are mapped to document names through the
    language catalogue.

    Args:
        result: Downloaded content per language code
        resource_name: Downloaded resource; options map it to its package
        options: Run options
        storage: Repository storage
        codec: Document text format
        replace_existing: Remove the package's translations before writing

    Returns:
        The result with unparsable documents moved to its failures, and the
        paths of the stored documents
    """
    package_path = options.packages[resource_name]
    documents: dict[str, TranslationDocument] = {}
    parsed: dict[LanguageCode, str] = {}
    failed = list(result.failed)
    for language_code, content in result.succeeded.items():
        language = get_language(language_code, source=options.project_name)
        path = str(
            PurePosixPath(translations_directory(package_path))
            / f"{language.file_name}{TRANSLATION_FILE_EXTENSION}"
        )
        try:
            document = codec.parse(content, path)
        except DocumentError as e:
            logger.warning("Cannot store %s: %s", path, e)
            failed.append(
                FailureDescriptor(
                    resource_name=resource_name,
                    language_code=language_code,
                    reason=FailureReason.INVALID_DOCUMENT,
                    error_message=str(e),
                )
            )
            continue
        parsed[language_code] = content
        if document.has_translations():
            documents[path] = document
        else:
            logger.debug("Skipping %s: no translations", path)

    if replace_existing:
        storage.remove_tree(translations_directory(package_path))

    for path, document in documents.items():
        clean_downloaded_document(
            document,
            organization_name=options.organization_name,
            project_name=options.project_name,
            simplify_license_header=options.simplify_license_header,
        )
        storage.write(path, codec.serialize(document))

    return TransferResult(succeeded=parsed, failed=tuple(failed)), list(documents)


async def download_translations(
    options: TransportOptions,
    *,
    client: TransportClient,
    storage: DocumentStorage,
    codec: TranslationCodec,
) -> TransferSummary:
    """Download translations of every configured package.

    Old translations of a package are replaced by the new ones, unless this
    run only retries previously failed downloads.

    Raises:
        UnknownLanguageError: If the project has a language outside the catalogue
        DocumentError: If the failure record is corrupt
    """
    record_path = FAILED_DOWNLOADS_FILE_NAME
    previous_failures = read_failed_downloads(storage, record_path)
    is_rerun = previous_failures is not None

    logger.info("Fetching project information...")
    project = await client.get_project_data(options.packages)
    for language_code in project.language_codes:
        get_language(language_code, source=f"{options.organization_name}/{options.project_name}")

    to_process: dict[ResourceName, tuple[LanguageCode, ...]]
    if previous_failures is None:
        logger.info("Downloading all translations...")
        to_process = {name: project.language_codes for name in project.resource_names}
    else:
        logger.warning(
            "Found %s; processing only the translations that failed previously.", record_path
        )
        to_process = {
            name: tuple(code for code in codes if code in project.language_codes)
            for name, codes in previous_failures.items()
            if name in project.resource_names
        }
        to_process = {name: codes for name, codes in to_process.items() if codes}

    orchestrator = TransportOrchestrator(client, options.polling)
    results: dict[ResourceName, TransferResult[object]] = {}
    for resource_name, language_codes in to_process.items():
        downloaded = await orchestrator.download(resource_name, language_codes)
        result, saved = save_translations(
            downloaded,
            resource_name,
            options=options,
            storage=storage,
            codec=codec,
            replace_existing=not is_rerun,
        )
        results[resource_name] = result

        if result.failed:
            logger.warning(
                'Processed "%s": saved %d file(s), %d request(s) failed.',
                resource_name,
                len(saved),
                len(result.failed),
            )
        else:
            logger.info('Processed "%s": saved %d file(s).', resource_name, len(saved))

    summary = TransferSummary(
        direction=TransferDirection.DOWNLOAD, results=results, is_rerun=is_rerun
    )
    write_failed_downloads(storage, record_path, summary.failed)
    if summary.failed:
        logger.warning(
            "Not all translations were downloaded. Review %s; re-running processes only those.",
            record_path,
        )
    else:
        logger.info("Saved all translations.")
    return summary


def format_upload_summary(result: TransferResult[UploadDetails]) -> list[str]:
    """Format one line per uploaded resource.

    New resources come first, then resources with changes, then the rest;
    alphabetical within each group.
    """
    rows = sorted(
        result.succeeded.items(),
        key=lambda item: (not item[1].is_new, not item[1].changes, item[0]),
    )
    return [
        f"{name}{' (new)' if details.is_new else ''}: "
        f"{details.strings_created} added, {details.strings_updated} updated, "
        f"{details.strings_deleted} removed"
        for name, details in rows
    ]


async def upload_translations(
    options: TransportOptions,
    *,
    client: TransportClient,
    storage: DocumentStorage,
) -> TransferSummary:
    """Upload the base-language document of every configured package.

    Raises:
        DocumentError: If a base-language document or the failure record
            cannot be read
    """
    record_path = FAILED_UPLOADS_FILE_NAME
    previous_failures = read_failed_uploads(storage, record_path)
    if previous_failures is not None:
        logger.warning(
            "Found %s; processing only the packages that failed previously.", record_path
        )

    logger.info("Fetching project information...")
    project = await client.get_project_data(options.packages)
    existing = set(project.resource_names)
    base_language = get_base_language()

    sources: dict[ResourceName, UploadSource] = {}
    for resource_name, package_path in options.packages.items():
        if previous_failures is not None and resource_name not in previous_failures:
            continue
        path = translation_file_path(package_path, base_language)
        try:
            content = storage.read(path)
        except OSError as e:
            msg = f"Cannot read source document: {e}"
            raise DocumentError(msg, path=path) from e
        sources[resource_name] = UploadSource(content=content, is_new=resource_name not in existing)

    logger.info("Uploading %d resource(s)...", len(sources))
    result = await TransportOrchestrator(client, options.polling).upload(sources)
    for line in format_upload_summary(result):
        logger.info("%s", line)

    summary = TransferSummary(
        direction=TransferDirection.UPLOAD,
        results={name: result.for_resource(name) for name in sources},
        is_rerun=previous_failures is not None,
    )
    write_failed_uploads(storage, record_path, summary.failed)
    if summary.failed:
        logger.warning(
            "Not all translations were uploaded. Review %s; re-running processes only those.",
            record_path,
        )
    return summary
