"""Context-driven synchronization of translation documents.

For every package with a non-empty context registry, each language's
translation document is reconciled with the registry and the source
messages:

1. Documents are created from a blank template for missing languages.
2. Header fields are regenerated from the language catalogue.
3. Entries without an applicable message are dropped.
4. Entries whose base-language wording changed (drift) are dropped, so that
   step 5 recreates them untranslated in every language.
5. Missing entries are appended: source text for the base language, empty
   forms otherwise.
6. Plural entries get exactly as many forms as the language has.
7. A document is written only when its serialized text changed.

Documents of one package are processed sequentially; packages do not share
any file, so callers may run packages in separate workers.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from transync.constants import TRANSLATION_FILE_EXTENSION
from transync.diagnostics import DocumentError
from transync.documents import (
    DocumentStorage,
    TranslationCodec,
    TranslationDocument,
    TranslationEntry,
)
from transync.languages import Language, get_headers, get_language, get_languages
from transync.languages.types import MessageId
from transync.sources import ContextRegistry, SourceMessage
from transync.synchronization.templates import (
    create_document_template,
    translation_file_path,
    translations_directory,
)

__all__ = [
    "SynchronizationResult",
    "find_drifted_messages",
    "reconcile_document",
    "resolve_applicable_messages",
    "synchronize",
    "synchronize_package",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SynchronizationResult:
    """Files touched by a synchronization pass.

    Attributes:
        created: Documents created from the blank template
        written: Documents whose content changed (created ones included)
        unchanged: Documents left untouched
        dry_run: True when nothing was actually written
    """

    created: tuple[str, ...] = ()
    written: tuple[str, ...] = ()
    unchanged: tuple[str, ...] = ()
    dry_run: bool = False

    @property
    def has_changes(self) -> bool:
        """True when at least one document was (or would be) written."""
        return bool(self.written)

    def merge(self, other: SynchronizationResult) -> SynchronizationResult:
        """Combine the results of two passes."""
        return SynchronizationResult(
            created=self.created + other.created,
            written=self.written + other.written,
            unchanged=self.unchanged + other.unchanged,
            dry_run=self.dry_run or other.dry_run,
        )


@dataclass(slots=True)
class _LoadedDocument:
    path: str
    language: Language
    document: TranslationDocument
    original_text: str | None = None
    is_new: bool = field(default=False)


def resolve_applicable_messages(
    registry: ContextRegistry,
    source_messages: Sequence[SourceMessage],
) -> dict[MessageId, SourceMessage]:
    """Resolve every registry id to the first source message with that id.

    Ids without a message are left out; the validator reports them.
    """
    first_by_id: dict[MessageId, SourceMessage] = {}
    for message in source_messages:
        first_by_id.setdefault(message.id, message)

    return {
        message_id: first_by_id[message_id]
        for message_id in registry.entries
        if message_id in first_by_id
    }


def _has_drifted(entry: TranslationEntry, message: SourceMessage) -> bool:
    if not entry.forms or entry.forms[0] != message.text:
        return True
    if entry.plural_id != message.plural_text:
        return True
    if message.plural_text is not None:
        return len(entry.forms) < 2 or entry.forms[1] != message.plural_text
    return False


def find_drifted_messages(
    base_document: TranslationDocument,
    messages: Mapping[MessageId, SourceMessage],
) -> set[MessageId]:
    """Find ids whose base-language entry no longer matches the source text.

    The base-language document records the wording every translation was
    made from. Ids missing from it are new, not drifted.
    """
    drifted: set[MessageId] = set()
    for message_id, message in messages.items():
        entry = base_document.find(message_id)
        if entry is not None and _has_drifted(entry, message):
            drifted.add(message_id)
    return drifted


def _new_entry(message: SourceMessage, context: str, language: Language) -> TranslationEntry:
    if language.is_base:
        forms = [message.text]
        if message.plural_text is not None:
            forms.append(message.plural_text)
    elif message.plural_text is not None:
        forms = [""] * language.number_of_plural_forms
    else:
        forms = [""]

    return TranslationEntry(
        id=message.id,
        context=context,
        forms=forms,
        plural_id=message.plural_text,
    )


def _align_plural_forms(entry: TranslationEntry, number_of_plural_forms: int) -> None:
    forms = entry.forms[:number_of_plural_forms]
    forms.extend([""] * (number_of_plural_forms - len(forms)))
    entry.forms = forms


def reconcile_document(
    document: TranslationDocument,
    language: Language,
    *,
    registry: ContextRegistry,
    messages: Mapping[MessageId, SourceMessage],
    drifted: set[MessageId],
) -> None:
    """Bring one document in line with the registry and source messages (in place).

    Args:
        document: Document to update
        language: Language of the document
        registry: Context registry of the document's package
        messages: Applicable messages of the package, in registry order
        drifted: Ids whose wording changed since they were translated
    """
    document.headers = get_headers(language)

    kept: list[TranslationEntry] = []
    for entry in document.entries:
        if entry.id not in messages or entry.id in drifted:
            continue
        entry.context = registry.entries[entry.id]
        kept.append(entry)

    present = {entry.id for entry in kept}
    for message_id, message in messages.items():
        if message_id not in present:
            kept.append(_new_entry(message, registry.entries[message_id], language))

    for entry in kept:
        if entry.has_plural_forms:
            _align_plural_forms(entry, language.number_of_plural_forms)

    document.entries = kept


def _load_document(
    path: str,
    *,
    storage: DocumentStorage,
    codec: TranslationCodec,
) -> _LoadedDocument:
    try:
        text = storage.read(path)
    except OSError as e:
        msg = f"Cannot read translation document: {e}"
        raise DocumentError(msg, path=path) from e

    document = codec.parse(text, path)
    locale_code = document.language_locale
    if not locale_code:
        msg = "Translation document has no Language header"
        raise DocumentError(msg, path=path)

    language = get_language(locale_code, source=path)
    return _LoadedDocument(path=path, language=language, document=document, original_text=text)


def _load_package_documents(
    registry: ContextRegistry,
    *,
    storage: DocumentStorage,
    codec: TranslationCodec,
    skip_license_header: bool,
) -> list[_LoadedDocument]:
    directory = translations_directory(registry.package_path)
    documents = [
        _load_document(path, storage=storage, codec=codec)
        for path in storage.list_files(directory, f"*{TRANSLATION_FILE_EXTENSION}")
    ]

    for language in get_languages():
        path = translation_file_path(registry.package_path, language)
        if storage.exists(path):
            continue
        logger.debug("Creating %s from template", path)
        documents.append(
            _LoadedDocument(
                path=path,
                language=language,
                document=create_document_template(
                    language, skip_license_header=skip_license_header
                ),
                is_new=True,
            )
        )

    return documents


def synchronize_package(
    registry: ContextRegistry,
    source_messages: Sequence[SourceMessage],
    *,
    storage: DocumentStorage,
    codec: TranslationCodec,
    skip_license_header: bool = False,
    dry_run: bool = False,
) -> SynchronizationResult:
    """Synchronize the translation documents of one package.

    Raises:
        DocumentError: If a document cannot be read or parsed
        UnknownLanguageError: If a document declares a locale outside the catalogue
    """
    if registry.is_empty:
        logger.debug("Skipping %s: no contexts", registry.package_path)
        return SynchronizationResult(dry_run=dry_run)

    loaded = _load_package_documents(
        registry, storage=storage, codec=codec, skip_license_header=skip_license_header
    )
    messages = resolve_applicable_messages(registry, source_messages)

    drifted: set[MessageId] = set()
    for item in loaded:
        if item.language.is_base:
            drifted |= find_drifted_messages(item.document, messages)
    if drifted:
        logger.info(
            "%d message(s) changed wording in %s", len(drifted), registry.package_path
        )

    created: list[str] = []
    written: list[str] = []
    unchanged: list[str] = []
    for item in loaded:
        reconcile_document(
            item.document,
            item.language,
            registry=registry,
            messages=messages,
            drifted=drifted,
        )
        text = codec.serialize(item.document)
        if text == item.original_text:
            unchanged.append(item.path)
            continue

        if not dry_run:
            storage.write(item.path, text)
        written.append(item.path)
        if item.is_new:
            created.append(item.path)

    logger.debug(
        "%s: %d written, %d unchanged", registry.package_path, len(written), len(unchanged)
    )
    return SynchronizationResult(
        created=tuple(created),
        written=tuple(written),
        unchanged=tuple(unchanged),
        dry_run=dry_run,
    )


def synchronize(
    registries: Sequence[ContextRegistry],
    source_messages: Sequence[SourceMessage],
    *,
    storage: DocumentStorage,
    codec: TranslationCodec,
    skip_license_header: bool = False,
    dry_run: bool = False,
) -> SynchronizationResult:
    """Synchronize the translation documents of every package.

    Call only after validate_contexts() reported no errors.

    Args:
        registries: Context registries, one per package
        source_messages: Messages extracted from all source files
        storage: Where documents are read from and written to
        codec: Document text format
        skip_license_header: Create new documents without the license banner
        dry_run: Compute all changes but write nothing

    Returns:
        Paths of created, written and unchanged documents

    Raises:
        DocumentError: If a document cannot be read or parsed
        UnknownLanguageError: If a document declares a locale outside the catalogue
    """
    result = SynchronizationResult(dry_run=dry_run)
    for registry in registries:
        result = result.merge(
            synchronize_package(
                registry,
                source_messages,
                storage=storage,
                codec=codec,
                skip_license_header=skip_license_header,
                dry_run=dry_run,
            )
        )
    return result
