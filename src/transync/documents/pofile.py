"""Gettext PO codec for translation documents.

The PO grammar itself is handled by polib; this module only converts
between polib's objects and the TranslationDocument model, and applies the
clean-up rules for documents received from the translation service.

Components:
    TranslationCodec - Protocol for parse/serialize (structural typing)
    PoCodec - polib-backed implementation
    clean_downloaded_document - Remove personal data, add contribution banner

Python 3.13+. Depends on polib.
"""

from __future__ import annotations

from typing import Protocol

import polib

from transync.constants import (
    CONTRIBUTION_BANNER_TEMPLATE,
    PERSONAL_DATA_HEADERS,
    SIMPLIFIED_CONTRIBUTION_BANNER_TEMPLATE,
)
from transync.diagnostics import DocumentError
from transync.documents.model import TranslationDocument, TranslationEntry

__all__ = [
    "PoCodec",
    "TranslationCodec",
    "clean_downloaded_document",
]

# Line width used by polib when wrapping long strings.
_WRAP_WIDTH: int = 78


class TranslationCodec(Protocol):
    """Protocol for converting between document text and TranslationDocument.

    Implementations must be deterministic: serializing the same document
    twice yields identical text, and parse(serialize(doc)) re-serializes to
    the same text. The synchronizer relies on this to skip unchanged files.
    """

    def parse(self, text: str, path: str) -> TranslationDocument:
        """Parse document text.

        Args:
            text: Document content
            path: Path of the document, for error messages

        Raises:
            DocumentError: If the text is not a valid document
        """

    def serialize(self, document: TranslationDocument) -> str:
        """Serialize a document to text."""


class PoCodec:
    """TranslationCodec for gettext PO files, backed by polib.

    Obsolete entries (``#~``) are dropped on parse. Duplicate message ids are
    treated as a corrupt document.

    Example:
        >>> codec = PoCodec()
        >>> document = codec.parse(path.read_text(encoding="utf-8"), str(path))
        >>> document.find("Bold").forms
        ['Pogrubienie']
    """

    __slots__ = ()

    def parse(self, text: str, path: str) -> TranslationDocument:
        """Parse PO text into a TranslationDocument.

        Raises:
            DocumentError: If polib rejects the text or ids repeat
        """
        try:
            po = polib.pofile(text, wrapwidth=_WRAP_WIDTH)
        except (OSError, ValueError) as e:
            msg = f"Cannot parse translation document: {e}"
            raise DocumentError(msg, path=path) from e

        entries: list[TranslationEntry] = []
        seen_ids: set[str] = set()
        for po_entry in po:
            if po_entry.obsolete:
                continue
            if po_entry.msgid in seen_ids:
                msg = f'Duplicated message "{po_entry.msgid}" in translation document'
                raise DocumentError(msg, path=path)
            seen_ids.add(po_entry.msgid)
            entries.append(_entry_from_po(po_entry))

        return TranslationDocument(
            headers=dict(po.metadata),
            entries=entries,
            header_comment=po.header,
        )

    def serialize(self, document: TranslationDocument) -> str:
        """Serialize a TranslationDocument to PO text."""
        po = polib.POFile(wrapwidth=_WRAP_WIDTH)
        po.header = document.header_comment
        po.metadata = dict(document.headers)
        for entry in document.entries:
            po.append(_entry_to_po(entry))

        text = str(po)
        # polib writes a lone "#" line for an empty header comment.
        if not document.header_comment and text.startswith("#\n"):
            text = text[2:]
        return text


def _entry_from_po(po_entry: polib.POEntry) -> TranslationEntry:
    if po_entry.msgid_plural:
        forms = [
            po_entry.msgstr_plural[index]
            for index in sorted(po_entry.msgstr_plural, key=int)
        ]
    else:
        forms = [po_entry.msgstr]

    return TranslationEntry(
        id=po_entry.msgid,
        context=po_entry.msgctxt,
        forms=forms,
        plural_id=po_entry.msgid_plural or None,
        translator_comment=po_entry.tcomment,
        extracted_comment=po_entry.comment,
        flags=list(po_entry.flags),
    )


def _entry_to_po(entry: TranslationEntry) -> polib.POEntry:
    if entry.has_plural_forms:
        return polib.POEntry(
            msgctxt=entry.context,
            msgid=entry.id,
            msgid_plural=entry.plural_id,
            msgstr_plural=dict(enumerate(entry.forms)),
            tcomment=entry.translator_comment,
            comment=entry.extracted_comment,
            flags=list(entry.flags),
        )

    return polib.POEntry(
        msgctxt=entry.context,
        msgid=entry.id,
        msgstr=entry.forms[0] if entry.forms else "",
        tcomment=entry.translator_comment,
        comment=entry.extracted_comment,
        flags=list(entry.flags),
    )


def clean_downloaded_document(
    document: TranslationDocument,
    *,
    organization_name: str,
    project_name: str,
    simplify_license_header: bool = False,
) -> TranslationDocument:
    """Prepare a document received from the translation service for storage.

    Removes translator identity (the Translators comment block and personal
    data headers), keeps a leading copyright line when present, and appends
    the banner explaining where translations must be contributed.

    Args:
        document: Parsed downloaded document (modified in place)
        organization_name: Organization owning the project on the service
        project_name: Project on the service
        simplify_license_header: Omit the service URL and contributor guide

    Returns:
        The same document, for chaining
    """
    lines = document.header_comment.splitlines()
    copyright_line = lines[0] if lines and lines[0].startswith("Copyright") else ""

    template = (
        SIMPLIFIED_CONTRIBUTION_BANNER_TEMPLATE
        if simplify_license_header
        else CONTRIBUTION_BANNER_TEMPLATE
    )
    banner = template.format(organization_name=organization_name, project_name=project_name)

    if copyright_line:
        document.header_comment = copyright_line + banner.rstrip("\n")
    else:
        document.header_comment = banner.strip("\n")

    for header in PERSONAL_DATA_HEADERS:
        document.headers.pop(header, None)

    return document
