"""Translation document model.

In-memory form of one translation document (one package, one language):
a header block and an ordered list of entries. The on-disk grammar lives
behind TranslationCodec (see documents.pofile); everything in transync
works on this model only.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from transync.languages.types import MessageId

__all__ = [
    "TranslationDocument",
    "TranslationEntry",
]


@dataclass(slots=True)
class TranslationEntry:
    """Single translatable message in a document.

    Attributes:
        id: Message id (the PO msgid)
        context: Human-readable disambiguation (the PO msgctxt)
        forms: Translation forms; one for singular-only entries, one per
            plural form of the document's language otherwise
        plural_id: Plural source text (the PO msgid_plural), None for
            singular-only entries
        translator_comment: Free-form comment kept from the source file
        extracted_comment: Extracted comment kept from the source file
        flags: PO flags (e.g., 'fuzzy')
    """

    id: MessageId
    context: str | None = None
    forms: list[str] = field(default_factory=lambda: [""])
    plural_id: str | None = None
    translator_comment: str = ""
    extracted_comment: str = ""
    flags: list[str] = field(default_factory=list)

    @property
    def has_plural_forms(self) -> bool:
        """True when the entry offers plural forms."""
        return bool(self.plural_id)

    @property
    def is_translated(self) -> bool:
        """True when at least one form is non-empty."""
        return any(self.forms)


@dataclass(slots=True)
class TranslationDocument:
    """Header block plus ordered entries of one translation document.

    Attributes:
        headers: Header fields (e.g., Language, Plural-Forms, Content-Type)
        entries: Entries in file order; ids are unique
        header_comment: Comment block above the header (license banner)
    """

    headers: dict[str, str] = field(default_factory=dict)
    entries: list[TranslationEntry] = field(default_factory=list)
    header_comment: str = ""

    @property
    def language_locale(self) -> str | None:
        """Locale declared by the Language header, if any."""
        return self.headers.get("Language")

    @property
    def message_ids(self) -> set[MessageId]:
        """Ids of all entries."""
        return {entry.id for entry in self.entries}

    def find(self, message_id: MessageId) -> TranslationEntry | None:
        """Get the entry with the given id, or None."""
        for entry in self.entries:
            if entry.id == message_id:
                return entry
        return None

    def remove(self, message_id: MessageId) -> TranslationEntry | None:
        """Remove and return the entry with the given id, or None."""
        entry = self.find(message_id)
        if entry is not None:
            self.entries.remove(entry)
        return entry

    def has_translations(self) -> bool:
        """True when any entry carries a non-empty translation."""
        return any(entry.is_translated for entry in self.entries)
