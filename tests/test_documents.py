"""Tests for the document model, the PO codec and file system storage."""

from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import given

from transync.diagnostics import DocumentError
from transync.documents import (
    FileSystemStorage,
    PoCodec,
    TranslationDocument,
    TranslationEntry,
    clean_downloaded_document,
)
from transync.languages import get_headers, get_language

from tests.strategies import translation_documents

POLISH_DOCUMENT = """\
# Copyright (c) 2003-2026, the project authors. All rights reserved.
msgid ""
msgstr ""
"Language: pl\\n"
"Plural-Forms: nplurals=3; plural=(n==1 ? 0 : n%10>=2 && n%10<=4 && (n%100<10 || n%100>=20) ? 1 : 2);\\n"
"Content-Type: text/plain; charset=UTF-8\\n"

msgctxt "Toolbar button tooltip for the Bold feature."
msgid "Bold"
msgstr "Pogrubienie"

msgctxt "Number of selected items."
msgid "%0 item"
msgid_plural "%0 items"
msgstr[0] "%0 element"
msgstr[1] "%0 elementy"
msgstr[2] "%0 elementów"
"""


class TestTranslationDocument:
    """Test model helpers."""

    def test_find_and_remove(self) -> None:
        """Entries are found and removed by id."""
        document = TranslationDocument(entries=[TranslationEntry(id="A"), TranslationEntry(id="B")])

        assert document.find("B") is document.entries[1]
        assert document.find("C") is None
        assert document.remove("A") is not None
        assert document.message_ids == {"B"}
        assert document.remove("A") is None

    def test_language_locale_from_header(self) -> None:
        """Language header names the locale."""
        assert TranslationDocument(headers={"Language": "pl"}).language_locale == "pl"
        assert TranslationDocument().language_locale is None

    def test_has_translations(self) -> None:
        """Only non-empty forms count as translations."""
        empty = TranslationDocument(entries=[TranslationEntry(id="A", forms=["", ""])])
        translated = TranslationDocument(entries=[TranslationEntry(id="A", forms=["", "x"])])

        assert not empty.has_translations()
        assert translated.has_translations()

    def test_plural_entry(self) -> None:
        """Plural id marks an entry as plural."""
        assert TranslationEntry(id="A", plural_id="As").has_plural_forms
        assert not TranslationEntry(id="A").has_plural_forms


class TestPoCodecParse:
    """Test parsing PO text."""

    def test_parse_headers_and_entries(self) -> None:
        """Header fields, singular and plural entries are read."""
        document = PoCodec().parse(POLISH_DOCUMENT, "pl.po")

        assert document.language_locale == "pl"
        assert document.headers["Content-Type"] == "text/plain; charset=UTF-8"
        assert document.header_comment == (
            "Copyright (c) 2003-2026, the project authors. All rights reserved."
        )

        bold = document.find("Bold")
        assert bold is not None
        assert bold.context == "Toolbar button tooltip for the Bold feature."
        assert bold.forms == ["Pogrubienie"]
        assert not bold.has_plural_forms

        items = document.find("%0 item")
        assert items is not None
        assert items.plural_id == "%0 items"
        assert items.forms == ["%0 element", "%0 elementy", "%0 elementów"]

    def test_parse_drops_obsolete_entries(self) -> None:
        """Obsolete (#~) entries are not part of the model."""
        text = POLISH_DOCUMENT + '\n#~ msgid "Old"\n#~ msgstr "Stary"\n'

        document = PoCodec().parse(text, "pl.po")

        assert document.find("Old") is None

    def test_parse_duplicate_ids_is_error(self) -> None:
        """Repeated ids make the document corrupt."""
        text = POLISH_DOCUMENT + '\nmsgid "Bold"\nmsgstr "Tłusty"\n'

        with pytest.raises(DocumentError, match="Duplicated message") as exc_info:
            PoCodec().parse(text, "pl.po")

        assert exc_info.value.path == "pl.po"

    def test_parse_garbage_is_error(self) -> None:
        """Unparsable text raises DocumentError, never an empty document."""
        with pytest.raises(DocumentError, match="broken.po"):
            PoCodec().parse("this is not a translation document\n", "broken.po")


class TestPoCodecSerialize:
    """Test serializing documents."""

    def test_serialize_parse_roundtrip(self) -> None:
        """Parsed text serializes to identical text."""
        codec = PoCodec()
        first = codec.serialize(codec.parse(POLISH_DOCUMENT, "pl.po"))
        second = codec.serialize(codec.parse(first, "pl.po"))

        assert first == second

    def test_serialize_empty_header_comment(self) -> None:
        """No stray comment line when the header comment is empty."""
        document = TranslationDocument(headers=get_headers(get_language("de")))

        text = PoCodec().serialize(document)

        assert text.startswith('msgid ""')

    def test_serialize_plural_entry(self) -> None:
        """Plural entries are written with indexed msgstr lines."""
        document = TranslationDocument(
            headers=get_headers(get_language("pl")),
            entries=[
                TranslationEntry(id="%0 item", context="ctx", plural_id="%0 items", forms=["a", "b", ""])
            ],
        )

        text = PoCodec().serialize(document)

        assert 'msgid_plural "%0 items"' in text
        assert 'msgstr[0] "a"' in text
        assert 'msgstr[2] ""' in text

    @given(document=translation_documents())
    def test_serialization_is_stable(self, document: TranslationDocument) -> None:
        """Serialize, parse and serialize again yields the same text."""
        codec = PoCodec()
        text = codec.serialize(document)
        reparsed = codec.parse(text, "doc.po")

        assert codec.serialize(reparsed) == text
        assert [entry.id for entry in reparsed.entries] == [entry.id for entry in document.entries]
        assert [entry.forms for entry in reparsed.entries] == [
            entry.forms for entry in document.entries
        ]


class TestCleanDownloadedDocument:
    """Test clean-up of documents received from the service."""

    def _downloaded(self, header_comment: str) -> TranslationDocument:
        headers = get_headers(get_language("pl"))
        headers["Last-Translator"] = "Jan Kowalski <jan@example.com>"
        return TranslationDocument(headers=headers, header_comment=header_comment)

    def test_personal_data_removed(self) -> None:
        """Translator identity is dropped from headers and comments."""
        document = self._downloaded(
            "Copyright (c) Example\nTranslators:\nJan Kowalski <jan@example.com>, 2024"
        )

        clean_downloaded_document(document, organization_name="acme", project_name="editor")

        assert "Last-Translator" not in document.headers
        assert "Jan Kowalski" not in document.header_comment
        assert document.header_comment.startswith("Copyright (c) Example\n")

    def test_banner_links_project(self) -> None:
        """The banner points to the project on the service."""
        document = self._downloaded("Translators:\nJan")

        clean_downloaded_document(document, organization_name="acme", project_name="editor")

        assert "!!! IMPORTANT !!!" in document.header_comment
        assert "https://app.transifex.com/acme/editor" in document.header_comment
        assert not document.header_comment.startswith("\n")

    def test_simplified_banner(self) -> None:
        """Simplified banner omits the service URL."""
        document = self._downloaded("")

        clean_downloaded_document(
            document,
            organization_name="acme",
            project_name="editor",
            simplify_license_header=True,
        )

        assert "!!! IMPORTANT !!!" in document.header_comment
        assert "app.transifex.com" not in document.header_comment

    def test_cleaned_document_roundtrips(self) -> None:
        """The banner survives a serialize/parse cycle unchanged."""
        codec = PoCodec()
        document = self._downloaded("Copyright (c) Example\nTranslators:\nJan")
        clean_downloaded_document(document, organization_name="acme", project_name="editor")

        text = codec.serialize(document)

        assert codec.serialize(codec.parse(text, "pl.po")) == text


class TestFileSystemStorage:
    """Test file system storage."""

    def test_write_creates_parents_and_reads_back(self, tmp_path: Path) -> None:
        """Parent directories are created on write."""
        storage = FileSystemStorage(str(tmp_path))

        storage.write("a/b/c.po", "zażółć\n")

        assert storage.exists("a/b/c.po")
        assert storage.is_directory("a/b")
        assert storage.read("a/b/c.po") == "zażółć\n"
        assert (tmp_path / "a" / "b" / "c.po").read_text(encoding="utf-8") == "zażółć\n"

    def test_newlines_are_not_translated(self, tmp_path: Path) -> None:
        """Bytes on disk match the written text exactly."""
        storage = FileSystemStorage(str(tmp_path))

        storage.write("x.txt", "a\r\nb\n")

        assert storage.read("x.txt") == "a\r\nb\n"

    def test_list_files_sorted_and_filtered(self, tmp_path: Path) -> None:
        """Only matching files are listed, sorted."""
        storage = FileSystemStorage(str(tmp_path))
        for name in ("pl.po", "de.po", "notes.txt"):
            storage.write(f"lang/{name}", "")

        assert storage.list_files("lang", "*.po") == ["lang/de.po", "lang/pl.po"]
        assert storage.list_files("missing", "*.po") == []

    def test_read_missing_file_raises(self, tmp_path: Path) -> None:
        """Reading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            FileSystemStorage(str(tmp_path)).read("nope.po")

    def test_remove_and_remove_tree(self, tmp_path: Path) -> None:
        """Files and directory trees are removed; missing targets are ignored."""
        storage = FileSystemStorage(str(tmp_path))
        storage.write("lang/translations/pl.po", "")
        storage.write("lang/translations/nested/x.po", "")
        storage.write("record.json", "[]")

        storage.remove("record.json")
        storage.remove("record.json")
        storage.remove_tree("lang/translations")
        storage.remove_tree("lang/translations")

        assert not storage.exists("record.json")
        assert not storage.is_directory("lang/translations")
        assert storage.is_directory("lang")

    def test_remove_tree_of_symlinked_directory(self, tmp_path: Path) -> None:
        """A symlinked directory is unlinked; its target is kept."""
        storage = FileSystemStorage(str(tmp_path))
        storage.write("shared/pl.po", "kept")
        (tmp_path / "lang").mkdir()
        (tmp_path / "lang" / "translations").symlink_to(tmp_path / "shared")

        storage.remove_tree("lang/translations")

        assert not (tmp_path / "lang" / "translations").exists()
        assert storage.read("shared/pl.po") == "kept"
