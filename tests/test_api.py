"""Tests for the public entry points."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

import transync
from transync import (
    SynchronizeOptions,
    TransferDirection,
    TransportOptions,
    move_translations,
    synchronize_translations,
    transfer_translations,
)
from transync.documents import FileSystemStorage
from transync.enums import ContextErrorCode
from transync.languages import get_languages
from transync.sources import ExtractedMessage, SourceMessage
from transync.synchronization import MoveEntry

from tests.helpers.packages import message, read_document, write_contexts
from tests.helpers.transport import FakeClient


@pytest.fixture
def repository(storage: FileSystemStorage) -> FileSystemStorage:
    """A core package and one feature package with contexts."""
    write_contexts(storage, "packages/core", {"Cancel": "Cancel button."})
    write_contexts(storage, "packages/foo", {"Bold": "Bold button."})
    return storage


def _options(
    tmp_path: Path, messages: list[SourceMessage], **overrides: object
) -> SynchronizeOptions:
    values: dict[str, object] = {
        "package_paths": ["packages/foo"],
        "core_package_path": "packages/core",
        "source_messages": messages,
        "root_dir": str(tmp_path),
    }
    values.update(overrides)
    return SynchronizeOptions(**values)  # type: ignore[arg-type]


class TestSynchronizeTranslations:
    """Test validation followed by synchronization."""

    def test_consistent_sources_are_synchronized(
        self, tmp_path: Path, repository: FileSystemStorage
    ) -> None:
        """Documents are written for every package with contexts."""
        messages = [
            message("Bold"),
            message("Cancel", package_path="packages/core", file_path="packages/core/src/c.js"),
        ]

        report = synchronize_translations(_options(tmp_path, messages))

        assert report.is_successful
        assert report.synchronization is not None
        assert len(report.synchronization.created) == 2 * len(get_languages())
        assert read_document(repository, "packages/foo", "en").message_ids == {"Bold"}
        assert read_document(repository, "packages/core", "en").message_ids == {"Cancel"}

    def test_validation_errors_stop_the_run(
        self, tmp_path: Path, repository: FileSystemStorage, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Nothing is written when contexts and messages disagree."""
        messages = [message("Bold"), message("Italic")]

        with caplog.at_level(logging.ERROR, logger="transync"):
            report = synchronize_translations(_options(tmp_path, messages))

        assert not report.is_successful
        assert report.synchronization is None
        assert report.validation.by_code(ContextErrorCode.MISSING_CONTEXT)
        assert report.validation.by_code(ContextErrorCode.UNUSED_CONTEXT)
        assert not repository.is_directory("packages/foo/lang/translations")
        assert 'Missing context "Italic"' in caplog.text

    def test_unused_core_contexts_can_be_ignored(
        self, tmp_path: Path, repository: FileSystemStorage
    ) -> None:
        """Unused core contexts do not block the run when ignored."""
        report = synchronize_translations(
            _options(tmp_path, [message("Bold")], ignore_unused_core_package_contexts=True)
        )

        assert report.is_successful

    def test_validate_only_writes_nothing(
        self, tmp_path: Path, repository: FileSystemStorage
    ) -> None:
        """Validation mode computes changes without writing."""
        report = synchronize_translations(
            _options(
                tmp_path,
                [message("Bold")],
                ignore_unused_core_package_contexts=True,
                validate_only=True,
            )
        )

        assert report.synchronization is not None
        assert report.synchronization.dry_run
        assert report.synchronization.has_changes
        assert not repository.is_directory("packages/foo/lang/translations")

    def test_messages_extracted_from_source_files(
        self, tmp_path: Path, repository: FileSystemStorage
    ) -> None:
        """An extractor turns source files into messages."""
        repository.write("packages/foo/src/bold.js", "t( 'Bold' )\n")

        def extract(
            content: str, file_path: str, on_error: Callable[[str], None]
        ) -> Iterator[ExtractedMessage]:
            for line in content.splitlines():
                yield ExtractedMessage(id=line.split("'")[1], text=line.split("'")[1])

        report = synchronize_translations(
            _options(
                tmp_path,
                [],
                source_messages=None,
                extractor=extract,
                source_files=["packages/foo/src/bold.js"],
                ignore_unused_core_package_contexts=True,
            )
        )

        assert report.is_successful
        assert read_document(repository, "packages/foo", "en").message_ids == {"Bold"}


class TestTransferTranslations:
    """Test the transfer entry point with a scripted service."""

    def test_download(self, tmp_path: Path) -> None:
        """Downloads run to completion and return a summary."""
        options = TransportOptions(
            organization_name="acme",
            project_name="editor",
            auth_token="secret",
            packages={"core": "packages/core"},
            cwd=str(tmp_path),
            poll_delay=0,
            issuance_stagger=0,
        )
        client = FakeClient(
            resource_names=("core",),
            language_codes=("en", "pl"),
            contents={
                ("core", "en"): 'msgid ""\nmsgstr ""\n"Language: en\\n"\n\nmsgid "Bold"\nmsgstr "Bold"\n',
                ("core", "pl"): 'msgid ""\nmsgstr ""\n"Language: pl\\n"\n\nmsgid "Bold"\nmsgstr "Pogrubienie"\n',
            },
        )

        summary = transfer_translations(TransferDirection.DOWNLOAD, options, client=client)

        assert summary.direction is TransferDirection.DOWNLOAD
        assert summary.succeeded_count == 2
        assert summary.is_complete


class TestMoveTranslations:
    """Test the move entry point."""

    def test_invalid_move_is_logged(
        self, tmp_path: Path, repository: FileSystemStorage, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Move errors are returned and logged."""
        with caplog.at_level(logging.ERROR, logger="transync"):
            result = move_translations(
                [MoveEntry("packages/foo", "packages/missing", "Bold")], root_dir=str(tmp_path)
            )

        assert not result.is_valid
        assert "Missing package" in caplog.text


def test_version_is_exposed() -> None:
    """Package exposes a version string."""
    assert isinstance(transync.__version__, str)
