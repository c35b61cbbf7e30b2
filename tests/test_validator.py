"""Tests for consistency checks between contexts and source messages."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from transync.enums import ContextErrorCode
from transync.sources import ContextRegistry
from transync.synchronization import validate_contexts
from transync.synchronization.validator import (
    find_duplicated_contexts,
    find_missing_contexts,
    find_unused_contexts,
)

from tests.helpers.packages import message
from tests.strategies import context_registries

CORE = "packages/core"


def _registry(package_path: str, *message_ids: str) -> ContextRegistry:
    return ContextRegistry(
        package_path=package_path,
        context_file_path=f"{package_path}/lang/contexts.json",
        entries={message_id: f"Context of {message_id}" for message_id in message_ids},
    )


class TestMissingContexts:
    """Test detection of messages without context."""

    def test_message_with_own_context(self) -> None:
        """A message is covered by its own package."""
        errors = find_missing_contexts(
            [_registry("packages/foo", "Bold"), _registry(CORE)],
            [message("Bold")],
            core_package_path=CORE,
        )

        assert errors == []

    def test_message_with_core_context(self) -> None:
        """A message is covered by the core package."""
        errors = find_missing_contexts(
            [_registry("packages/foo"), _registry(CORE, "Cancel")],
            [message("Cancel")],
            core_package_path=CORE,
        )

        assert errors == []

    def test_context_of_other_package_does_not_count(self) -> None:
        """Only the own package and the core package provide context."""
        errors = find_missing_contexts(
            [_registry("packages/foo"), _registry("packages/bar", "Bold"), _registry(CORE)],
            [message("Bold", file_path="packages/foo/src/bold.js")],
            core_package_path=CORE,
        )

        assert len(errors) == 1
        assert errors[0].code == ContextErrorCode.MISSING_CONTEXT
        assert errors[0].message == 'Missing context "Bold" in "packages/foo/src/bold.js".'
        assert errors[0].message_id == "Bold"

    def test_message_outside_packages_needs_core_context(self) -> None:
        """A message without package can still use a core context."""
        outside = message("Cancel", package_path="elsewhere", file_path="elsewhere/x.js")
        orphan = message("Other", file_path="elsewhere/y.js")
        errors = find_missing_contexts(
            [_registry(CORE, "Cancel")],
            [outside, orphan],
            core_package_path=CORE,
        )

        assert [error.message_id for error in errors] == ["Other"]


class TestUnusedContexts:
    """Test detection of unused context entries."""

    def test_package_context_used_by_other_package_is_unused(self) -> None:
        """Package contexts count only the package's own messages."""
        errors = find_unused_contexts(
            [_registry("packages/foo", "Bold"), _registry(CORE)],
            [message("Bold", package_path="packages/bar")],
            core_package_path=CORE,
        )

        assert len(errors) == 1
        assert errors[0].code == ContextErrorCode.UNUSED_CONTEXT
        assert errors[0].message == 'Unused context "Bold" in "packages/foo/lang/contexts.json".'

    def test_core_context_used_anywhere(self) -> None:
        """Core contexts count messages of every package."""
        errors = find_unused_contexts(
            [_registry(CORE, "Cancel")],
            [message("Cancel", package_path="packages/bar")],
            core_package_path=CORE,
        )

        assert errors == []

    def test_unused_core_contexts_can_be_ignored(self) -> None:
        """The core package may be exempted from the check."""
        registries = [_registry(CORE, "Cancel"), _registry("packages/foo", "Bold")]

        reported = find_unused_contexts(registries, [], core_package_path=CORE)
        ignored = find_unused_contexts(
            registries, [], core_package_path=CORE, ignore_unused_core_package_contexts=True
        )

        assert {error.message_id for error in reported} == {"Cancel", "Bold"}
        assert [error.message_id for error in ignored] == ["Bold"]


class TestDuplicatedContexts:
    """Test detection of ids declared by several packages."""

    def test_duplicate_reported_once_with_all_files(self) -> None:
        """One error lists every file declaring the id."""
        errors = find_duplicated_contexts(
            [
                _registry("packages/foo", "Bold"),
                _registry("packages/bar", "Bold"),
                _registry(CORE, "Bold"),
            ]
        )

        assert len(errors) == 1
        assert errors[0].code == ContextErrorCode.DUPLICATED_CONTEXT
        assert errors[0].message == (
            'Duplicated context "Bold" in "packages/foo/lang/contexts.json", '
            '"packages/bar/lang/contexts.json", "packages/core/lang/contexts.json".'
        )

    @given(registries=context_registries(), data=st.data())
    def test_detection_independent_of_order(
        self, registries: list[ContextRegistry], data: st.DataObject
    ) -> None:
        """Shuffling registries reports the same ids and files."""
        shuffled = data.draw(st.permutations(registries))

        original = find_duplicated_contexts(registries)
        reordered = find_duplicated_contexts(shuffled)

        assert len(original) == len(reordered)
        assert {(e.message_id, frozenset(e.file_paths)) for e in original} == {
            (e.message_id, frozenset(e.file_paths)) for e in reordered
        }


class TestValidateContexts:
    """Test the combined check."""

    def test_all_checks_run(self) -> None:
        """Errors of every kind are reported in one pass."""
        registries = [
            _registry("packages/foo", "Bold", "Stale"),
            _registry(CORE, "Bold", "Cancel"),
        ]
        messages = [message("Bold"), message("Italic")]

        result = validate_contexts(registries, messages, core_package_path=CORE)

        assert not result.is_valid
        assert [error.code for error in result.errors] == [
            ContextErrorCode.MISSING_CONTEXT,
            ContextErrorCode.UNUSED_CONTEXT,
            ContextErrorCode.UNUSED_CONTEXT,
            ContextErrorCode.DUPLICATED_CONTEXT,
        ]
        assert len(result.by_code(ContextErrorCode.UNUSED_CONTEXT)) == 2

    def test_consistent_sources_are_valid(self) -> None:
        """No errors for matching contexts and messages."""
        registries = [_registry("packages/foo", "Bold"), _registry(CORE, "Cancel")]
        messages = [message("Bold"), message("Cancel")]

        result = validate_contexts(registries, messages, core_package_path=CORE)

        assert result.is_valid
        assert result.format_lines() == ()
