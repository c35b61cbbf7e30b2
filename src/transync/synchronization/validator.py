"""Consistency checks between context registries and source messages.

Three independent checks, each a pure function returning error values:

- Missing context: a message without context in its package or the core package
- Unused context: a context nobody uses
- Duplicated context: a message id declared by more than one package

validate_contexts() runs all three and never short-circuits, so a single
pass reports every problem.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Sequence

from transync.diagnostics import ContextError, ValidationResult
from transync.enums import ContextErrorCode
from transync.languages.types import MessageId, PackagePath
from transync.sources import ContextRegistry, SourceMessage

__all__ = [
    "find_duplicated_contexts",
    "find_missing_contexts",
    "find_unused_contexts",
    "validate_contexts",
]


def find_missing_contexts(
    registries: Sequence[ContextRegistry],
    source_messages: Sequence[SourceMessage],
    *,
    core_package_path: PackagePath,
) -> list[ContextError]:
    """Report messages whose id has no context in their package nor in the core package."""
    by_package = {registry.package_path: registry for registry in registries}
    core_registry = by_package.get(core_package_path)

    errors: list[ContextError] = []
    for message in source_messages:
        own_registry = by_package.get(message.package_path) if message.package_path else None
        if own_registry is not None and message.id in own_registry:
            continue
        if core_registry is not None and message.id in core_registry:
            continue
        errors.append(
            ContextError(
                code=ContextErrorCode.MISSING_CONTEXT,
                message=f'Missing context "{message.id}" in "{message.file_path}".',
                message_id=message.id,
                file_paths=(message.file_path,),
            )
        )
    return errors


def find_unused_contexts(
    registries: Sequence[ContextRegistry],
    source_messages: Sequence[SourceMessage],
    *,
    core_package_path: PackagePath,
    ignore_unused_core_package_contexts: bool = False,
) -> list[ContextError]:
    """Report context entries no message uses.

    Package contexts are checked against the messages of that package. Core
    contexts are shared, so they are checked against all messages.
    """
    all_ids = {message.id for message in source_messages}
    ids_by_package: dict[PackagePath | None, set[MessageId]] = {}
    for message in source_messages:
        ids_by_package.setdefault(message.package_path, set()).add(message.id)

    errors: list[ContextError] = []
    for registry in registries:
        is_core = registry.package_path == core_package_path
        if is_core and ignore_unused_core_package_contexts:
            continue

        used_ids = all_ids if is_core else ids_by_package.get(registry.package_path, set())
        for message_id in registry.entries:
            if message_id in used_ids:
                continue
            errors.append(
                ContextError(
                    code=ContextErrorCode.UNUSED_CONTEXT,
                    message=f'Unused context "{message_id}" in "{registry.context_file_path}".',
                    message_id=message_id,
                    file_paths=(registry.context_file_path,),
                )
            )
    return errors


def find_duplicated_contexts(registries: Sequence[ContextRegistry]) -> list[ContextError]:
    """Report message ids declared in more than one registry.

    Each id is reported once, listing every context file in registry order.
    """
    files_by_id: dict[MessageId, list[str]] = {}
    for registry in registries:
        for message_id in registry.entries:
            files_by_id.setdefault(message_id, []).append(registry.context_file_path)

    errors: list[ContextError] = []
    for message_id, file_paths in files_by_id.items():
        if len(file_paths) < 2:
            continue
        listed = '", "'.join(file_paths)
        errors.append(
            ContextError(
                code=ContextErrorCode.DUPLICATED_CONTEXT,
                message=f'Duplicated context "{message_id}" in "{listed}".',
                message_id=message_id,
                file_paths=tuple(file_paths),
            )
        )
    return errors


def validate_contexts(
    registries: Sequence[ContextRegistry],
    source_messages: Sequence[SourceMessage],
    *,
    core_package_path: PackagePath,
    ignore_unused_core_package_contexts: bool = False,
) -> ValidationResult:
    """Run every consistency check and collect all errors.

    Args:
        registries: Context registries of all packages, core included
        source_messages: Messages extracted from all source files
        core_package_path: Package holding contexts shared by every package
        ignore_unused_core_package_contexts: Do not report unused core contexts

    Returns:
        Errors in check order: missing, unused, duplicated

    Example:
        >>> result = validate_contexts(registries, messages, core_package_path="packages/core")
        >>> for line in result.format_lines():
        ...     print(line)
        Missing context "Bold" in "packages/basic-styles/src/bold.js".
    """
    errors = [
        *find_missing_contexts(
            registries, source_messages, core_package_path=core_package_path
        ),
        *find_unused_contexts(
            registries,
            source_messages,
            core_package_path=core_package_path,
            ignore_unused_core_package_contexts=ignore_unused_core_package_contexts,
        ),
        *find_duplicated_contexts(registries),
    ]
    return ValidationResult.from_errors(errors)
