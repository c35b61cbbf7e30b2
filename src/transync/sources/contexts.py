"""Context registry loading.

Each package declares the human-readable context of its messages in
``<package>/lang/contexts.json``: a JSON object mapping message id to
context. The core package holds contexts shared by every other package and
is always loaded, even when the caller did not list it.

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from types import MappingProxyType

from transync.constants import CONTEXT_FILE_PATH
from transync.diagnostics import DocumentError
from transync.documents.storage import DocumentStorage
from transync.languages.types import MessageId, PackagePath

__all__ = [
    "ContextRegistry",
    "context_file_path",
    "load_context_registry",
    "load_package_contexts",
    "serialize_context_entries",
]

logger = logging.getLogger(__name__)


def context_file_path(package_path: PackagePath) -> str:
    """Path of a package's context file."""
    return str(PurePosixPath(package_path) / CONTEXT_FILE_PATH)


@dataclass(frozen=True, slots=True)
class ContextRegistry:
    """Message contexts declared by one package.

    Attributes:
        package_path: Package root
        context_file_path: Location of the context file (may not exist)
        entries: Message id -> human-readable context, in file order
    """

    package_path: PackagePath
    context_file_path: str
    entries: Mapping[MessageId, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Freeze the entries mapping."""
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __contains__(self, message_id: object) -> bool:
        return message_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        """True when the package declares no context."""
        return not self.entries


def serialize_context_entries(entries: Mapping[MessageId, str]) -> str:
    """Serialize context entries the way context files are stored (tab indent)."""
    return json.dumps(dict(entries), indent="\t", ensure_ascii=False) + "\n"


def load_context_registry(package_path: PackagePath, *, storage: DocumentStorage) -> ContextRegistry:
    """Load the context registry of one package (empty when it has no context file).

    Raises:
        DocumentError: If the context file is not valid JSON
    """
    path = context_file_path(package_path)
    if not storage.exists(path):
        logger.debug("No context file in %s", package_path)
        return ContextRegistry(package_path=package_path, context_file_path=path)

    try:
        data = json.loads(storage.read(path))
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in context file: {e.msg} at line {e.lineno}"
        raise DocumentError(msg, path=path) from e
    except OSError as e:
        msg = f"Cannot read context file: {e}"
        raise DocumentError(msg, path=path) from e

    if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
        msg = "Context file must be a JSON object mapping message ids to strings"
        raise DocumentError(msg, path=path)

    logger.debug("Loaded %d contexts from %s", len(data), path)
    return ContextRegistry(package_path=package_path, context_file_path=path, entries=data)


def load_package_contexts(
    package_paths: Iterable[PackagePath],
    core_package_path: PackagePath,
    *,
    storage: DocumentStorage,
) -> tuple[ContextRegistry, ...]:
    """Load the context registry of every package.

    The core package is appended when it is not among package_paths. A
    package without a context file yields an empty registry.

    Args:
        package_paths: Package roots, in the order registries are reported
        core_package_path: Root of the package holding shared contexts
        storage: Where the context files are read from

    Returns:
        One registry per package, in package order

    Raises:
        DocumentError: If a context file is not valid JSON
    """
    paths = list(dict.fromkeys(package_paths))
    if core_package_path not in paths:
        paths.append(core_package_path)

    return tuple(load_context_registry(package_path, storage=storage) for package_path in paths)
