"""Storage access for translation documents and context files.

Components:
    DocumentStorage - Protocol for reading/writing text files (structural typing)
    FileSystemStorage - pathlib-based implementation rooted at a directory

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

__all__ = [
    "DocumentStorage",
    "FileSystemStorage",
]

logger = logging.getLogger(__name__)


class DocumentStorage(Protocol):
    """Protocol for the file operations transync performs.

    Paths are strings as configured by the caller (package paths joined with
    the fixed relative layout). Implementations decide how they map to real
    storage.
    """

    def read(self, path: str) -> str:
        """Read a text file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            OSError: If the file cannot be read
        """

    def write(self, path: str, content: str) -> None:
        """Write a text file, creating parent directories as needed."""

    def exists(self, path: str) -> bool:
        """Check whether a file exists."""

    def is_directory(self, path: str) -> bool:
        """Check whether a directory exists."""

    def list_files(self, directory: str, pattern: str) -> list[str]:
        """List files in a directory matching a glob pattern, sorted."""

    def remove(self, path: str) -> None:
        """Remove a file (no-op if missing)."""

    def remove_tree(self, directory: str) -> None:
        """Remove a directory and everything below it (no-op if missing).

        A symbolic link to a directory is removed without touching its target.
        """


@dataclass(frozen=True, slots=True)
class FileSystemStorage:
    """DocumentStorage on the local file system.

    Relative paths are resolved against root_dir. Files are read and written
    as UTF-8 without newline translation so that serialized documents and
    on-disk bytes compare exactly.

    Attributes:
        root_dir: Directory relative paths are resolved against
            (default: current working directory at construction)
    """

    root_dir: str | None = None
    _root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        root = Path(self.root_dir) if self.root_dir is not None else Path.cwd()
        object.__setattr__(self, "_root", root)

    def _resolve(self, path: str) -> Path:
        return self._root / path

    def read(self, path: str) -> str:
        with self._resolve(path).open(encoding="utf-8", newline="") as file:
            return file.read()

    def write(self, path: str, content: str) -> None:
        full_path = self._resolve(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        with full_path.open("w", encoding="utf-8", newline="") as file:
            file.write(content)
        logger.debug("Wrote %s", path)

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def is_directory(self, path: str) -> bool:
        return self._resolve(path).is_dir()

    def list_files(self, directory: str, pattern: str) -> list[str]:
        base = self._resolve(directory)
        if not base.is_dir():
            return []
        return sorted(
            str(Path(directory) / match.name)
            for match in base.glob(pattern)
            if match.is_file()
        )

    def remove(self, path: str) -> None:
        self._resolve(path).unlink(missing_ok=True)

    def remove_tree(self, directory: str) -> None:
        base = self._resolve(directory)
        if base.is_symlink():
            base.unlink()
        elif base.is_dir():
            shutil.rmtree(base)
        else:
            return
        logger.debug("Removed %s", directory)
