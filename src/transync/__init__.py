"""transync - Translation lifecycle engine for multi-package products.

Keeps every package's gettext translation documents consistent with its
context registry and the messages found in source files, and moves the
documents to and from a translation-management service (Transifex API v3).

Public API:
    synchronize_translations - Validate contexts, then synchronize documents
    transfer_translations - Upload sources / download translations
    move_translations - Move messages between packages
    SynchronizeOptions, TransportOptions - Run options
    TransferDirection - Upload or download

Exceptions:
    TransyncError - Base exception class
    ConfigurationError - Missing or invalid option
    UnknownLanguageError - Locale outside the language catalogue
    DocumentError - Unreadable or corrupt file
    TransportError - Failed request to the translation service

Submodules:
    transync.languages - Language catalogue and plural rules
    transync.documents - Document model, PO codec, storage
    transync.sources - Context registries and source messages
    transync.synchronization - Validator, synchronizer, mover
    transync.transport - Remote jobs, orchestrator, Transifex client
"""

# Essential Public API - Minimal exports for clean namespace
from .api import (
    SynchronizationReport,
    move_translations,
    synchronize_translations,
    transfer_translations,
)
from .config import SynchronizeOptions, TransportOptions
from .diagnostics import (
    ConfigurationError,
    DocumentError,
    TransportError,
    TransyncError,
    UnknownLanguageError,
)
from .enums import TransferDirection

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("transync")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "ConfigurationError",
    "DocumentError",
    "SynchronizationReport",
    "SynchronizeOptions",
    "TransferDirection",
    "TransportError",
    "TransportOptions",
    "TransyncError",
    "UnknownLanguageError",
    "__version__",
    "move_translations",
    "synchronize_translations",
    "transfer_translations",
]
