"""Context validation and translation document synchronization.

Submodules:
    validator    - validate_contexts (missing / unused / duplicated context)
    templates    - Blank documents and translation file paths
    synchronizer - synchronize, SynchronizationResult
    move         - move_translations, MoveEntry

Python 3.13+.
"""

from .move import MoveEntry, move_translations, validate_move_entries
from .synchronizer import SynchronizationResult, synchronize, synchronize_package
from .templates import create_document_template, translation_file_path, translations_directory
from .validator import validate_contexts

__all__ = [
    "MoveEntry",
    "SynchronizationResult",
    "create_document_template",
    "move_translations",
    "synchronize",
    "synchronize_package",
    "translation_file_path",
    "translations_directory",
    "validate_contexts",
    "validate_move_entries",
]
