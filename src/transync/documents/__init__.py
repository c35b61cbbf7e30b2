"""Translation document package.

Submodules:
    model   - TranslationDocument, TranslationEntry
    pofile  - TranslationCodec protocol, PoCodec (polib), clean_downloaded_document
    storage - DocumentStorage protocol, FileSystemStorage

Python 3.13+.
"""

from .model import TranslationDocument, TranslationEntry
from .pofile import PoCodec, TranslationCodec, clean_downloaded_document
from .storage import DocumentStorage, FileSystemStorage

__all__ = [
    "DocumentStorage",
    "FileSystemStorage",
    "PoCodec",
    "TranslationCodec",
    "TranslationDocument",
    "TranslationEntry",
    "clean_downloaded_document",
]
