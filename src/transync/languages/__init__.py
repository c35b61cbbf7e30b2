"""Language catalogue package.

Submodules:
    types     - PEP 695 type aliases (MessageId, LocaleCode, PackagePath, ...)
    catalogue - Language, get_languages, get_language, get_headers

Python 3.13+.
"""

from .catalogue import (
    Language,
    get_base_language,
    get_headers,
    get_language,
    get_language_by_file_name,
    get_languages,
)
from .types import FileName, LanguageCode, LocaleCode, MessageId, PackagePath, ResourceName

__all__ = [
    "FileName",
    "Language",
    "LanguageCode",
    "LocaleCode",
    "MessageId",
    "PackagePath",
    "ResourceName",
    "get_base_language",
    "get_headers",
    "get_language",
    "get_language_by_file_name",
    "get_languages",
]
