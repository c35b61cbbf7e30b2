"""Type aliases for the localization domain.

Provides semantic type aliases used throughout transync and by user code
when annotating calls into the public API.

Python 3.13+. Zero external dependencies.
"""



__all__ = [
    "FileName",
    "LanguageCode",
    "LocaleCode",
    "MessageId",
    "PackagePath",
    "ResourceName",
]

type MessageId = str
"""Identifier of a translatable message (e.g., 'Bold', 'ITEM_COUNT')."""

type LocaleCode = str
"""Locale code as used by the translation service (e.g., 'pl', 'zh_TW', 'sr@latin')."""

type LanguageCode = str
"""Base language of a locale (e.g., 'zh' for 'zh_TW')."""

type FileName = str
"""Translation document name without extension (e.g., 'zh-cn', 'pt-br')."""

type PackagePath = str
"""Path to a package root, as configured by the caller."""

type ResourceName = str
"""Name of a resource on the translation service (usually the package name)."""
