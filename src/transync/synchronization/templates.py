"""Blank translation documents for languages a package does not have yet.

Python 3.13+.
"""

from __future__ import annotations

import datetime
from pathlib import PurePosixPath

from transync.constants import (
    LICENSE_HEADER_TEMPLATE,
    TRANSLATION_FILE_EXTENSION,
    TRANSLATION_FILES_PATH,
)
from transync.documents import TranslationDocument
from transync.languages import Language, get_headers
from transync.languages.types import PackagePath

__all__ = [
    "create_document_template",
    "translation_file_path",
    "translations_directory",
]


def translations_directory(package_path: PackagePath) -> str:
    """Directory holding the translation documents of a package."""
    return str(PurePosixPath(package_path) / TRANSLATION_FILES_PATH)


def translation_file_path(package_path: PackagePath, language: Language) -> str:
    """Path of a package's translation document for a language."""
    file_name = f"{language.file_name}{TRANSLATION_FILE_EXTENSION}"
    return str(PurePosixPath(translations_directory(package_path)) / file_name)


def create_document_template(
    language: Language,
    *,
    skip_license_header: bool = False,
    year: int | None = None,
) -> TranslationDocument:
    """Create an empty document for a language.

    Args:
        language: Language of the document
        skip_license_header: Leave the comment block above the header empty
        year: Copyright year in the license banner (default: current year)
    """
    header_comment = ""
    if not skip_license_header:
        header_comment = LICENSE_HEADER_TEMPLATE.format(
            year=year if year is not None else datetime.date.today().year
        )

    return TranslationDocument(
        headers=get_headers(language),
        entries=[],
        header_comment=header_comment,
    )
