"""Language catalogue: supported locales and their plural rules.

The catalogue is an immutable table built once per process. Plural form
counts and selection formulas come from Babel's CLDR-derived gettext
tables, keyed by the base language code of each locale.

Lookups never fall back silently: a locale that is not in the catalogue
raises UnknownLanguageError.

Python 3.13+. Depends on Babel for plural data.
"""

from __future__ import annotations

import functools
import gettext
from collections.abc import Callable
from dataclasses import dataclass, field

from babel.messages.plurals import get_plural

from transync.constants import BASE_LANGUAGE_CODE, CONTENT_TYPE_HEADER
from transync.diagnostics import UnknownLanguageError
from transync.languages.types import FileName, LanguageCode, LocaleCode

__all__ = [
    "Language",
    "get_base_language",
    "get_headers",
    "get_language",
    "get_language_by_file_name",
    "get_languages",
]

# Locale code -> translation document name. Regional variants get their own
# document; a few locales collapse onto a shorter name (zh_TW -> zh,
# ne_NP -> ne) for compatibility with existing translation directories.
_LOCALE_FILE_NAMES: dict[LocaleCode, FileName] = {
    "af": "af",
    "ar": "ar",
    "ast": "ast",
    "az": "az",
    "be": "be",
    "bg": "bg",
    "bn": "bn",
    "bs": "bs",
    "ca": "ca",
    "cs": "cs",
    "da": "da",
    "de": "de",
    "de_CH": "de-ch",
    "el": "el",
    "en": "en",
    "en_AU": "en-au",
    "en_GB": "en-gb",
    "eo": "eo",
    "es": "es",
    "es_CO": "es-co",
    "et": "et",
    "eu": "eu",
    "fa": "fa",
    "fi": "fi",
    "fr": "fr",
    "gl": "gl",
    "gu": "gu",
    "he": "he",
    "hi": "hi",
    "hr": "hr",
    "hu": "hu",
    "hy": "hy",
    "id": "id",
    "it": "it",
    "ja": "ja",
    "jv": "jv",
    "kk": "kk",
    "km": "km",
    "kn": "kn",
    "ko": "ko",
    "ku": "ku",
    "lt": "lt",
    "lv": "lv",
    "ms": "ms",
    "nb": "nb",
    "ne_NP": "ne",
    "nl": "nl",
    "pl": "pl",
    "pt": "pt",
    "pt_BR": "pt-br",
    "ro": "ro",
    "ru": "ru",
    "si": "si",
    "sk": "sk",
    "sl": "sl",
    "sq": "sq",
    "sr": "sr",
    "sr@latin": "sr-latn",
    "sv": "sv",
    "th": "th",
    "ti": "ti",
    "tk": "tk",
    "tr": "tr",
    "tt": "tt",
    "ug": "ug",
    "uk": "uk",
    "ur": "ur",
    "uz": "uz",
    "vi": "vi",
    "zh_CN": "zh-cn",
    "zh_TW": "zh",
}


def _language_code(locale_code: LocaleCode) -> LanguageCode:
    """Strip region and script modifiers: 'zh_TW' -> 'zh', 'sr@latin' -> 'sr'."""
    return locale_code.split("@")[0].split("_")[0]


@dataclass(frozen=True, slots=True)
class Language:
    """Supported language with its plural rules.

    Attributes:
        locale_code: Unique key, as used by the translation service
        language_code: Base language of the locale
        file_name: Translation document name without extension
        number_of_plural_forms: Count of grammatically distinct plural forms
        plural_expression: gettext plural expression (C syntax) selecting
            the form index for a quantity n

    Example:
        >>> polish = get_language("pl")
        >>> polish.number_of_plural_forms
        3
        >>> polish.plural_form(5)
        2
        >>> polish.plural_forms_header
        'nplurals=3; plural=(n==1 ? 0 : n%10>=2 && n%10<=4 && (n%100<10 || n%100>=20) ? 1 : 2);'
    """

    locale_code: LocaleCode
    language_code: LanguageCode
    file_name: FileName
    number_of_plural_forms: int
    plural_expression: str
    _plural_function: Callable[[int], int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Compile the plural expression once at construction."""
        object.__setattr__(self, "_plural_function", gettext.c2py(self.plural_expression))

    def plural_form(self, n: int) -> int:
        """Select the plural form index for quantity n."""
        return self._plural_function(n)

    @property
    def plural_forms_header(self) -> str:
        """Value of the Plural-Forms header for this language."""
        return f"nplurals={self.number_of_plural_forms}; plural={self.plural_expression};"

    @property
    def is_base(self) -> bool:
        """True for the source language of all messages."""
        return self.locale_code == BASE_LANGUAGE_CODE


def _create_language(locale_code: LocaleCode, file_name: FileName) -> Language:
    language_code = _language_code(locale_code)
    plural = get_plural(language_code)
    return Language(
        locale_code=locale_code,
        language_code=language_code,
        file_name=file_name,
        number_of_plural_forms=plural.num_plurals,
        plural_expression=plural.plural_expr,
    )


@functools.cache
def get_languages() -> tuple[Language, ...]:
    """Get all supported languages, in catalogue order.

    Built once per process; Babel loads plural data on first call.
    """
    return tuple(
        _create_language(locale_code, file_name)
        for locale_code, file_name in _LOCALE_FILE_NAMES.items()
    )


@functools.cache
def _languages_by_locale() -> dict[LocaleCode, Language]:
    return {language.locale_code: language for language in get_languages()}


@functools.cache
def _languages_by_file_name() -> dict[FileName, Language]:
    return {language.file_name: language for language in get_languages()}


def get_language(locale_code: LocaleCode, *, source: str | None = None) -> Language:
    """Get a language by its locale code.

    Args:
        locale_code: Locale code (e.g., 'pl', 'zh_TW')
        source: Optional description of where the code was found, used in
            the error message

    Returns:
        The catalogue entry

    Raises:
        UnknownLanguageError: If the locale is not in the catalogue
    """
    try:
        return _languages_by_locale()[locale_code]
    except KeyError:
        raise UnknownLanguageError(locale_code, source) from None


def get_language_by_file_name(file_name: FileName) -> Language:
    """Get a language by its translation document name (e.g., 'zh-cn').

    Raises:
        UnknownLanguageError: If no language uses this file name
    """
    try:
        return _languages_by_file_name()[file_name]
    except KeyError:
        raise UnknownLanguageError(file_name) from None


def get_base_language() -> Language:
    """Get the source language of all messages."""
    return get_language(BASE_LANGUAGE_CODE)


def get_headers(language: Language) -> dict[str, str]:
    """Build the header block of a translation document for a language.

    Headers are always generated from the catalogue and never hand-edited.
    """
    return {
        "Language": language.locale_code,
        "Plural-Forms": language.plural_forms_header,
        "Content-Type": CONTENT_TYPE_HEADER,
    }
