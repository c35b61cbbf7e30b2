"""Shared constants for transync.

Single source of truth for on-disk layout, translation file headers,
license banners and remote transport defaults. Placing constants here
avoids circular imports between the synchronization and transport
packages.

Constants are grouped by domain:
- Layout: Relative locations of context files and translation documents
- Headers: Fixed values written into every translation document
- Banners: Comment blocks placed at the top of translation documents
- Transport: Polling and staggering defaults for remote jobs

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Layout
    "CONTEXT_FILE_PATH",
    "TRANSLATION_FILES_PATH",
    "TRANSLATION_FILE_EXTENSION",
    "FAILED_DOWNLOADS_FILE_NAME",
    "FAILED_UPLOADS_FILE_NAME",
    # Headers
    "BASE_LANGUAGE_CODE",
    "CONTENT_TYPE_HEADER",
    "PERSONAL_DATA_HEADERS",
    # Banners
    "LICENSE_HEADER_TEMPLATE",
    "CONTRIBUTION_BANNER_TEMPLATE",
    "SIMPLIFIED_CONTRIBUTION_BANNER_TEMPLATE",
    # Transport
    "TRANSIFEX_API_URL",
    "DEFAULT_POLL_DELAY",
    "DEFAULT_MAX_POLL_ATTEMPTS",
    "DEFAULT_ISSUANCE_STAGGER",
]

# ============================================================================
# LAYOUT
# ============================================================================

# Context registry of a package, relative to the package root.
CONTEXT_FILE_PATH: str = "lang/contexts.json"

# Directory holding one translation document per language.
TRANSLATION_FILES_PATH: str = "lang/translations"

TRANSLATION_FILE_EXTENSION: str = ".po"

# Failure records written to the working directory by the transfer pipeline.
# A re-run processes only what these files list.
FAILED_DOWNLOADS_FILE_NAME: str = ".transifex-failed-downloads.json"
FAILED_UPLOADS_FILE_NAME: str = ".transifex-failed-uploads.json"

# ============================================================================
# HEADERS
# ============================================================================

# Source language of every message. Its document is the ground truth for
# drift detection and the remote service stores it as the resource strings.
BASE_LANGUAGE_CODE: str = "en"

CONTENT_TYPE_HEADER: str = "text/plain; charset=UTF-8"

# Headers carrying translator identity, removed before a downloaded
# document is stored in the repository.
PERSONAL_DATA_HEADERS: tuple[str, ...] = ("Last-Translator",)

# ============================================================================
# BANNERS
# ============================================================================

# Placed on top of documents created from the blank template.
# Format with: year
LICENSE_HEADER_TEMPLATE: str = (
    "Copyright (c) 2003-{year}, the project authors. All rights reserved.\n"
    "For licensing, see LICENSE.md."
)

# Placed on top of documents downloaded from the translation service.
# Format with: organization_name, project_name
CONTRIBUTION_BANNER_TEMPLATE: str = (
    "\n"
    "                                    !!! IMPORTANT !!!\n"
    "\n"
    "        Before you edit this file, please keep in mind that contributing to the project\n"
    "               translations is possible ONLY via the Transifex online service.\n"
    "\n"
    "        To submit your translations, visit "
    "https://app.transifex.com/{organization_name}/{project_name}.\n"
    "\n"
    "                  To learn more, check out the official contributor's guide:\n"
    "    https://docs.transifex.com/getting-started-1/translators\n"
)

SIMPLIFIED_CONTRIBUTION_BANNER_TEMPLATE: str = (
    "\n"
    "                                    !!! IMPORTANT !!!\n"
    "\n"
    "        Before you edit this file, please keep in mind that contributing to the project\n"
    "               translations is possible ONLY via the Transifex online service.\n"
)

# ============================================================================
# TRANSPORT
# ============================================================================

TRANSIFEX_API_URL: str = "https://rest.api.transifex.com"

# Seconds between two polls of the same job.
DEFAULT_POLL_DELAY: float = 3.0

# Attempt ceiling per job. The effective timeout of a job is
# DEFAULT_MAX_POLL_ATTEMPTS * DEFAULT_POLL_DELAY.
DEFAULT_MAX_POLL_ATTEMPTS: int = 10

# Sending several dozen requests at once may exhaust the operating system's
# network stack, so request N is issued N * DEFAULT_ISSUANCE_STAGGER seconds
# after the first one.
DEFAULT_ISSUANCE_STAGGER: float = 0.1
