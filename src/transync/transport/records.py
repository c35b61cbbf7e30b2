"""Failure records kept between transfer runs.

When a transfer run ends with failures, a record file is written to the
working directory. The next run finds it and processes only what it lists;
a run without failures deletes it.

Record layouts:

    .transifex-failed-downloads.json
        [{"resourceName": "core", "languages": [{"code": "pl", "errorMessage": "..."}]}]

    .transifex-failed-uploads.json
        {"core": ["error detail", ...]}

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from transync.diagnostics import DocumentError
from transync.documents import DocumentStorage
from transync.languages.types import LanguageCode, ResourceName
from transync.transport.jobs import FailureDescriptor

__all__ = [
    "read_failed_downloads",
    "read_failed_uploads",
    "write_failed_downloads",
    "write_failed_uploads",
]

logger = logging.getLogger(__name__)


def _read_json(storage: DocumentStorage, path: str) -> object:
    try:
        return json.loads(storage.read(path))
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in failure record: {e.msg} at line {e.lineno}"
        raise DocumentError(msg, path=path) from e


def read_failed_downloads(
    storage: DocumentStorage, path: str
) -> dict[ResourceName, tuple[LanguageCode, ...]] | None:
    """Read the failed-downloads record.

    Returns:
        Language codes per resource, or None when there is no record

    Raises:
        DocumentError: If the record is not valid JSON
    """
    if not storage.exists(path):
        return None

    data = _read_json(storage, path)
    if not isinstance(data, list):
        msg = "Failure record must be a JSON array"
        raise DocumentError(msg, path=path)

    failed: dict[ResourceName, tuple[LanguageCode, ...]] = {}
    for item in data:
        codes = tuple(language["code"] for language in item.get("languages", ()))
        failed[item["resourceName"]] = failed.get(item["resourceName"], ()) + codes
    return failed


def write_failed_downloads(
    storage: DocumentStorage, path: str, failures: Iterable[FailureDescriptor]
) -> None:
    """Write the failed-downloads record, or delete it when there are no failures."""
    grouped: dict[ResourceName, list[dict[str, str]]] = {}
    for failure in failures:
        grouped.setdefault(failure.resource_name, []).append(
            {"code": failure.language_code or "", "errorMessage": failure.error_message}
        )

    if not grouped:
        storage.remove(path)
        return

    data = [
        {"resourceName": resource_name, "languages": languages}
        for resource_name, languages in grouped.items()
    ]
    storage.write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    logger.debug("Recorded failed downloads of %d resource(s) in %s", len(data), path)


def read_failed_uploads(storage: DocumentStorage, path: str) -> tuple[ResourceName, ...] | None:
    """Read the failed-uploads record.

    Returns:
        Names of resources that failed, or None when there is no record

    Raises:
        DocumentError: If the record is not valid JSON
    """
    if not storage.exists(path):
        return None

    data = _read_json(storage, path)
    if not isinstance(data, dict):
        msg = "Failure record must be a JSON object"
        raise DocumentError(msg, path=path)
    return tuple(data)


def write_failed_uploads(
    storage: DocumentStorage, path: str, failures: Iterable[FailureDescriptor]
) -> None:
    """Write the failed-uploads record, or delete it when there are no failures."""
    grouped: dict[ResourceName, list[str]] = {}
    for failure in failures:
        grouped.setdefault(failure.resource_name, []).extend(
            failure.details or (failure.error_message,)
        )

    if not grouped:
        storage.remove(path)
        return

    storage.write(path, json.dumps(grouped, indent=2, ensure_ascii=False) + "\n")
    logger.debug("Recorded failed uploads of %d resource(s) in %s", len(grouped), path)
