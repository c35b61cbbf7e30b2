"""Enumerations for transync type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so they serialize to JSON and
compare against raw API payload values without boilerplate.

Python 3.13+.
"""

from enum import StrEnum


class ContextErrorCode(StrEnum):
    """Kind of consistency error between context registries and source messages."""

    MISSING_CONTEXT = "missing-context"
    """A source message has no context in its package nor in the core package."""

    UNUSED_CONTEXT = "unused-context"
    """A context entry is not used by any source message of its package."""

    DUPLICATED_CONTEXT = "duplicated-context"
    """The same message id is declared in more than one context registry."""

    SOURCE_ERROR = "source-error"
    """The message extractor reported a problem in a source file."""

    DUPLICATED_ENTRY = "duplicated-entry"
    """A move request lists the same message id more than once."""

    MISSING_PACKAGE = "missing-package"
    """A move request names a package that does not exist."""


class JobKind(StrEnum):
    """Kind of remote job."""

    UPLOAD = "upload"
    DOWNLOAD = "download"


class JobStatus(StrEnum):
    """Lifecycle state of a remote job.

    Values match the status strings reported by the translation service.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True for states that end polling."""
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED)


class FailureReason(StrEnum):
    """Why a remote job did not produce a result."""

    CREATE_FAILED = "create-failed"
    """The job (or the remote resource) could not be created at all."""

    RETRY_LIMIT_REACHED = "retry-limit-reached"
    """The job was still not ready after the attempt ceiling."""

    DOWNLOAD_FAILED = "download-failed"
    """The service answered a download poll with an error status."""

    UPLOAD_FAILED = "upload-failed"
    """The service rejected the uploaded content or a status poll failed."""

    INVALID_DOCUMENT = "invalid-document"
    """A downloaded document could not be parsed."""


class TransferDirection(StrEnum):
    """Direction of a transfer between the repository and the service."""

    UPLOAD = "upload"
    DOWNLOAD = "download"


__all__ = [
    "ContextErrorCode",
    "FailureReason",
    "JobKind",
    "JobStatus",
    "TransferDirection",
]
